"""Collectors - Attach activation subscriptions to a freshly sent anchor

spawn_collector() is the one call a menu needs at startup:

    anchor = await spawn_collector(interaction, contents, options)
    async for activation in anchor.buttons:
        ...

By default only the user who started the flow is listened to.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Tuple, Union

from core.components import ComponentType
from core.menu_config import get_menu_settings
from gui.message import (
    Activation,
    ActivationFilter,
    AnchorMessage,
    ComponentCollector,
    Interaction,
    Payload,
    SendAs,
    send_message,
)


@dataclass
class CollectorOptions:
    """Send and subscription options. None means "use MenuConfig"."""
    time_limit_ms: Optional[int] = None
    send_as: SendAs = None
    collector_type: Optional[Literal["Button", "String", "Both"]] = None
    # A user id to listen to, or a predicate over activations
    filter_with: Optional[Union[str, Callable[[Activation], bool]]] = None


@dataclass
class AnchorResponse:
    anchor_msg: AnchorMessage
    buttons: ComponentCollector
    strings: Optional[ComponentCollector] = None


def _build_filter(interaction: Interaction, options: CollectorOptions) -> ActivationFilter:
    if callable(options.filter_with):
        return options.filter_with
    user_id = options.filter_with if isinstance(options.filter_with, str) else interaction.user_id
    return lambda activation: activation.user_id == user_id


def create_component_collector(
    interaction: Interaction,
    anchor_msg: AnchorMessage,
    options: Optional[CollectorOptions] = None,
) -> Tuple[ComponentCollector, Optional[ComponentCollector]]:
    """Create the requested collectors on `anchor_msg`.

    A button collector is always created; a string-select collector only for
    collector_type "String" or "Both".

    Returns:
        (buttons, strings)
    """
    options = options or CollectorOptions()
    settings = get_menu_settings()

    time_ms = options.time_limit_ms or settings.time_limit_ms
    collector_type = options.collector_type or settings.collector_type
    activation_filter = _build_filter(interaction, options)

    buttons = anchor_msg.create_component_collector(
        int(ComponentType.BUTTON), activation_filter, time_ms
    )
    strings = None
    if collector_type in ("String", "Both"):
        strings = anchor_msg.create_component_collector(
            int(ComponentType.STRING_SELECT), activation_filter, time_ms
        )

    logging.debug(
        f"Collectors attached to {anchor_msg.id}: type={collector_type}, time={time_ms}ms"
    )
    return buttons, strings


async def spawn_collector(
    interaction: Interaction,
    contents: Payload,
    options: Optional[CollectorOptions] = None,
) -> AnchorResponse:
    """Send `contents` and attach collectors to the sent message."""
    options = options or CollectorOptions()
    send_as = options.send_as if options.send_as is not None else get_menu_settings().send_as

    anchor_msg = await send_message(interaction, contents, send_as)
    buttons, strings = create_component_collector(interaction, anchor_msg, options)
    return AnchorResponse(anchor_msg=anchor_msg, buttons=buttons, strings=strings)
