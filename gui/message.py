"""Message Layer - Collaborator interfaces and send/delete helpers

The menu core never talks to a chat platform directly. It talks to these
interfaces, which a platform binding implements (gui.web.server is the
bundled one).

RESPONSIBILITY:
- Define the render collaborator (AnchorMessage, MessageChannel, Interaction)
- Define the activation subscription (ComponentCollector yielding Activation)
- Send a payload as reply / follow-up / channel post
- Delete a message, treating "already deleted" as success

DOES NOT:
- Decide what to display (MenuManager's job)
- Retry anything
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Dict, Literal, Optional, Tuple

from core.exceptions import StateError, TransientIOError, is_message_gone
from core.menu_config import get_menu_settings


Payload = Dict[str, Any]
SendAs = Optional[Literal["Reply", "FollowUp"]]


@dataclass(frozen=True)
class Activation:
    """One control activation delivered by a collector."""
    custom_id: str
    user_id: str
    component_type: int
    values: Tuple[str, ...] = field(default_factory=tuple)


ActivationFilter = Callable[[Activation], bool]


class ComponentCollector(ABC):
    """Stream of activations for one message, ended by timeout or stop().

    Usage:
        async for activation in collector:
            ...
    """

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[Activation]:
        raise NotImplementedError

    @abstractmethod
    def stop(self, reason: str = "user") -> None:
        """End the stream. Safe to call more than once."""
        raise NotImplementedError

    @property
    @abstractmethod
    def end_reason(self) -> Optional[str]:
        """None while running, else "time" / "user" / custom reason."""
        raise NotImplementedError


class AnchorMessage(ABC):
    """A sent message the menu edits in place."""

    @property
    @abstractmethod
    def id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    async def edit(self, payload: Payload) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self) -> None:
        """Delete the message. Raise MessageGoneError if it no longer exists."""
        raise NotImplementedError

    @abstractmethod
    def create_component_collector(
        self,
        component_type: int,
        filter: ActivationFilter,
        time_ms: int,
    ) -> ComponentCollector:
        raise NotImplementedError


class MessageChannel(ABC):

    @property
    @abstractmethod
    def id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def is_sendable(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def send(self, payload: Payload) -> AnchorMessage:
        raise NotImplementedError


class Interaction(ABC):
    """The command invocation a menu is started from."""

    @property
    @abstractmethod
    def user_id(self) -> str:
        raise NotImplementedError

    @property
    @abstractmethod
    def channel(self) -> Optional[MessageChannel]:
        raise NotImplementedError

    @abstractmethod
    async def reply(self, payload: Payload) -> None:
        raise NotImplementedError

    @abstractmethod
    async def fetch_reply(self) -> AnchorMessage:
        raise NotImplementedError

    @abstractmethod
    async def follow_up(self, payload: Payload) -> AnchorMessage:
        raise NotImplementedError


async def send_message(
    interaction: Interaction,
    contents: Payload,
    send_as: SendAs = None,
) -> AnchorMessage:
    """Send `contents` and return the sent message.

    Args:
        interaction: Active interaction
        contents: Payload to send
        send_as: None posts to the interaction's channel, "Reply" replies to the
                 interaction, "FollowUp" sends a follow-up
    """
    if send_as is None:
        channel = interaction.channel
        if channel is None or not channel.is_sendable():
            channel_id = channel.id if channel is not None else "0"
            raise StateError(f"Failed to send a message: Channel with id {channel_id} is not sendable")
        return await channel.send(contents)

    if send_as == "Reply":
        await interaction.reply(contents)
        return await interaction.fetch_reply()
    if send_as == "FollowUp":
        return await interaction.follow_up(contents)

    raise ValueError(f"Unknown send_as: {send_as!r}")


async def handle_catch_delete(anchor_msg: AnchorMessage) -> None:
    """Delete `anchor_msg`, ignoring the "Unknown Message" error.

    A missing message means it is already deleted. Any other failure is
    raised as TransientIOError.
    """
    try:
        await anchor_msg.delete()
    except Exception as e:
        if is_message_gone(e):
            logging.debug(f"Message {anchor_msg.id} already deleted")
            return
        raise TransientIOError("delete", f"Failed to delete message {anchor_msg.id}: {e}") from e


async def _delete_after(anchor_msg: AnchorMessage, delay_s: float) -> None:
    await asyncio.sleep(delay_s)
    await handle_catch_delete(anchor_msg)


async def send_timed_channel_message(
    interaction: Interaction,
    contents: Payload,
    send_as: SendAs = None,
    time_limit_ms: Optional[int] = None,
) -> "asyncio.Task[None]":
    """Send `contents` and schedule its deletion after the time limit.

    Returns:
        The scheduled deletion task (cancel it to keep the message)
    """
    anchor_msg = await send_message(interaction, contents, send_as)
    limit = time_limit_ms if time_limit_ms else get_menu_settings().time_limit_ms
    return asyncio.create_task(_delete_after(anchor_msg, limit / 1000))
