"""Components - Interactive control rows as plain payload dicts

Rows and controls use the remote API's JSON shape:

    {"type": 1, "components": [{"type": 2, "style": 1, "custom_id": "next-page-0", "label": "Forward"}]}

RESPONSIBILITY:
- Name the component types and button styles
- Build the reserved rows the menu core relies on (paging, back, confirm/cancel)
- Answer "is this control actionable?"

DOES NOT:
- Classify ids (action_ids' job)
- Send anything anywhere
"""

from enum import IntEnum
from typing import Dict, Any, List, Optional


Component = Dict[str, Any]
ActionRow = Dict[str, Any]


class ComponentType(IntEnum):
    ACTION_ROW = 1
    BUTTON = 2
    STRING_SELECT = 3
    TEXT_INPUT = 4
    USER_SELECT = 5
    ROLE_SELECT = 6
    MENTIONABLE_SELECT = 7
    CHANNEL_SELECT = 8


class ButtonStyle(IntEnum):
    PRIMARY = 1
    SECONDARY = 2
    SUCCESS = 3
    DANGER = 4
    LINK = 5
    PREMIUM = 6


# Styles that never produce an activation id
NON_ACTIONABLE_STYLES = frozenset({ButtonStyle.LINK, ButtonStyle.PREMIUM})


def is_button(component: Optional[Component]) -> bool:
    """Clickable button that carries a custom_id (link/premium excluded)."""
    if not component:
        return False
    return (
        component.get("type") == ComponentType.BUTTON
        and component.get("style") not in NON_ACTIONABLE_STYLES
    )


def is_string_select(component: Optional[Component]) -> bool:
    return bool(component) and component.get("type") == ComponentType.STRING_SELECT


def button(
    custom_id: str,
    label: str,
    style: ButtonStyle = ButtonStyle.SECONDARY,
    emoji: Optional[str] = None,
    disabled: bool = False,
) -> Component:
    """Build a single button component."""
    component: Component = {
        "type": int(ComponentType.BUTTON),
        "style": int(style),
        "label": label,
        "custom_id": custom_id,
    }
    if emoji:
        component["emoji"] = {"name": emoji}
    if disabled:
        component["disabled"] = True
    return component


def link_button(url: str, label: str) -> Component:
    return {"type": int(ComponentType.BUTTON), "style": int(ButtonStyle.LINK), "label": label, "url": url}


def string_select(
    custom_id: str,
    options: List[Dict[str, Any]],
    placeholder: Optional[str] = None,
    min_values: int = 1,
    max_values: int = 1,
) -> Component:
    """Build a string select menu.

    Args:
        custom_id: Activation id for the whole select
        options: [{"label": ..., "value": ...}, ...]
    """
    component: Component = {
        "type": int(ComponentType.STRING_SELECT),
        "custom_id": custom_id,
        "options": list(options),
        "min_values": min_values,
        "max_values": max_values,
    }
    if placeholder:
        component["placeholder"] = placeholder
    return component


def action_row(*components: Component) -> ActionRow:
    """Wrap components into one action row."""
    return {"type": int(ComponentType.ACTION_ROW), "components": list(components)}


def row_ids(row: ActionRow) -> List[str]:
    """custom_ids of every actionable control in a row."""
    ids = []
    for component in row.get("components", []):
        if is_string_select(component) or is_button(component):
            if component.get("custom_id"):
                ids.append(component["custom_id"])
    return ids


def spawn_back_button_row(id: str = "basic") -> ActionRow:
    """A single "Go Back" button: `back-{id}`."""
    return action_row(button(f"back-{id}", "Go Back", ButtonStyle.SECONDARY))


def spawn_user_choice_row(
    id: str,
    confirm_style: ButtonStyle = ButtonStyle.SUCCESS,
    confirm_label: str = "",
    cancel_style: ButtonStyle = ButtonStyle.DANGER,
    cancel_label: str = "",
) -> ActionRow:
    """Confirm/cancel pair: `confirm-{id}` and `cancel-{id}`."""
    return action_row(
        button(f"confirm-{id}", f"Confirm {confirm_label}".strip(), confirm_style),
        button(f"cancel-{id}", f"Cancel {cancel_label}".strip(), cancel_style),
    )


def spawn_base_paging_row(
    id: Optional[str] = None,
    use_emoji: bool = False,
    use_cancel: bool = False,
) -> ActionRow:
    """Paging control row using the reserved ids.

    `back-page[-id]`, optional `cancel-page[-id]`, `next-page[-id]`.
    The cancel button is not a paging action and is excluded from
    Paginator.base_row_ids.
    """
    suffix = f"-{id}" if id else ""

    buttons = [
        button(f"back-page{suffix}", "Backward", ButtonStyle.PRIMARY, emoji="◀️" if use_emoji else None)
    ]
    if use_cancel:
        buttons.append(
            button(f"cancel-page{suffix}", "Cancel", ButtonStyle.SECONDARY, emoji="*️⃣" if use_emoji else None)
        )
    buttons.append(
        button(f"next-page{suffix}", "Forward", ButtonStyle.PRIMARY, emoji="▶️" if use_emoji else None)
    )
    return action_row(*buttons)
