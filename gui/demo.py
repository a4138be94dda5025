"""Demo Menu - A small shop flow exercising frames, a pager and a number block

Frames:
    root     -> "Browse catalog" (pager injected) | "Pick amount" (number block) | Cancel
    catalog  -> paged items + Go Back
    amount   -> number grid; Confirm returns to root, Back pops

Works with any gui.message collaborator; main_gui.py runs it over the web server.
"""

import logging
from typing import Any, Dict, Optional

from core.components import ButtonStyle, action_row, button, spawn_back_button_row
from core.menu_manager import FrameForwardOptions, MenuAction, MenuManager
from core.number_block import NumberBlockManager
from gui.collectors import CollectorOptions
from gui.message import Interaction


BROWSE_ID = "browse-catalog"
AMOUNT_ID = "pick-amount"
CANCEL_ID = "cancel-demo"
CATALOG_PAGER = "catalog"

CATALOG = (
    ("Lantern", "Keeps the dark at bay."),
    ("Rope", "Fifty feet of hemp."),
    ("Compass", "Points somewhere."),
)


def root_frame() -> Dict[str, Any]:
    return {
        "embeds": [{"title": "Shop", "description": "Browse the catalog or pick an amount."}],
        "components": [
            action_row(
                button(BROWSE_ID, "Browse catalog", ButtonStyle.PRIMARY),
                button(AMOUNT_ID, "Pick amount", ButtonStyle.PRIMARY),
                button(CANCEL_ID, "Close", ButtonStyle.DANGER),
            )
        ],
    }


def catalog_pages() -> Dict[str, Any]:
    return {
        "embeds": [
            {"title": name, "description": blurb, "footer": {"text": f"Item {i + 1}/{len(CATALOG)}"}}
            for i, (name, blurb) in enumerate(CATALOG)
        ]
    }


def catalog_frame() -> Dict[str, Any]:
    return {"components": [spawn_back_button_row("catalog")]}


async def run_demo_menu(interaction: Interaction, options: Optional[CollectorOptions] = None) -> int:
    """Drive the demo menu until it is closed or times out.

    Returns:
        The amount confirmed last (0 if none)
    """
    menu = await MenuManager.create_anchor(interaction, root_frame(), options)
    menu.spawn_page_container(catalog_pages(), id=CATALOG_PAGER)
    block = NumberBlockManager("amount")
    confirmed = 0

    async for activation in menu.buttons:
        custom_id = activation.custom_id
        action = menu.analyze_action(custom_id)

        if action is MenuAction.PAGE:
            await menu.frame_page_change(custom_id)
        elif action is MenuAction.BACK:
            await menu.frame_backward()
        elif action is MenuAction.CANCEL:
            await menu.destroy()
            break
        elif action is MenuAction.NEXT:
            if block.evaluate(custom_id) is not None:
                # Same ids, new total: edit in place without touching the stack
                await menu.anchor_msg.edit(block.display())
            elif custom_id == block.confirm_id:
                confirmed = block.total
                await menu.frame_restart()
            elif custom_id == BROWSE_ID:
                await menu.frame_forward(catalog_frame(), FrameForwardOptions(use_pager=CATALOG_PAGER))
            elif custom_id == AMOUNT_ID:
                await menu.frame_forward(block.display())
        else:
            logging.debug(f"Demo: ignoring unknown activation {custom_id!r}")

    if menu.buttons.end_reason == "time":
        await menu.destroy()

    logging.info(f"Demo: menu finished with amount {confirmed}")
    return confirmed
