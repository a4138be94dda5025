"""MenuManager - Frame stack state machine for one interactive message

A menu is a single message that is edited in place as the user moves through
frames. Each frame is pushed with its own action table, derived once from its
control rows, and an active context recording whether a Paginator is grafted
onto it.

    menu = await MenuManager.create_anchor(interaction, root_frame)

    async for activation in menu.buttons:
        action = menu.analyze_action(activation.custom_id)
        if action is MenuAction.PAGE:
            await menu.frame_page_change(activation.custom_id)
        elif action is MenuAction.NEXT:
            await menu.frame_forward(next_frame)
        elif action is MenuAction.BACK:
            await menu.frame_backward()
        elif action is MenuAction.CANCEL:
            await menu.destroy()

INVARIANTS:
- The stack is never empty; the root frame cannot be popped
- Frame, action table and context are pushed/popped together as one FrameEntry
- Control-row ids of every registered pager are paging ids on every frame
- The paging overlay always belongs to the top entry: every transition that
  changes the stack position re-injects or clears it
- Paging never changes the stack depth

DOES NOT:
- Decide which frame comes next (the caller's job)
- Guard against two activations being handled at once (the caller's job)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from core.action_ids import ActionClassifier, ActionId, ActionKind
from core.components import ActionRow, is_button, is_string_select, spawn_base_paging_row
from core.exceptions import ConfigurationError, MenuError, StateError, TransientIOError
from core.menu_config import get_menu_settings
from core.paginator import Paginator
from gui.collectors import AnchorResponse, CollectorOptions, spawn_collector
from gui.message import AnchorMessage, ComponentCollector, Interaction, handle_catch_delete


Frame = Mapping[str, Any]


class MenuAction(str, Enum):
    """What the caller should do with an activation."""
    PAGE = "PAGE"
    NEXT = "NEXT"
    BACK = "BACK"
    CANCEL = "CANCEL"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class FrameActions:
    """Ids of one frame that trigger each navigation intent."""
    next: Tuple[str, ...] = ()
    back: Tuple[str, ...] = ()
    cancel: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ActiveContext:
    """What a stack position displays: its frame, optionally with a pager injected."""
    display: Frame
    pager: Optional[str] = None


@dataclass(frozen=True)
class FrameEntry:
    frame: Frame
    actions: FrameActions
    context: ActiveContext


@dataclass(frozen=True)
class FrameForwardOptions:
    # A registered pager id, or True for the default pager id
    use_pager: Union[str, bool, None] = None


def _validate_frame(contents: Any) -> None:
    """Shape check only: a mapping with a list of action rows."""
    if not isinstance(contents, Mapping):
        raise ConfigurationError(f"Frame must be a mapping, got {type(contents).__name__}")
    rows = contents.get("components")
    if not isinstance(rows, list):
        raise ConfigurationError("Frame is missing its `components` row list")
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping) or not isinstance(row.get("components"), list):
            raise ConfigurationError(f"Frame row {index} is not an action row")


class MenuManager:
    """Frame stack, action tables and pager registry for one anchor message.

    Use MenuManager.create_anchor() to start a menu; the constructor is for
    wiring an already-sent anchor (and for tests).
    """

    def __init__(
        self,
        contents: Frame,
        anchor: Optional[AnchorResponse] = None,
        ignore_actions: Iterable[str] = (),
    ):
        _validate_frame(contents)

        self.anchor_msg: Optional[AnchorMessage] = anchor.anchor_msg if anchor else None
        self.buttons: Optional[ComponentCollector] = anchor.buttons if anchor else None
        self.strings: Optional[ComponentCollector] = anchor.strings if anchor else None

        self._classifier = ActionClassifier(ignore_actions)
        self._pagers: Dict[str, Paginator] = {}
        # Pager whose current page is the "active page" view
        self._active_page_pager: Optional[str] = None
        # Pager injected into the top entry, None when the top entry is plain
        self._overlay: Optional[str] = None

        self._entries: List[FrameEntry] = [
            FrameEntry(
                frame=contents,
                actions=self._process_action_list(contents["components"]),
                context=ActiveContext(display=contents),
            )
        ]

    @classmethod
    async def create_anchor(
        cls,
        interaction: Interaction,
        contents: Frame,
        options: Optional[CollectorOptions] = None,
        ignore_actions: Iterable[str] = (),
    ) -> "MenuManager":
        """Send the root frame, attach collectors and return the menu."""
        _validate_frame(contents)
        anchor = await spawn_collector(interaction, contents, options)
        logging.info(f"MenuManager: anchored menu on message {anchor.anchor_msg.id}")
        return cls(contents, anchor, ignore_actions=ignore_actions)

    # =========================================================================
    # VIEWS
    # =========================================================================

    @property
    def position(self) -> int:
        """Current stack depth (>= 1)."""
        return len(self._entries)

    @property
    def frame(self) -> Frame:
        """Top frame as given by the caller."""
        return self._entries[-1].frame

    @property
    def context(self) -> ActiveContext:
        return self._entries[-1].context

    @property
    def actions(self) -> FrameActions:
        return self._entries[-1].actions

    @property
    def overlay(self) -> Optional[str]:
        """Id of the pager injected into the top frame, if any."""
        return self._overlay

    @property
    def paging_actions(self):
        """Control-row ids of every registered pager."""
        return self._classifier.paging_actions

    @property
    def frame_page(self) -> Dict[str, Any]:
        """Active page with the top frame's rows appended after the page rows."""
        if self._active_page_pager is None:
            return {"content": "No paging display found!"}

        view = self._pagers[self._active_page_pager].page
        view["components"] = [*view["components"], *self.frame["components"]]

        max_rows = get_menu_settings().max_action_rows
        if len(view["components"]) > max_rows:
            logging.warning(
                f"MenuManager: page view has {len(view['components'])} rows, "
                f"more than the {max_rows} the display accepts"
            )
        return view

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    def analyze_action(self, id: str) -> MenuAction:
        """Map an activation id to the action the caller should take.

        Paging is checked first: it injects a display update and must not
        change the active frame.
        """
        if self._classifier.is_pagination(id):
            return MenuAction.PAGE

        actions = self.actions
        if id in actions.next:
            return MenuAction.NEXT
        if id in actions.back:
            return MenuAction.BACK
        if id in actions.cancel:
            return MenuAction.CANCEL
        return MenuAction.UNKNOWN

    def _process_action_list(self, rows: Iterable[ActionRow]) -> FrameActions:
        """Build one frame's action table from its rows.

        A row led by a string select contributes that select's id as NEXT.
        Otherwise every actionable button is classified; reserved ids are
        skipped.
        """
        next_ids: List[str] = []
        back_ids: List[str] = []
        cancel_ids: List[str] = []

        for row in rows:
            components = row.get("components", [])
            if components and is_string_select(components[0]):
                next_ids.append(components[0]["custom_id"])
                continue

            for component in components:
                if not is_button(component) or not component.get("custom_id"):
                    continue
                custom_id = component["custom_id"]
                kind = self._classifier.classify(custom_id)
                if kind is ActionKind.FORWARD:
                    next_ids.append(custom_id)
                elif kind is ActionKind.BACK:
                    back_ids.append(custom_id)
                elif kind is ActionKind.CANCEL:
                    cancel_ids.append(custom_id)

        return FrameActions(next=tuple(next_ids), back=tuple(back_ids), cancel=tuple(cancel_ids))

    # =========================================================================
    # PAGERS
    # =========================================================================

    @property
    def has_pagers(self) -> bool:
        return bool(self._pagers)

    def get_pager(self, id: str) -> Optional[Paginator]:
        return self._pagers.get(id)

    def spawn_page_container(self, contents: Mapping[str, Any], id: Optional[str] = None) -> Paginator:
        """Register a new Paginator under `id`.

        Its control row uses `back-page-{id}` / `next-page-{id}`, which is how
        frame_page_change() finds it again.

        Args:
            contents: Paging content arrays (see Paginator.load_pages)
            id: Defaults to the configured pager id ("0"); needed when using
                more than one Paginator
        """
        settings = get_menu_settings()
        id = settings.default_pager_id if id is None else id

        if not id or "-" in id:
            raise ConfigurationError(f"Paginator ids must be non-empty and contain no '-': {id!r}")
        if id in self._pagers:
            raise ConfigurationError(f"Additional Paginators require unique ids, {id!r} is taken")

        control_row = spawn_base_paging_row(
            id=id,
            use_emoji=settings.paging_row_emoji,
            use_cancel=settings.paging_row_cancel,
        )
        pager = Paginator(contents, control_row)
        self._pagers[id] = pager
        self._classifier.set_paging_actions(
            paging_id for registered in self._pagers.values() for paging_id in registered.base_row_ids
        )

        if self._active_page_pager is None:
            self._active_page_pager = id

        logging.info(f"MenuManager: registered pager {id!r} with {pager.page_count} pages")
        return pager

    def update_page_container(self, contents: Mapping[str, Any], id: Optional[str] = None) -> None:
        """Overwrite the pages of a registered Paginator."""
        id = get_menu_settings().default_pager_id if id is None else id
        pager = self._pagers.get(id)
        if pager is None:
            raise ConfigurationError(f"No Paginator registered for id {id!r}")
        pager.load_pages(contents)

    def _resolve_pager(self, use_pager: Union[str, bool, None]) -> Optional[str]:
        if not use_pager:
            return None
        if not self._pagers:
            raise ConfigurationError("A Paginator must exist before it can be assigned to a context!")

        pager_id = use_pager if isinstance(use_pager, str) else get_menu_settings().default_pager_id
        if pager_id not in self._pagers:
            raise ConfigurationError(f"No Paginator registered for id {pager_id!r}")
        return pager_id

    def _inject_paging_context(self, pager_id: str) -> None:
        self._overlay = pager_id
        self._active_page_pager = pager_id

    def _clear_paging_context(self) -> None:
        # Registered paging ids stay reserved; only the top entry's view changes
        self._overlay = None

    def _apply_top_context(self) -> bool:
        """Re-inject or clear the overlay for the top entry. True if paged."""
        pager_id = self.context.pager
        if pager_id is not None:
            self._inject_paging_context(pager_id)
            return True
        self._clear_paging_context()
        return False

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    async def frame_forward(self, contents: Frame, options: Optional[FrameForwardOptions] = None) -> None:
        """Push `contents` as the new top frame and render it.

        With options.use_pager the named Paginator is injected: its control
        row is added to the frame's actions and the paged view is rendered.
        Nothing is mutated if the pager cannot be resolved.
        """
        _validate_frame(contents)
        pager_id = self._resolve_pager(options.use_pager if options else None)

        rows = list(contents["components"])
        if pager_id is not None:
            self._inject_paging_context(pager_id)
            rows.append(self._pagers[pager_id].base_row)
        else:
            self._clear_paging_context()

        self._entries.append(
            FrameEntry(
                frame=contents,
                actions=self._process_action_list(rows),
                context=ActiveContext(display=contents, pager=pager_id),
            )
        )
        logging.debug(f"MenuManager: forward to position {self.position} (pager={pager_id})")

        await self.frame_refresh(pager_id is not None)

    async def frame_backward(self) -> None:
        """Pop the top frame and render the one below. No-op on the root frame."""
        if self.position == 1:
            return

        self._entries.pop()
        logging.debug(f"MenuManager: back to position {self.position}")

        await self.frame_refresh(self._apply_top_context())

    async def frame_restart(self) -> None:
        """Drop every frame but the root. Pagers are kept as they are."""
        del self._entries[1:]
        logging.debug("MenuManager: restarted at root frame")

        await self.frame_refresh(self._apply_top_context())

    async def frame_refresh(self, paging: bool = False) -> None:
        """Re-render the top frame, or the active page when `paging`."""
        if self.anchor_msg is None:
            raise StateError("Message Reference Failure: anchor message no longer exists!")

        payload = self.frame_page if paging else dict(self.frame)
        try:
            await self.anchor_msg.edit(payload)
        except MenuError:
            raise
        except Exception as e:
            raise TransientIOError("edit", f"Failed to edit message {self.anchor_msg.id}: {e}") from e

    async def frame_page_change(self, full_custom_id: str) -> None:
        """Turn the page of the pager named by the id's trailing token.

        Args:
            full_custom_id: Untouched activation id, e.g. "next-page-0"
        """
        if not self._pagers:
            raise StateError(
                "No paginators have been created yet! Create one first using spawn_page_container()"
            )

        action = ActionId.parse(full_custom_id)
        pager = self._pagers.get(action.association)
        if pager is None:
            raise ConfigurationError(f"No Paginator registered for id {action.association!r}")

        pager.change_page(action.operation)
        self._active_page_pager = action.association

        await self.frame_refresh(True)

    async def destroy(self) -> None:
        """Stop collectors and delete the anchor message. Safe to call twice."""
        if self.anchor_msg is None:
            return

        if self.buttons is not None:
            self.buttons.stop()
        if self.strings is not None:
            self.strings.stop()

        logging.info(f"MenuManager: destroying menu on message {self.anchor_msg.id}")
        # Anchor is kept on failure so the caller can retry
        await handle_catch_delete(self.anchor_msg)
        self.anchor_msg = None
