"""Action Ids - Activation id decomposition and classification

Activation ids are hyphen-delimited ASCII tokens:

    back-basic              action-association
    next-page-0             direction-page-pager
    plus-10k-amount         operation-magnitude-association

This is the deterministic router - every id falls into exactly ONE kind.

Classification order (first match wins):
1. PAGINATION - id is in the injected paging overlay
2. IGNORED    - id is in the static ignore list
3. BACK       - starts with "back-"
4. CANCEL     - starts with "cancel"
5. FORWARD    - everything else

RESERVED = PAGINATION or IGNORED. Reserved ids never enter a frame's tables.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple


SEPARATOR = "-"

BACK_PREFIX = "back-"
CANCEL_PREFIX = "cancel"
CONFIRM_PREFIX = "confirm-"
RESET_PREFIX = "reset-"
NEXT_PAGE_ID = "next-page"
BACK_PAGE_ID = "back-page"


class ActionKind(Enum):
    """Closed set of id classes."""
    PAGINATION = "pagination"
    IGNORED = "ignored"
    BACK = "back"
    CANCEL = "cancel"
    FORWARD = "forward"
    UNKNOWN = "unknown"  # Missing/empty id only

    @property
    def is_reserved(self) -> bool:
        return self in (ActionKind.PAGINATION, ActionKind.IGNORED)


@dataclass(frozen=True)
class ActionId:
    """Typed view of an activation id's hyphen segments.

    `operation` is the leading token, `association` the trailing token.
    `magnitude` is only set for three-part ids.
    """
    raw: str
    segments: Tuple[str, ...]

    @classmethod
    def parse(cls, raw: str) -> "ActionId":
        return cls(raw=raw, segments=tuple(raw.split(SEPARATOR)))

    @property
    def operation(self) -> str:
        return self.segments[0]

    @property
    def association(self) -> str:
        return self.segments[-1]

    @property
    def magnitude(self) -> Optional[str]:
        if len(self.segments) == 3:
            return self.segments[1]
        return None

    def __str__(self):
        return self.raw


class ActionClassifier:
    """Classifies activation ids against the reserved id sets.

    INVARIANTS:
    - classify() is a pure function of (id, paging overlay, ignore list)
    - paging_actions is only ever replaced wholesale, never edited in place
    """

    def __init__(self, ignore_actions: Iterable[str] = ()):
        self._paging_actions: FrozenSet[str] = frozenset()
        self._ignore_actions: FrozenSet[str] = frozenset(ignore_actions)

    @property
    def paging_actions(self) -> FrozenSet[str]:
        return self._paging_actions

    @property
    def ignore_actions(self) -> FrozenSet[str]:
        return self._ignore_actions

    def set_paging_actions(self, ids: Iterable[str]) -> None:
        """Replace the paging overlay."""
        self._paging_actions = frozenset(ids)

    def is_pagination(self, id: str) -> bool:
        return id in self._paging_actions

    def is_ignored(self, id: str) -> bool:
        return id in self._ignore_actions

    def is_reserved(self, id: str) -> bool:
        return self.is_pagination(id) or self.is_ignored(id)

    def is_back_action(self, id: str) -> bool:
        return not self.is_reserved(id) and id.startswith(BACK_PREFIX)

    def is_cancel_action(self, id: str) -> bool:
        return not self.is_reserved(id) and id.startswith(CANCEL_PREFIX)

    def is_forward_action(self, id: str) -> bool:
        return (
            not self.is_back_action(id)
            and not self.is_cancel_action(id)
            and not self.is_reserved(id)
        )

    def classify(self, id: Optional[str]) -> ActionKind:
        if not id:
            return ActionKind.UNKNOWN
        if self.is_pagination(id):
            return ActionKind.PAGINATION
        if self.is_ignored(id):
            return ActionKind.IGNORED
        if self.is_back_action(id):
            return ActionKind.BACK
        if self.is_cancel_action(id):
            return ActionKind.CANCEL
        return ActionKind.FORWARD
