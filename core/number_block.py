"""NumberBlock - Arithmetic button grid with a running total

Builds a 3x5 grid of arithmetic buttons plus a control row:

    minus-10-<cid>    minus-1-<cid>    mult-10-<cid>   plus-1-<cid>    plus-10-<cid>
    minus-1k-<cid>    minus-100-<cid>  mult-100-<cid>  plus-100-<cid>  plus-1k-<cid>
    minus-100k-<cid>  minus-10k-<cid>  mult-1k-<cid>   plus-10k-<cid>  plus-100k-<cid>
    back-<cid>        confirm-<cid>    reset-<cid>

Every id ends with the caller-chosen control id so several blocks can share
one display. evaluate() only reacts to its own ids.
"""

import logging
import operator
from typing import Any, Callable, Dict, List, Optional

from core.action_ids import ActionId
from core.components import ActionRow, ButtonStyle, action_row, button
from core.exceptions import ConfigurationError, InvalidInputError


OPERATIONS: Dict[str, Callable[[int, int], int]] = {
    "minus": operator.sub,
    "mult": operator.mul,
    "plus": operator.add,
}

OPERATION_LABELS = {"minus": "-", "mult": "x", "plus": "+"}

# (operation, magnitude) per grid cell, one tuple per row
GRID_LAYOUT = (
    (("minus", 10), ("minus", 1), ("mult", 10), ("plus", 1), ("plus", 10)),
    (("minus", 1_000), ("minus", 100), ("mult", 100), ("plus", 100), ("plus", 1_000)),
    (("minus", 100_000), ("minus", 10_000), ("mult", 1_000), ("plus", 10_000), ("plus", 100_000)),
)

THOUSAND_SUFFIX = "k"


def format_magnitude(value: int) -> str:
    """10000 -> "10k", 100 -> "100"."""
    if value >= 1_000 and value % 1_000 == 0:
        return f"{value // 1_000}{THOUSAND_SUFFIX}"
    return str(value)


def parse_magnitude(token: str) -> int:
    """ "10k" -> 10000, "100" -> 100.

    Only a trailing "k" is special. Anything else that is not a plain
    integer (e.g. "1k5") is rejected.
    """
    digits, scale = token, 1
    if token.endswith(THOUSAND_SUFFIX):
        digits, scale = token[:-1], 1_000
    if not digits.isdigit():
        raise InvalidInputError(f"Invalid magnitude token: {token!r}")
    return int(digits) * scale


class NumberBlockManager:
    """Running total driven by arithmetic activation ids.

    INVARIANT: total only changes through evaluate() or the total setter.
    """

    def __init__(self, control_id: str, total: int = 0):
        if not control_id or "-" in control_id:
            raise ConfigurationError(
                f"NumberBlock control id must be non-empty and contain no '-': {control_id!r}"
            )
        self.control_id = control_id
        self._total = total

        self._grid_ids: List[str] = [
            f"{op}-{format_magnitude(magnitude)}-{control_id}"
            for grid_row in GRID_LAYOUT
            for op, magnitude in grid_row
        ]
        self.back_id = f"back-{control_id}"
        self.confirm_id = f"confirm-{control_id}"
        self.reset_id = f"reset-{control_id}"

    @property
    def total(self) -> int:
        return self._total

    @total.setter
    def total(self, value: int) -> None:
        self._total = value

    @property
    def ids(self) -> List[str]:
        """Ids evaluate() acts on: the grid plus reset."""
        return [*self._grid_ids, self.reset_id]

    @property
    def control_ids(self) -> List[str]:
        return [self.back_id, self.confirm_id, self.reset_id]

    def owns(self, full_id: str) -> bool:
        return full_id in self._grid_ids or full_id in self.control_ids

    def evaluate(self, full_id: str) -> Optional[int]:
        """Apply the operation encoded in `full_id`.

        Returns:
            The updated total, or None if the id is not an arithmetic/reset id
            of this block.
        """
        if full_id not in self.ids:
            return None

        action = ActionId.parse(full_id)
        if action.association != self.control_id:
            return None

        if full_id == self.reset_id:
            self._total = 0
        else:
            apply = OPERATIONS[action.operation]
            self._total = apply(self._total, parse_magnitude(action.magnitude))

        logging.debug(f"NumberBlock[{self.control_id}]: {full_id} -> {self._total}")
        return self._total

    @property
    def rows(self) -> List[ActionRow]:
        """Grid rows followed by the control row."""
        rows = []
        for grid_row in GRID_LAYOUT:
            buttons = []
            for op, magnitude in grid_row:
                style = ButtonStyle.PRIMARY if op == "mult" else (
                    ButtonStyle.DANGER if op == "minus" else ButtonStyle.SUCCESS
                )
                label = f"{OPERATION_LABELS[op]}{format_magnitude(magnitude)}"
                buttons.append(button(f"{op}-{format_magnitude(magnitude)}-{self.control_id}", label, style))
            rows.append(action_row(*buttons))

        rows.append(action_row(
            button(self.back_id, "Back", ButtonStyle.SECONDARY),
            button(self.confirm_id, "Confirm", ButtonStyle.SUCCESS),
            button(self.reset_id, "Reset", ButtonStyle.DANGER),
        ))
        return rows

    def display(self, title: str = "Amount") -> Dict[str, Any]:
        """Frame payload showing the total above the grid."""
        return {
            "embeds": [{"title": title, "description": f"**{self._total:,}**"}],
            "components": self.rows,
        }
