"""Paginator - Cyclic cursor over an ordered list of content pages

A Paginator owns:
- Up to three parallel page arrays: embeds, files, components (rows per page)
- A constant control row that is always shown first
- current_page in [0, final_page]

Usage without a MenuManager:

    pager = Paginator({"embeds": [e1, e2, e3]})
    await anchor.edit(pager.page)
    ...
    await anchor.edit(pager.change_page(activation_id.split("-")[0]))

INVARIANTS:
- Every present page array has the same length (checked on load)
- A failed load leaves the paginator exactly as it was
- final_page is the last valid index, so a full "next" cycle visits
  exactly page_count pages
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from core.components import ActionRow, is_button, spawn_base_paging_row
from core.action_ids import CANCEL_PREFIX
from core.exceptions import ConfigurationError, InvalidInputError


PAGE_CONTENT_KEYS = ("embeds", "files")
DIRECTIONS = ("next", "back")


class Paginator:
    """Cyclic content browser that can be grafted onto a menu frame."""

    def __init__(self, paging_data: Mapping[str, Any], control_row: Optional[ActionRow] = None):
        self.control_row: ActionRow = control_row if control_row is not None else spawn_base_paging_row()
        self.current_page: int = 0
        self.final_page: int = 0
        self._content: Dict[str, List[Any]] = {}
        self._rows: Optional[List[List[ActionRow]]] = None
        self.load_pages(paging_data)

    @property
    def page_count(self) -> int:
        return self.final_page + 1

    def load_pages(self, data: Mapping[str, Any]) -> None:
        """Replace all stored pages and rewind to the first one.

        Args:
            data: {"embeds": [...], "files": [...], "components": [[row, ...], ...]}
                  At least one of embeds/files is required. components holds one
                  list of rows per page.

        Raises:
            ConfigurationError: missing content field, mismatched lengths or no pages
        """
        content = {key: list(data[key]) for key in PAGE_CONTENT_KEYS if data.get(key) is not None}
        rows = [list(page_rows) for page_rows in data["components"]] if data.get("components") is not None else None

        if not content:
            raise ConfigurationError(
                "Failed to load Paginator: One of `embeds` or `files` must be present!"
            )

        lengths = {key: len(values) for key, values in content.items()}
        if rows is not None:
            lengths["components"] = len(rows)
        if len(set(lengths.values())) > 1:
            names = ", ".join(f"`{key}`={length}" for key, length in lengths.items())
            raise ConfigurationError(
                f"Failed to load Paginator: Mismatched data lengths ({names}), all must be the same length!"
            )

        page_count = next(iter(lengths.values()))
        if page_count == 0:
            raise ConfigurationError("Failed to load Paginator: At least one page is required!")

        self._content = content
        self._rows = rows
        self.current_page = 0
        self.final_page = page_count - 1
        logging.debug(f"Paginator: loaded {page_count} pages ({', '.join(lengths)})")

    def change_page(self, direction: str) -> Dict[str, Any]:
        """Move one page in `direction`, wrapping at both ends.

        Args:
            direction: "next" or "back" (the leading token of a paging id)

        Returns:
            The freshly computed page view
        """
        if direction not in DIRECTIONS:
            raise InvalidInputError(f"Failed to change Paginator Page: Invalid paging direction {direction!r}")

        if direction == "next":
            self.current_page = 0 if self.current_page >= self.final_page else self.current_page + 1
        else:
            self.current_page = self.final_page if self.current_page <= 0 else self.current_page - 1

        return self.page

    @property
    def page(self) -> Dict[str, Any]:
        """Current page view: content slice plus [control_row, *page_rows]."""
        view: Dict[str, Any] = {
            key: [values[self.current_page]] for key, values in self._content.items()
        }
        page_rows = self._rows[self.current_page] if self._rows is not None else []
        view["components"] = [self.control_row, *page_rows]
        return view

    @property
    def base_row(self) -> ActionRow:
        return self.control_row

    @property
    def base_row_ids(self) -> List[str]:
        """Paging ids of the control row (link/premium and cancel buttons excluded)."""
        return [
            component["custom_id"]
            for component in self.control_row.get("components", [])
            if is_button(component)
            and component.get("custom_id")
            and not component["custom_id"].startswith(CANCEL_PREFIX)
        ]
