"""Tests for the Paginator cyclic cursor."""

import pytest
from core.components import ButtonStyle, action_row, button, link_button, spawn_base_paging_row
from core.exceptions import ConfigurationError, InvalidInputError
from core.paginator import Paginator


def titles(view):
    return [e["title"] for e in view.get("embeds", [])]


class TestLoading:

    def test_embeds_only(self, pages):
        pager = Paginator(pages)
        assert pager.current_page == 0
        assert pager.page_count == 3
        assert pager.final_page == 2

    def test_files_and_components(self):
        pager = Paginator({
            "files": ["a.png", "b.png"],
            "components": [[action_row(button("buy-a", "Buy"))], []],
        })
        assert pager.page_count == 2
        assert pager.page["files"] == ["a.png"]

    def test_components_only_rejected(self):
        with pytest.raises(ConfigurationError, match="embeds"):
            Paginator({"components": [[], []]})

    def test_empty_bundle_rejected(self):
        with pytest.raises(ConfigurationError):
            Paginator({})

    def test_zero_pages_rejected(self):
        with pytest.raises(ConfigurationError, match="At least one page"):
            Paginator({"embeds": []})

    @pytest.mark.parametrize("data", [
        {"embeds": [1, 2, 3], "components": [[], []]},
        {"embeds": [1, 2], "files": [1]},
        {"files": [1, 2], "components": [[]]},
        {"embeds": [1, 2], "files": [1, 2], "components": [[]]},
    ])
    def test_length_mismatch(self, data):
        with pytest.raises(ConfigurationError, match="Mismatched"):
            Paginator(data)

    def test_failed_reload_leaves_state_untouched(self, pages):
        pager = Paginator(pages)
        pager.change_page("next")

        with pytest.raises(ConfigurationError):
            pager.load_pages({"embeds": [{"title": "e1"}, {"title": "e2"}, {"title": "e3"}],
                              "components": [[], []]})

        assert pager.final_page == 2
        assert pager.current_page == 1
        assert titles(pager.page) == ["p2"]

    def test_reload_rewinds_and_replaces(self, pages):
        pager = Paginator(pages)
        pager.change_page("next")
        pager.load_pages({"files": ["x", "y"]})
        assert pager.current_page == 0
        assert pager.final_page == 1
        assert "embeds" not in pager.page


class TestChangePage:

    def test_full_next_cycle_returns_to_start(self, pages):
        pager = Paginator(pages)
        seen = []
        for _ in range(pager.final_page + 1):
            seen.append(titles(pager.page)[0])
            pager.change_page("next")
        assert pager.current_page == 0
        assert seen == ["p1", "p2", "p3"]

    def test_back_wraps_to_last_page(self, pages):
        pager = Paginator(pages)
        view = pager.change_page("back")
        assert pager.current_page == 2
        assert titles(view) == ["p3"]

    def test_next_then_back(self, pages):
        pager = Paginator(pages)
        pager.change_page("next")
        pager.change_page("back")
        assert pager.current_page == 0

    def test_single_page_stays_put(self):
        pager = Paginator({"embeds": [{"title": "only"}]})
        pager.change_page("next")
        assert pager.current_page == 0
        pager.change_page("back")
        assert pager.current_page == 0

    def test_invalid_direction(self, pages):
        pager = Paginator(pages)
        with pytest.raises(InvalidInputError):
            pager.change_page("sideways")
        assert pager.current_page == 0


class TestPageView:

    def test_control_row_always_first(self):
        page_row = action_row(button("buy-1", "Buy"))
        control = spawn_base_paging_row(id="shop")
        pager = Paginator({"embeds": [{"title": "a"}], "components": [[page_row]]}, control)
        assert pager.page["components"] == [control, page_row]

    def test_control_row_without_page_rows(self, pages):
        pager = Paginator(pages)
        assert pager.page["components"] == [pager.base_row]

    def test_page_is_a_fresh_view(self, pages):
        pager = Paginator(pages)
        first = pager.page
        first["components"].append("junk")
        assert pager.page["components"] == [pager.base_row]

    def test_base_row_ids_default(self, pages):
        assert Paginator(pages).base_row_ids == ["back-page", "next-page"]

    def test_base_row_ids_skip_cancel_and_links(self, pages):
        control = spawn_base_paging_row(id="0", use_cancel=True)
        control["components"].append(link_button("https://example.com", "Docs"))
        control["components"].append(
            {"type": 2, "style": int(ButtonStyle.PREMIUM), "sku_id": "1"}
        )
        pager = Paginator(pages, control)
        assert pager.base_row_ids == ["back-page-0", "next-page-0"]
