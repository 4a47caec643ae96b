"""Tests for the headless host: geometry, selectors, scrolling, dom helpers"""

from unittest.mock import MagicMock

import pytest

from pagemotion.engine.frame_scheduler import ManualFrameScheduler
from pagemotion.host.dom import (
    add_listener,
    find,
    is_element_in_viewport,
    prefers_reduced_motion,
    remove_listener,
    resolve,
)
from pagemotion.host.geometry import (
    Rect,
    expand,
    intersection_ratio,
    is_rect_in_viewport,
    parse_root_margin,
)
from pagemotion.host.memory_page import MemoryElement, MemoryPage
from pagemotion.host.protocols import Element, Page


VIEWPORT = Rect(0, 0, 1000, 800)


class TestGeometry:

    @pytest.mark.parametrize("margin,expected", [
        ("0px", (0, 0, 0, 0)),
        ("10px", (10, 10, 10, 10)),
        ("0px 0px -50px 0px", (0, 0, -50, 0)),
        ("10px 20px", (10, 20, 10, 20)),
        ("1px 2px 3px", (1, 2, 3, 2)),
        ("10% 5%", (80, 50, 80, 50)),
        ("bogus", (0, 0, 0, 0)),
        ("1px 2px 3px 4px 5px", (0, 0, 0, 0)),
    ])
    def test_parse_root_margin(self, margin, expected):
        assert parse_root_margin(margin, VIEWPORT) == pytest.approx(expected)

    def test_expand_negative_bottom(self):
        root = expand(VIEWPORT, (0, 0, -50, 0))
        assert root == Rect(0, 0, 1000, 750)

    def test_intersection_ratio(self):
        assert intersection_ratio(Rect(0, 700, 100, 200), VIEWPORT) == (0.5, True)
        assert intersection_ratio(Rect(0, 900, 100, 200), VIEWPORT) == (0.0, False)
        assert intersection_ratio(Rect(0, 100, 100, 100), VIEWPORT) == (1.0, True)

    def test_zero_area_target_touching_root(self):
        assert intersection_ratio(Rect(10, 10, 0, 0), VIEWPORT) == (1.0, True)

    def test_edge_contact_is_not_intersecting(self):
        ratio, intersecting = intersection_ratio(Rect(0, 800, 100, 100), VIEWPORT)
        assert ratio == 0.0
        assert not intersecting

    def test_is_rect_in_viewport(self):
        assert is_rect_in_viewport(Rect(0, 100, 100, 100), 1000, 800)
        assert not is_rect_in_viewport(Rect(0, 900, 100, 100), 1000, 800)
        # Up to 10% of the height may have left through the top edge
        assert is_rect_in_viewport(Rect(0, -5, 100, 100), 1000, 800, threshold=0.1)
        assert not is_rect_in_viewport(Rect(0, -20, 100, 100), 1000, 800, threshold=0.1)


class TestSelectors:

    @pytest.fixture
    def doc(self):
        page = MemoryPage()
        nav = page.create_element("nav", id="top", classes=["navbar", "dark"])
        card = page.create_element("div", classes=["card", "fade-in"], attributes={"data-animate": "opacity: 1"})
        stat = page.create_element("span", attributes={"data-counter": "", "data-kind": "users"})
        return page, nav, card, stat

    def test_compound_selectors(self, doc):
        page, nav, card, stat = doc

        assert page.query_selector("nav.navbar.dark") is nav
        assert page.query_selector("#top") is nav
        assert page.query_selector("div.fade-in") is card
        assert page.query_selector("[data-counter]") is stat
        assert page.query_selector('[data-kind="users"]') is stat
        assert page.query_selector("[data-kind=admins]") is None

    def test_selector_groups(self, doc):
        page, nav, card, stat = doc
        assert page.query_selector_all(".card, span") == [card, stat]

    def test_unsupported_selector_raises(self, doc):
        page = doc[0]
        with pytest.raises(ValueError):
            page.query_selector_all("div > span")

    def test_find_never_raises(self, doc):
        page, nav, _, _ = doc

        assert find(page, "div > span") is None
        assert find(page, ".navbar") is nav
        assert find(page, ".missing", all=True) == []
        assert find(None, ".navbar") is None
        assert find(None, ".navbar", all=True) == []

    def test_resolve(self, doc):
        page, nav, _, _ = doc
        assert resolve(page, "#top") is nav
        assert resolve(page, nav) is nav


class TestMemoryPage:

    def test_satisfies_host_protocols(self):
        page = MemoryPage()
        assert isinstance(page, Page)
        assert isinstance(page.create_element(), Element)

    def test_scroll_clamps_and_dispatches(self):
        page = MemoryPage()
        handler = MagicMock()
        page.add_event_listener("scroll", handler)

        page.scroll_to(0, -40)

        assert page.scroll_y == 0
        handler.assert_called_once_with()

    def test_client_rect_follows_scroll(self):
        page = MemoryPage()
        el = page.create_element(rect=Rect(0, 1200, 100, 100))

        page.scroll_to(0, 1000)

        assert page.client_rect(el) == Rect(0, 200, 100, 100)
        assert page.is_element_in_viewport(el)
        assert not page.is_element_in_viewport(None)

    def test_is_element_in_viewport_helper(self):
        page = MemoryPage(viewport_height=800)
        el = page.create_element(rect=Rect(0, 900, 100, 100))

        assert not is_element_in_viewport(page, el)
        page.scroll_to(0, 200)
        assert is_element_in_viewport(page, el)
        assert not is_element_in_viewport(None, el)
        assert not is_element_in_viewport(object(), el)

    def test_reduced_motion_media_query(self):
        assert prefers_reduced_motion(MemoryPage(reduced_motion=True))
        assert not prefers_reduced_motion(MemoryPage())
        assert not prefers_reduced_motion(object())

    def test_failing_media_query_means_no_preference(self):
        page = MagicMock()
        page.matches_media.side_effect = RuntimeError("unsupported")
        assert prefers_reduced_motion(page) is False

    def test_capabilities_can_be_withheld(self):
        page = MemoryPage(supports_intersection=False, supports_frames=False)
        assert page.frame_scheduler is None
        assert page.create_intersection_observer(MagicMock()) is None

    def test_call_later_rides_frame_clock_without_frames(self):
        scheduler = ManualFrameScheduler(frame_ms=16)
        page = MemoryPage(supports_frames=False, frame_scheduler=scheduler)
        callback = MagicMock()

        page.call_later(0.01, callback, "x")
        scheduler.step()

        callback.assert_called_once_with("x")

    def test_layout_change_refreshes_intersections(self):
        page = MemoryPage()
        callback = MagicMock()
        observer = page.create_intersection_observer(callback, threshold=0.5)
        el = page.create_element(rect=Rect(0, 2000, 100, 100))
        observer.observe(el)
        callback.reset_mock()

        el.rect = Rect(0, 100, 100, 100)

        (entries,), _ = callback.call_args
        assert entries[0].target is el
        assert entries[0].is_intersecting

    def test_resize_refreshes_intersections(self):
        page = MemoryPage(viewport_height=800)
        callback = MagicMock()
        observer = page.create_intersection_observer(callback)
        observer.observe(page.create_element(rect=Rect(0, 900, 100, 100)))
        callback.reset_mock()

        page.set_viewport(1280, 1200)

        callback.assert_called_once()

    def test_remove_element_stops_observation(self):
        page = MemoryPage()
        callback = MagicMock()
        observer = page.create_intersection_observer(callback)
        el = page.create_element(rect=Rect(0, 2000, 100, 100))
        observer.observe(el)
        callback.reset_mock()

        page.remove(el)
        page.scroll_to(0, 1800)

        callback.assert_not_called()
        assert observer.observed_count == 0

    def test_disconnected_observer_dropped(self):
        page = MemoryPage()
        observer = page.create_intersection_observer(MagicMock())
        observer.disconnect()
        assert observer not in page._observers


class TestListeners:

    def test_add_and_remove_on_element(self):
        el = MemoryElement()
        handler = MagicMock()

        assert add_listener(el, "click", handler) is True
        el.dispatch("click", "evt")
        assert remove_listener(el, "click", handler) is True
        el.dispatch("click", "evt")

        handler.assert_called_once_with("evt")

    def test_selector_target(self):
        page = MemoryPage()
        button = page.create_element("button", id="cta")
        handler = MagicMock()

        assert add_listener("#cta", "click", handler, page=page) is True
        button.dispatch("click")

        handler.assert_called_once_with()

    def test_missing_target_is_noop(self):
        page = MemoryPage()
        assert add_listener("#missing", "click", MagicMock(), page=page) is False
        assert add_listener(None, "click", MagicMock()) is False
        assert remove_listener(None, "click", MagicMock()) is False
        assert add_listener(MemoryElement(), "click", "not callable") is False
