"""Tests for smooth_scroll_to"""

from unittest.mock import MagicMock

from pagemotion.engine.property_animator import PropertyAnimator
from pagemotion.engine.smooth_scroll import smooth_scroll_to
from pagemotion.host.geometry import Rect
from pagemotion.host.memory_page import MemoryPage
from pagemotion.models.enums import TaskState


class TestSmoothScroll:

    def test_scrolls_to_element_with_offset(self, page, scheduler):
        page.create_element("section", id="features", rect=Rect(0, 1500, 1280, 600))

        task = smooth_scroll_to(page, "#features", offset=80, duration=300)
        scheduler.run_until_idle()

        assert task.state == TaskState.COMPLETE
        assert page.scroll_y == 1420

    def test_scroll_positions_ease_in_and_out(self, page, scheduler):
        positions = []
        page.add_event_listener("scroll", lambda: positions.append(page.scroll_y))

        smooth_scroll_to(page, 1000, duration=160)
        scheduler.run_until_idle()

        assert positions == sorted(positions)
        assert positions[-1] == 1000
        steps = [b - a for a, b in zip(positions, positions[1:])]
        middle = len(steps) // 2
        assert steps[0] < steps[middle]
        assert steps[-1] < steps[middle]

    def test_scrolls_up(self, page, scheduler):
        page.scroll_to(0, 900)

        smooth_scroll_to(page, 100, duration=100)
        scheduler.run_until_idle()

        assert page.scroll_y == 100

    def test_missing_target_returns_cancelled_task(self, page, scheduler):
        listener = MagicMock()
        page.add_event_listener("scroll", listener)

        task = smooth_scroll_to(page, "#nowhere")

        assert task.cancelled
        assert scheduler.pending == 0
        listener.assert_not_called()

    def test_reduced_motion_jumps(self, page, scheduler):
        animator = PropertyAnimator(scheduler, reduced_motion=True)
        task = smooth_scroll_to(page, 640, animator=animator)

        assert task.state == TaskState.COMPLETE
        assert page.scroll_y == 640

    def test_reduced_motion_preference_jumps(self, scheduler):
        page = MemoryPage(reduced_motion=True, frame_scheduler=scheduler)

        task = smooth_scroll_to(page, 1200, offset=200)

        assert task.state == TaskState.COMPLETE
        assert page.scroll_y == 1000
        assert scheduler.pending == 0
