"""Tests for CounterAnimation"""

import pytest

from pagemotion.engine.counter import CounterAnimation
from pagemotion.engine.property_animator import PropertyAnimator
from pagemotion.host.memory_page import MemoryElement
from pagemotion.models.enums import TaskState


@pytest.fixture
def counters(scheduler):
    return CounterAnimation(PropertyAnimator(scheduler))


class TestCounterAnimation:

    def test_counts_up_to_exact_target(self, counters, scheduler):
        el = MemoryElement("span", text="0")
        shown = []

        task = counters.animate(el, 1000, duration=500)
        while not task.done:
            scheduler.step()
            shown.append(el.text)

        assert el.text == "1000"
        assert task.state == TaskState.COMPLETE
        values = [int(text) for text in shown]
        assert values == sorted(values)

    def test_empty_text_starts_from_zero(self, counters, scheduler):
        el = MemoryElement("span")

        counters.animate(el, 250, duration=100)
        scheduler.step()

        assert el.text == "0"
        scheduler.run_until_idle()
        assert el.text == "250"

    def test_counts_from_current_number(self, counters, scheduler):
        el = MemoryElement("span", text="500")

        task = counters.animate(el, 100, duration=200)
        scheduler.run_until_idle()

        assert task.start_values == {"value": 500.0}
        assert el.text == "100"

    def test_thousands_separator(self, scheduler):
        counters = CounterAnimation(PropertyAnimator(scheduler), thousands_separator=",")
        el = MemoryElement("span")

        counters.animate(el, 12500, duration=100)
        scheduler.run_until_idle()

        assert el.text == "12,500"

    def test_default_duration(self, scheduler):
        counters = CounterAnimation(PropertyAnimator(scheduler), default_duration=1234)
        task = counters.animate(MemoryElement("span"), 10)
        assert task.duration_ms == 1234

    def test_reduced_motion_renders_final_value(self, scheduler):
        counters = CounterAnimation(PropertyAnimator(scheduler, reduced_motion=True))
        el = MemoryElement("span")

        counters.animate(el, 42, duration=2000)

        assert el.text == "42"
        assert scheduler.pending == 0

    def test_explicit_start(self, counters, scheduler):
        el = MemoryElement("span", text="1,250")

        task = counters.animate(el, 1250, duration=100, start=0)
        scheduler.step()

        assert task.start_values == {"value": 0.0}
        assert el.text == "0"
        scheduler.run_until_idle()
        assert el.text == "1250"
