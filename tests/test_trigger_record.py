"""Tests for TriggerRecord idempotence"""

import threading

from pagemotion.engine.trigger_record import TriggerRecord
from pagemotion.host.memory_page import MemoryElement


class TestTriggerRecord:

    def test_try_mark_only_once(self):
        record = TriggerRecord()
        el = MemoryElement()

        assert record.try_mark(el) is True
        assert record.try_mark(el) is False
        assert record.has_triggered(el)
        assert el in record
        assert len(record) == 1

    def test_identity_not_equality(self):
        record = TriggerRecord()
        a, b = MemoryElement("div"), MemoryElement("div")

        record.mark_triggered(a)
        assert not record.has_triggered(b)

    def test_reset_single_element(self):
        record = TriggerRecord()
        el = MemoryElement()
        record.mark_triggered(el)

        assert record.reset(el) is True
        assert record.reset(el) is False
        assert record.try_mark(el) is True

    def test_reset_all(self):
        record = TriggerRecord()
        elements = [MemoryElement() for _ in range(3)]
        for el in elements:
            record.mark_triggered(el)

        record.reset_all()

        assert len(record) == 0
        assert all(not record.has_triggered(el) for el in elements)

    def test_concurrent_try_mark_has_single_winner(self):
        record = TriggerRecord()
        el = MemoryElement()
        results = []
        barrier = threading.Barrier(8)

        def contender():
            barrier.wait()
            results.append(record.try_mark(el))

        threads = [threading.Thread(target=contender) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
