"""
Tests for the bounded worker pool
"""

import threading
import time

import pytest

from azrg_inventory.core.constants import MAX_SCHEDULER_THREADS
from azrg_inventory.core.exceptions import (
    FETCH_HTTP_STATUS,
    FETCH_RATE_LIMITED,
    FetchError,
    ParseError,
)
from azrg_inventory.pipeline.models import FAILURE_PARSE, FAILURE_UNEXPECTED, DetailResult, FailureReason
from azrg_inventory.pipeline.pool import BoundedWorkerPool


class InFlightTracker:
    """Wraps a per-item function and records peak concurrency"""

    def __init__(self, func=None, delay=0.02):
        self.func = func or (lambda item: item * 10)
        self.delay = delay
        self.current = 0
        self.peak = 0
        self.calls: list = []
        self._lock = threading.Lock()

    def __call__(self, item):
        with self._lock:
            self.current += 1
            self.peak = max(self.peak, self.current)
            self.calls.append(item)
        try:
            time.sleep(self.delay)
            return self.func(item)
        finally:
            with self._lock:
                self.current -= 1


class TestOrderPreservation:
    """Results follow input order regardless of completion order"""

    def test_empty_input(self):
        calls = 0

        def per_item(item):
            nonlocal calls
            calls += 1

        pool = BoundedWorkerPool(max_concurrency=4)
        assert pool.run([], per_item) == []
        assert calls == 0

    def test_results_in_input_order(self):
        items = list(range(12))

        def per_item(item):
            # Later items finish first
            time.sleep((len(items) - item) * 0.003)
            return item * item

        results = BoundedWorkerPool(max_concurrency=6).run(items, per_item)

        assert [result.entity for result in results] == items
        assert [result.value for result in results] == [i * i for i in items]
        assert all(result.ok for result in results)

    def test_each_entity_attempted_once(self):
        tracker = InFlightTracker(delay=0.001)
        items = list(range(40))

        BoundedWorkerPool(max_concurrency=5).run(items, tracker)

        assert sorted(tracker.calls) == items

    def test_duplicate_entities_keep_own_slots(self):
        results = BoundedWorkerPool(max_concurrency=2).run(["a", "a", "b"], str.upper)
        assert [result.value for result in results] == ["A", "A", "B"]


class TestConcurrencyCeiling:
    """Never more than max_concurrency tasks inside per_item"""

    @pytest.mark.parametrize("limit", [1, 2, 3, 7])
    def test_peak_never_exceeds_limit(self, limit):
        tracker = InFlightTracker()

        results = BoundedWorkerPool(max_concurrency=limit).run(list(range(15)), tracker)

        assert len(results) == 15
        assert 1 <= tracker.peak <= limit

    def test_limit_larger_than_input(self):
        tracker = InFlightTracker()

        results = BoundedWorkerPool(max_concurrency=50).run([1, 2, 3], tracker)

        assert [result.value for result in results] == [10, 20, 30]
        assert tracker.peak <= 3

    @pytest.mark.parametrize("limit", [0, -1, -100])
    def test_non_positive_limit_coerced_to_one(self, limit, mock_logger):
        tracker = InFlightTracker(delay=0.005)

        pool = BoundedWorkerPool(max_concurrency=limit, logger=mock_logger)
        results = pool.run(list(range(5)), tracker)

        assert pool.max_concurrency == 1
        assert tracker.peak == 1
        assert len(results) == 5
        warning = mock_logger.warning.call_args_list[0][0][0]
        assert "less than 1" in warning

    def test_limit_above_thread_cap_is_capped_with_warning(self, mock_logger):
        pool = BoundedWorkerPool(max_concurrency=MAX_SCHEDULER_THREADS + 1, logger=mock_logger)

        assert pool.max_concurrency == MAX_SCHEDULER_THREADS
        warning = mock_logger.warning.call_args_list[0][0][0]
        assert f"capping at {MAX_SCHEDULER_THREADS}" in warning

    def test_limit_at_thread_cap_not_logged(self, mock_logger):
        pool = BoundedWorkerPool(max_concurrency=MAX_SCHEDULER_THREADS, logger=mock_logger)

        assert pool.max_concurrency == MAX_SCHEDULER_THREADS
        mock_logger.warning.assert_not_called()


class TestFailureIsolation:
    """One failing entity never affects the others"""

    def test_fetch_error_recorded_for_its_entity(self):
        def per_item(item):
            if item == 1:
                raise FetchError(FETCH_HTTP_STATUS, "API request failed", status_code=404, body="missing")
            return item

        results = BoundedWorkerPool(max_concurrency=3).run([0, 1, 2], per_item)

        assert [result.ok for result in results] == [True, False, True]
        assert results[0].value == 0
        assert results[2].value == 2
        assert results[1].failure.kind == FETCH_HTTP_STATUS
        assert results[1].failure.status_code == 404
        assert "missing" in results[1].error

    def test_parse_error_recorded(self):
        def per_item(item):
            raise ParseError("Invalid timestamp", details="yesterday")

        results = BoundedWorkerPool().run(["x"], per_item)

        assert results[0].failure.kind == FAILURE_PARSE
        assert "yesterday" in results[0].error

    def test_unexpected_error_recorded(self, mock_logger):
        def per_item(item):
            raise KeyError("boom")

        results = BoundedWorkerPool(logger=mock_logger).run(["x", "y"], per_item)

        assert all(result.failure.kind == FAILURE_UNEXPECTED for result in results)
        assert "KeyError" in results[0].error

    def test_gate_released_after_failures(self):
        """With a single slot, a failure must not block later entities"""

        def per_item(item):
            if item % 2 == 0:
                raise FetchError(FETCH_RATE_LIMITED, "API request failed after 5 retries", status_code=429)
            return item

        results = BoundedWorkerPool(max_concurrency=1).run(list(range(6)), per_item)

        assert [result.ok for result in results] == [False, True, False, True, False, True]

    def test_failure_count_logged(self, mock_logger):
        def per_item(item):
            if item:
                raise ParseError("bad")
            return item

        BoundedWorkerPool(logger=mock_logger).run([0, 1, 1], per_item)

        assert any("2 of 3" in call[0][0] for call in mock_logger.warning.call_args_list)

    def test_detail_result_passes_through(self):
        failure = FailureReason("custom", "handled upstream")

        def per_item(item):
            return DetailResult.failed(item, failure)

        results = BoundedWorkerPool().run(["x"], per_item)

        assert results[0].failure is failure


class TestDetailResult:
    def test_success(self):
        result = DetailResult.success("rg", 42)
        assert result.ok
        assert result.error is None

    def test_failed(self):
        result = DetailResult.failed("rg", FailureReason("parse", "bad json"))
        assert not result.ok
        assert result.value is None
        assert result.error == "bad json"

    def test_failure_reason_from_fetch_error(self):
        reason = FailureReason.from_exception(FetchError(FETCH_HTTP_STATUS, "API request failed", status_code=500))
        assert reason.kind == FETCH_HTTP_STATUS
        assert reason.status_code == 500
        assert str(reason) == reason.message
