"""Bounded-concurrency fan-out over a list of entities."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

from tqdm import tqdm

from azrg_inventory.core.config import coerce_concurrency
from azrg_inventory.core.constants import MAX_SCHEDULER_THREADS, TQDM_BAR_FORMAT
from azrg_inventory.core.exceptions import FetchError, ParseError
from azrg_inventory.pipeline.models import DetailResult, FailureReason


class BoundedWorkerPool:
    """Run a detail fetch for every entity with at most ``max_concurrency`` in flight.

    Every entity is scheduled up front. Each task acquires the shared
    admission gate, calls ``per_item``, stores the outcome in the slot
    matching the entity's input index and releases the gate. ``run`` returns
    once every slot is filled, so results always follow input order no
    matter which task finishes first.

    A failing entity never aborts the batch: any exception raised by
    ``per_item`` is stored as that entity's ``FailureReason``. Retrying is
    left to the transport.

    Args:
        max_concurrency: Admission gate size, coerced to at least 1 and at most
            MAX_SCHEDULER_THREADS
        logger: Logger instance
        show_progress: Display a tqdm progress bar on stderr
        description: Progress bar label
    """

    def __init__(
        self,
        max_concurrency: int = 10,
        logger: logging.Logger | None = None,
        show_progress: bool = False,
        description: str = "Fetching",
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.max_concurrency = coerce_concurrency(max_concurrency, self.logger)
        if self.max_concurrency > MAX_SCHEDULER_THREADS:
            self.logger.warning(
                f"⚠ Concurrency ({self.max_concurrency}) exceeds the scheduler limit, "
                f"capping at {MAX_SCHEDULER_THREADS} concurrent requests"
            )
            self.max_concurrency = MAX_SCHEDULER_THREADS
        self.show_progress = show_progress
        self.description = description

    def _invoke(self, entity: Any, per_item: Callable[[Any], Any]) -> DetailResult:
        try:
            value = per_item(entity)
        except (FetchError, ParseError) as e:
            self.logger.debug(f"Detail fetch failed for {getattr(entity, 'name', entity)}: {e}")
            return DetailResult.failed(entity, FailureReason.from_exception(e))
        except Exception as e:
            self.logger.warning(f"⚠ Unexpected error for {getattr(entity, 'name', entity)}: {e}", exc_info=True)
            return DetailResult.failed(entity, FailureReason.from_exception(e))
        if isinstance(value, DetailResult):
            return value
        return DetailResult.success(entity, value)

    def run(
        self,
        entities: Sequence[Any],
        per_item: Callable[[Any], Any],
        description: str | None = None,
    ) -> list[DetailResult]:
        """Return one DetailResult per entity, in input order."""
        items = list(entities)
        if not items:
            return []

        slots: list[DetailResult | None] = [None] * len(items)
        gate = threading.BoundedSemaphore(self.max_concurrency)

        def task(index: int, entity: Any) -> None:
            with gate:
                slots[index] = self._invoke(entity, per_item)

        scheduler_threads = min(len(items), MAX_SCHEDULER_THREADS)
        self.logger.debug(
            f"Fetching detail for {len(items)} entities "
            f"(concurrency: {self.max_concurrency}, threads: {scheduler_threads})"
        )

        with ThreadPoolExecutor(max_workers=scheduler_threads, thread_name_prefix="azrg-fetch") as executor:
            futures = [executor.submit(task, index, entity) for index, entity in enumerate(items)]
            with tqdm(
                total=len(items),
                desc=description or self.description,
                unit="item",
                bar_format=TQDM_BAR_FORMAT,
                leave=False,
                disable=not self.show_progress,
            ) as pbar:
                for future in as_completed(futures):
                    future.result()
                    pbar.update(1)

        failed = sum(1 for slot in slots if not slot.ok)
        if failed:
            self.logger.warning(f"⚠ {failed} of {len(items)} detail fetches failed")
        else:
            self.logger.debug(f"✓ All {len(items)} detail fetches succeeded")
        return slots
