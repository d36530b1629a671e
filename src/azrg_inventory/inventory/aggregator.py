"""Post-processing of worker pool results into renderer-ready views.

Everything here runs on a single thread after the pool has drained, so the
tallies need no locking.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

from azrg_inventory.core.config import StorageLimitConfig
from azrg_inventory.inventory.classifier import PatternClassifier
from azrg_inventory.inventory.models import ClassificationInfo, StorageAccount
from azrg_inventory.pipeline.models import DetailResult

T = TypeVar("T")

SEVERITY_OK = "ok"
SEVERITY_WARNING = "warning"
SEVERITY_CRITICAL = "critical"


def oldest_first(items: Iterable[T], key: Callable[[T], datetime | None], k: int | None = None) -> list[T]:
    """Sort ``items`` by ascending timestamp and keep the first ``k``.

    Items whose timestamp is None sort after every dated item and keep their
    relative order, as do items with equal timestamps.
    """

    def sort_key(item: T) -> tuple:
        timestamp = key(item)
        return (1,) if timestamp is None else (0, timestamp)

    ordered = sorted(items, key=sort_key)
    return ordered if k is None else ordered[: max(k, 0)]


def created_time_of(result: DetailResult) -> datetime | None:
    """Creation time carried by a successful result, else None."""
    if not result.ok:
        return None
    value = result.value
    if isinstance(value, datetime):
        return value
    return getattr(value, "created_time", None)


@dataclass(frozen=True)
class AggregateRow:
    """One entity's result together with its name classification."""

    result: DetailResult
    classification: ClassificationInfo

    @property
    def entity(self) -> Any:
        return self.result.entity

    @property
    def ok(self) -> bool:
        return self.result.ok

    @property
    def created_time(self) -> datetime | None:
        return created_time_of(self.result)


@dataclass(frozen=True)
class LocationSummary:
    location: str
    total: int
    approaching_limit: bool = False
    at_limit: bool = False
    by_type: dict[str, int] = field(default_factory=dict, hash=False)


@dataclass
class AggregateView:
    """Ordered rows plus per-location tallies of the successful ones."""

    rows: list[AggregateRow]
    locations: list[LocationSummary]
    default_count: int = 0
    failure_count: int = 0

    @property
    def successes(self) -> list[AggregateRow]:
        return [row for row in self.rows if row.ok]

    @property
    def failures(self) -> list[AggregateRow]:
        return [row for row in self.rows if not row.ok]

    def location_counts(self) -> dict[str, int]:
        return {summary.location: summary.total for summary in self.locations}

    def oldest(self, k: int, location: str | None = None) -> list[AggregateRow]:
        """The ``k`` oldest successful rows, optionally within one location."""
        rows = [
            row for row in self.successes if location is None or getattr(row.entity, "location", "") == location
        ]
        return oldest_first(rows, lambda row: row.created_time, k)


@dataclass(frozen=True)
class DnsEndpointSummary:
    """Standard DNS endpoint usage for one location."""

    location: str
    count: int
    severity: str
    limit: int
    oldest: list[AggregateRow] = field(default_factory=list, hash=False)


@dataclass(frozen=True)
class Recommendation:
    location: str
    count: int
    heading: str
    actions: tuple[str, ...]


@dataclass
class StorageSummary:
    """Storage account view: the generic aggregate plus DNS analysis and advice."""

    view: AggregateView
    dns_endpoints: list[DnsEndpointSummary]
    recommendations: list[Recommendation]
    limits: StorageLimitConfig


class ResultAggregator:
    """Turn the pool's ordered results into an ``AggregateView``.

    Args:
        classifier: Name classifier applied to every entity, failed or not
        limits: Warning and hard thresholds for per-location tallies
    """

    def __init__(self, classifier: PatternClassifier | None = None, limits: StorageLimitConfig | None = None):
        self.classifier = classifier or PatternClassifier()
        self.limits = limits or StorageLimitConfig()

    def aggregate(
        self,
        results: Iterable[DetailResult],
        type_of: Callable[[Any], str] | None = None,
    ) -> AggregateView:
        """Classify every result and tally successful ones per location.

        Args:
            results: Pool output in input order
            type_of: Optional secondary grouping key for per-location type counts
        """
        rows: list[AggregateRow] = []
        totals: Counter[str] = Counter()
        by_type: defaultdict[str, Counter[str]] = defaultdict(Counter)
        default_count = 0
        failure_count = 0

        for result in results:
            entity = result.entity
            classification = self.classifier.classify(getattr(entity, "name", "") or "")
            rows.append(AggregateRow(result, classification))
            if classification.is_default:
                default_count += 1
            if not result.ok:
                failure_count += 1
                continue
            location = getattr(entity, "location", "") or ""
            totals[location] += 1
            if type_of is not None:
                by_type[location][type_of(entity)] += 1

        locations = [
            LocationSummary(
                location=location,
                total=total,
                approaching_limit=total >= self.limits.region_warning,
                at_limit=total >= self.limits.region_limit,
                by_type=dict(sorted(by_type[location].items())),
            )
            for location, total in sorted(totals.items())
        ]
        return AggregateView(rows, locations, default_count, failure_count)

    def summarize_storage(self, results: Iterable[DetailResult]) -> StorageSummary:
        """Aggregate storage accounts and analyse Standard DNS endpoint usage."""
        view = self.aggregate(results, type_of=lambda account: account.effective_account_type)
        limits = self.limits

        dns_rows: defaultdict[str, list[AggregateRow]] = defaultdict(list)
        for row in view.successes:
            account: StorageAccount = row.entity
            if account.is_standard_dns:
                dns_rows[account.location].append(row)

        dns_endpoints = []
        for location in sorted(dns_rows):
            rows = dns_rows[location]
            count = len(rows)
            if count >= limits.dns_critical:
                severity = SEVERITY_CRITICAL
            elif count >= limits.dns_warning:
                severity = SEVERITY_WARNING
            else:
                severity = SEVERITY_OK
            dns_endpoints.append(
                DnsEndpointSummary(
                    location=location,
                    count=count,
                    severity=severity,
                    limit=limits.dns_limit,
                    oldest=oldest_first(rows, lambda row: row.created_time, limits.oldest_count),
                )
            )

        recommendations = []
        for summary in view.locations:
            if summary.total >= limits.recommendation_threshold:
                recommendations.append(
                    Recommendation(
                        location=summary.location,
                        count=summary.total,
                        heading=f"Location {summary.location} has {summary.total} storage accounts:",
                        actions=(
                            "Consider deleting unused storage accounts",
                            "Review storage accounts created by default services",
                            "Consider using different regions for new storage accounts",
                        ),
                    )
                )
        for dns in dns_endpoints:
            if dns.count >= limits.dns_warning:
                recommendations.append(
                    Recommendation(
                        location=dns.location,
                        count=dns.count,
                        heading=f"For Standard DNS endpoint issue in {dns.location} ({dns.count} accounts):",
                        actions=(
                            "Focus on deleting Standard DNS accounts (Standard_LRS, Standard_GRS, etc.)",
                            "Check for storage accounts created by Azure services (Cloud Shell, etc.)",
                            "Consider migrating data to Premium storage accounts if possible",
                            "Use different regions for new Standard DNS storage accounts",
                        ),
                    )
                )

        return StorageSummary(view, dns_endpoints, recommendations, limits)
