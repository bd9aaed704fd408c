from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Callable, Hashable, Iterable, Mapping, Optional, Sequence, TypeVar

from django.conf import settings
from django.db import models

from production.selectors import ClassificationRow, LotStateRow, ProductionRow

logger = logging.getLogger(__name__)

DEFAULT_WEEK_LABEL = "Week {week}"

PRODUCTION_METRICS = ("Produccion", "Defectuosos")
CLASSIFICATION_METRICS = ("TotalUnitaria",)
LOT_STATE_METRICS = ("CantidadG", "Bajas")
SIZE_FIELD = "Tamano"

RowT = TypeVar("RowT")


class Period(models.TextChoices):
    DAILY = "diario", "Diario"
    WEEKLY = "semanal", "Semanal"
    MONTHLY = "mensual", "Mensual"


PERIOD_ALIASES = {
    "daily": Period.DAILY,
    "weekly": Period.WEEKLY,
    "monthly": Period.MONTHLY,
}


class InvalidPeriod(ValueError):
    """Raised when a period selector is not daily, weekly or monthly."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__("Período no válido")


@dataclass(frozen=True)
class BucketSummary:
    label: str
    sums: Mapping[str, int] = field(hash=False)
    size: Optional[str] = None
    key: Hashable = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sums", MappingProxyType(dict(self.sums)))

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"label": self.label}
        if self.size is not None:
            payload[SIZE_FIELD] = self.size
        payload.update(self.sums)
        return payload


def parse_period(value: Any) -> Period:
    if isinstance(value, Period):
        return value
    if not isinstance(value, str):
        raise InvalidPeriod(value)
    normalized = value.strip().lower()
    if normalized in PERIOD_ALIASES:
        return PERIOD_ALIASES[normalized]
    try:
        return Period(normalized)
    except ValueError:
        raise InvalidPeriod(value) from None


def _calendar_date(moment: datetime | date) -> date:
    if isinstance(moment, datetime):
        return moment.date()
    return moment


def resolve_bucket_key(moment: datetime | date, period: Period) -> Hashable:
    """
    Map a timestamp to the bucket it belongs to.

    Daily keys are calendar dates, weekly keys are ``(iso_year, iso_week)``
    and monthly keys are ``(year, month)``. Weeks follow ISO 8601: they start
    on Monday and week 1 is the first week with four days in the new year.
    """
    day = _calendar_date(moment)
    if period == Period.DAILY:
        return day
    if period == Period.WEEKLY:
        iso_year, iso_week, _ = day.isocalendar()
        return (iso_year, iso_week)
    if period == Period.MONTHLY:
        return (day.year, day.month)
    raise InvalidPeriod(period)


def format_bucket_label(key: Hashable, period: Period, *, week_label: str = DEFAULT_WEEK_LABEL) -> str:
    if period == Period.DAILY:
        return f"{key.year:04d}-{key.month:02d}-{key.day:02d}"
    if period == Period.WEEKLY:
        year, week = key
        # The year stays out of the label; it only disambiguates the grouping.
        return week_label.format(week=week, year=year)
    if period == Period.MONTHLY:
        year, month = key
        return f"{year:04d}-{month:02d}"
    raise InvalidPeriod(period)


def group_and_sum(
    rows: Iterable[RowT],
    key_func: Callable[[RowT], Hashable],
    fields: Mapping[str, Callable[[RowT], Optional[int]]],
) -> list[tuple[Hashable, dict[str, int]]]:
    """Group rows by key in first-seen order and sum each field, counting None as 0."""
    groups: dict[Hashable, dict[str, int]] = {}
    for row in rows:
        key = key_func(row)
        totals = groups.get(key)
        if totals is None:
            totals = groups[key] = {name: 0 for name in fields}
        for name, getter in fields.items():
            totals[name] += getter(row) or 0
    return list(groups.items())


def _week_label() -> str:
    template = getattr(settings, "REPORTS_WEEK_LABEL", DEFAULT_WEEK_LABEL) or DEFAULT_WEEK_LABEL
    try:
        template.format(week=1, year=2000)
    except (KeyError, IndexError, ValueError, AttributeError) as exc:
        logger.warning("Ignoring REPORTS_WEEK_LABEL %r: %s", template, exc)
        return DEFAULT_WEEK_LABEL
    return template


def _summarize(
    rows: Iterable[RowT],
    period: Period | str,
    *,
    moment: Callable[[RowT], datetime | date],
    fields: Mapping[str, Callable[[RowT], Optional[int]]],
    size: Optional[Callable[[RowT], str]] = None,
) -> list[BucketSummary]:
    resolved = parse_period(period)
    rows = list(rows)
    week_label = _week_label()

    if size is None:
        def key_func(row):
            return resolve_bucket_key(moment(row), resolved)
    else:
        def key_func(row):
            return (resolve_bucket_key(moment(row), resolved), size(row))

    buckets = []
    for key, sums in group_and_sum(rows, key_func, fields):
        if size is None:
            date_key, size_value = key, None
        else:
            date_key, size_value = key
        buckets.append(
            BucketSummary(
                label=format_bucket_label(date_key, resolved, week_label=week_label),
                sums=sums,
                size=size_value,
                key=key,
            )
        )
    logger.debug("Aggregated %s rows into %s %s buckets", len(rows), len(buckets), resolved.value)
    return buckets


def aggregate_production(rows: Sequence[ProductionRow], period: Period | str) -> list[BucketSummary]:
    produced, defective = PRODUCTION_METRICS
    return _summarize(
        rows,
        period,
        moment=lambda row: row.recorded_at,
        fields={
            produced: lambda row: row.total_quantity,
            defective: lambda row: row.defective_quantity,
        },
    )


def aggregate_classification(rows: Sequence[ClassificationRow], period: Period | str) -> list[BucketSummary]:
    (unit_total,) = CLASSIFICATION_METRICS
    return _summarize(
        rows,
        period,
        moment=lambda row: row.production_date,
        fields={unit_total: lambda row: row.unit_total},
        size=lambda row: row.size,
    )


def aggregate_lot_state(rows: Sequence[LotStateRow], period: Period | str) -> list[BucketSummary]:
    headcount, losses = LOT_STATE_METRICS
    return _summarize(
        rows,
        period,
        moment=lambda row: row.recorded_at,
        fields={
            headcount: lambda row: row.headcount,
            losses: lambda row: row.losses,
        },
    )
