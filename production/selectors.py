from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from django.utils import timezone

from .models import BatchStateRecord, EggClassificationEntry, ProductionRecord


@dataclass(frozen=True)
class ProductionRow:
    recorded_at: datetime | date
    total_quantity: Optional[int]
    defective_quantity: Optional[int]


@dataclass(frozen=True)
class ClassificationRow:
    production_date: datetime | date
    size: str
    unit_total: Optional[int]


@dataclass(frozen=True)
class LotStateRow:
    recorded_at: datetime | date
    headcount: int
    losses: int


def _local(value: datetime) -> datetime:
    if timezone.is_aware(value):
        return timezone.localtime(value)
    return value


def fetch_production(lot_id: int) -> list[ProductionRow]:
    """Active production records of a lot with a known date, oldest first."""
    queryset = (
        ProductionRecord.objects.filter(bird_batch_id=lot_id, is_active=True, date__isnull=False)
        .order_by("date", "pk")
        .values_list("date", "total_quantity", "defective_quantity")
    )
    return [
        ProductionRow(recorded_at=_local(moment), total_quantity=total, defective_quantity=defective)
        for moment, total, defective in queryset
    ]


def fetch_classification(lot_id: int) -> list[ClassificationRow]:
    """
    Active classification entries of a lot, dated by their production record.

    Entries whose production record has no date never reach the aggregator.
    """
    queryset = (
        EggClassificationEntry.objects.filter(
            production_record__bird_batch_id=lot_id,
            production_record__date__isnull=False,
            is_active=True,
        )
        .order_by("production_record__date", "pk")
        .values_list("production_record__date", "size", "unit_total")
    )
    return [
        ClassificationRow(production_date=_local(moment), size=size, unit_total=unit_total)
        for moment, size, unit_total in queryset
    ]


def fetch_lot_state(lot_id: int) -> list[LotStateRow]:
    queryset = (
        BatchStateRecord.objects.filter(bird_batch_id=lot_id, is_active=True)
        .order_by("date", "pk")
        .values_list("date", "headcount", "losses")
    )
    return [
        LotStateRow(recorded_at=_local(moment), headcount=headcount, losses=losses)
        for moment, headcount, losses in queryset
    ]
