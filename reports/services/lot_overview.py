from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from production.models import BatchStateRecord, BirdBatch, ProductionRecord

PERCENT_QUANTIZER = Decimal("0.01")


@dataclass(frozen=True)
class LotOverview:
    lot_id: int
    farm: str
    breed: str
    status: str
    birth_date: date
    age_weeks: int
    initial_quantity: int
    current_headcount: int
    total_losses: int
    mortality_percent: Decimal
    total_production: int
    total_defective: int
    defect_percent: Decimal
    last_state_date: Optional[date]

    def as_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["birth_date"] = self.birth_date.isoformat()
        payload["last_state_date"] = self.last_state_date.isoformat() if self.last_state_date else None
        payload["mortality_percent"] = float(self.mortality_percent)
        payload["defect_percent"] = float(self.defect_percent)
        return payload


def _percent(part: int, whole: int) -> Decimal:
    if whole <= 0:
        return Decimal("0.00")
    ratio = Decimal(part) / Decimal(whole) * Decimal("100")
    return ratio.quantize(PERCENT_QUANTIZER, rounding=ROUND_HALF_UP)


def build_lot_overview(batch: BirdBatch, *, reference_date: Optional[date] = None) -> LotOverview:
    """Summarise the headline figures of one lot from its active records."""
    reference_date = reference_date or timezone.localdate()

    production_totals = ProductionRecord.objects.filter(bird_batch=batch, is_active=True).aggregate(
        produced=Coalesce(Sum("total_quantity"), 0),
        defective=Coalesce(Sum("defective_quantity"), 0),
    )
    state_records = BatchStateRecord.objects.filter(bird_batch=batch, is_active=True)
    total_losses = state_records.aggregate(losses=Coalesce(Sum("losses"), 0))["losses"]
    latest_state = state_records.order_by("-date", "-pk").first()

    if latest_state is not None:
        current_headcount = latest_state.headcount
        last_state_date = timezone.localtime(latest_state.date).date()
    else:
        current_headcount = batch.initial_quantity
        last_state_date = None

    produced = int(production_totals["produced"])
    defective = int(production_totals["defective"])
    return LotOverview(
        lot_id=batch.pk,
        farm=batch.farm.name,
        breed=batch.breed,
        status=batch.status,
        birth_date=batch.birth_date,
        age_weeks=batch.age_in_weeks(reference_date),
        initial_quantity=batch.initial_quantity,
        current_headcount=current_headcount,
        total_losses=int(total_losses),
        mortality_percent=_percent(int(total_losses), batch.initial_quantity),
        total_production=produced,
        total_defective=defective,
        defect_percent=_percent(defective, produced),
        last_state_date=last_state_date,
    )
