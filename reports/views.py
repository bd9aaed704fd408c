from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.views import View

from losares.mixins import DashboardAccessMixin
from production import selectors
from production.models import BirdBatch

from .services.exports import XLSX_CONTENT_TYPE, export_buckets_to_xlsx
from .services.lot_overview import build_lot_overview
from .services.period_aggregation import (
    CLASSIFICATION_METRICS,
    LOT_STATE_METRICS,
    PRODUCTION_METRICS,
    BucketSummary,
    InvalidPeriod,
    Period,
    aggregate_classification,
    aggregate_lot_state,
    aggregate_production,
    parse_period,
)

logger = logging.getLogger(__name__)

LOT_NOT_FOUND = "Lote no encontrado"


@dataclass(frozen=True)
class MetricFamily:
    slug: str
    title: str
    fetch: Callable[[int], Sequence[Any]]
    aggregate: Callable[[Sequence[Any], Period], list[BucketSummary]]
    metrics: tuple[str, ...]


METRIC_FAMILIES: dict[str, MetricFamily] = {
    family.slug: family
    for family in (
        MetricFamily(
            slug="produccion",
            title="Producción",
            fetch=selectors.fetch_production,
            aggregate=aggregate_production,
            metrics=PRODUCTION_METRICS,
        ),
        MetricFamily(
            slug="clasificacion",
            title="Clasificación",
            fetch=selectors.fetch_classification,
            aggregate=aggregate_classification,
            metrics=CLASSIFICATION_METRICS,
        ),
        MetricFamily(
            slug="estadolote",
            title="Estado del lote",
            fetch=selectors.fetch_lot_state,
            aggregate=aggregate_lot_state,
            metrics=LOT_STATE_METRICS,
        ),
    )
}


def _json_error(message: str, *, status: int = 400) -> JsonResponse:
    return JsonResponse({"error": message}, status=status)


class LotOverviewView(DashboardAccessMixin, View):
    http_method_names = ["get"]

    def get(self, request: HttpRequest, lot_id: int, *args: Any, **kwargs: Any) -> JsonResponse:
        batch = BirdBatch.objects.select_related("farm").filter(pk=lot_id).first()
        if batch is None:
            return _json_error(LOT_NOT_FOUND, status=404)
        overview = build_lot_overview(batch)
        return JsonResponse(overview.as_payload())


class MetricSeriesView(DashboardAccessMixin, View):
    """Bucketed series of one metric family for a lot."""

    http_method_names = ["get"]
    family_slug: str = ""

    def get_family(self) -> MetricFamily:
        family = METRIC_FAMILIES.get(self.kwargs.get("family", self.family_slug))
        if family is None:
            raise Http404("Familia de métricas desconocida")
        return family

    def build_buckets(self, lot_id: int, period_value: str) -> tuple[MetricFamily, Period, list[BucketSummary]]:
        family = self.get_family()
        period = parse_period(period_value)
        if not BirdBatch.objects.filter(pk=lot_id).exists():
            raise Http404(LOT_NOT_FOUND)
        rows = family.fetch(lot_id)
        return family, period, family.aggregate(rows, period)

    def get(self, request: HttpRequest, lot_id: int, period: str, *args: Any, **kwargs: Any) -> HttpResponse:
        try:
            family, resolved_period, buckets = self.build_buckets(lot_id, period)
        except InvalidPeriod as exc:
            logger.warning("Rejected dashboard request for lot %s with period %r", lot_id, exc.value)
            return _json_error(str(exc))
        except Http404 as exc:
            return _json_error(str(exc), status=404)
        return self.render_buckets(family, resolved_period, lot_id, buckets)

    def render_buckets(
        self,
        family: MetricFamily,
        period: Period,
        lot_id: int,
        buckets: list[BucketSummary],
    ) -> HttpResponse:
        return JsonResponse([bucket.as_payload() for bucket in buckets], safe=False)


class MetricSeriesExportView(MetricSeriesView):
    def render_buckets(
        self,
        family: MetricFamily,
        period: Period,
        lot_id: int,
        buckets: list[BucketSummary],
    ) -> HttpResponse:
        content = export_buckets_to_xlsx(
            title=f"{family.title} · Lote #{lot_id}",
            period=period,
            metrics=family.metrics,
            buckets=buckets,
        )
        response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
        filename = f"{family.slug}_lote_{lot_id}_{period.value}.xlsx"
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response
