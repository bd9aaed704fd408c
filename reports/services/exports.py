from __future__ import annotations

from io import BytesIO
from typing import Sequence

from openpyxl import Workbook

from .period_aggregation import SIZE_FIELD, BucketSummary, Period

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_buckets_to_xlsx(
    *,
    title: str,
    period: Period,
    metrics: Sequence[str],
    buckets: Sequence[BucketSummary],
) -> bytes:
    """Render a bucket series as a single-sheet workbook with a totals row."""
    include_size = any(bucket.size is not None for bucket in buckets)

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Detalle"
    sheet.append(["Reporte", title])
    sheet.append(["Periodo", period.label])
    sheet.append([])

    header = ["Periodo"]
    if include_size:
        header.append(SIZE_FIELD)
    header.extend(metrics)
    sheet.append(header)

    totals = {metric: 0 for metric in metrics}
    for bucket in buckets:
        row = [bucket.label]
        if include_size:
            row.append(bucket.size or "")
        for metric in metrics:
            value = bucket.sums.get(metric, 0)
            totals[metric] += value
            row.append(value)
        sheet.append(row)

    sheet.append([])
    padding = [""] if include_size else []
    sheet.append(["TOTAL", *padding, *(totals[metric] for metric in metrics)])

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
