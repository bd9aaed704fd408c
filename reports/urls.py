from django.urls import path

from .views import LotOverviewView, MetricSeriesExportView, MetricSeriesView

app_name = "reports"

urlpatterns = [
    path("infolote/<int:lot_id>/", LotOverviewView.as_view(), name="lot-overview"),
    path(
        "produccion/<int:lot_id>/<str:period>/",
        MetricSeriesView.as_view(family_slug="produccion"),
        name="production-series",
    ),
    path(
        "clasificacion/<int:lot_id>/<str:period>/",
        MetricSeriesView.as_view(family_slug="clasificacion"),
        name="classification-series",
    ),
    path(
        "estadolote/<int:lot_id>/<str:period>/",
        MetricSeriesView.as_view(family_slug="estadolote"),
        name="lot-state-series",
    ),
    path(
        "<str:family>/<int:lot_id>/<str:period>/xlsx/",
        MetricSeriesExportView.as_view(),
        name="series-export",
    ),
]
