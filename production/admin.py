from django.contrib import admin
from django.db.models import Count, Sum
from django.db.models.functions import Coalesce

from .models import (
    BatchStateRecord,
    BirdBatch,
    EggClassificationEntry,
    Farm,
    ProductionRecord,
)


class ProductionRecordInline(admin.TabularInline):
    model = ProductionRecord
    extra = 1
    fields = ("date", "total_quantity", "defective_quantity", "is_active")
    ordering = ("-date",)


class BatchStateRecordInline(admin.TabularInline):
    model = BatchStateRecord
    extra = 1
    fields = ("date", "headcount", "losses", "is_active")
    ordering = ("-date",)


class EggClassificationEntryInline(admin.TabularInline):
    model = EggClassificationEntry
    extra = 1
    fields = ("size", "unit_total", "is_active")


@admin.register(Farm)
class FarmAdmin(admin.ModelAdmin):
    list_display = ("name", "bird_batches_count")
    search_fields = ("name",)

    def get_queryset(self, request):
        queryset = super().get_queryset(request)
        return queryset.annotate(bird_batches_total=Count("bird_batches", distinct=True))

    @admin.display(ordering="bird_batches_total", description="Lotes")
    def bird_batches_count(self, obj):
        return obj.bird_batches_total


@admin.register(BirdBatch)
class BirdBatchAdmin(admin.ModelAdmin):
    inlines = (ProductionRecordInline, BatchStateRecordInline)
    list_display = ("id", "farm", "status", "birth_date", "initial_quantity", "breed", "total_losses")
    search_fields = ("breed", "farm__name")
    list_filter = ("status", "farm")

    def get_queryset(self, request):
        queryset = super().get_queryset(request)
        return queryset.annotate(losses_total=Coalesce(Sum("state_records__losses"), 0))

    @admin.display(ordering="losses_total", description="Bajas acumuladas")
    def total_losses(self, obj):
        return obj.losses_total


@admin.register(ProductionRecord)
class ProductionRecordAdmin(admin.ModelAdmin):
    inlines = (EggClassificationEntryInline,)
    list_display = (
        "date",
        "bird_batch",
        "total_quantity",
        "defective_quantity",
        "is_active",
        "updated_at",
    )
    list_filter = ("is_active", "bird_batch", "date")
    search_fields = ("bird_batch__id", "bird_batch__farm__name")
    ordering = ("-date",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(EggClassificationEntry)
class EggClassificationEntryAdmin(admin.ModelAdmin):
    list_display = ("production_record", "size", "unit_total", "is_active")
    list_filter = ("is_active", "size", "production_record__bird_batch")
    search_fields = ("production_record__bird_batch__farm__name",)


@admin.register(BatchStateRecord)
class BatchStateRecordAdmin(admin.ModelAdmin):
    list_display = ("date", "bird_batch", "headcount", "losses", "is_active")
    list_filter = ("is_active", "bird_batch", "date")
    search_fields = ("bird_batch__id", "bird_batch__farm__name")
    ordering = ("-date",)
    readonly_fields = ("created_at", "updated_at")
