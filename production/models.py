from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class Farm(models.Model):
    name = models.CharField("Nombre", max_length=150)

    class Meta:
        verbose_name = "Granja"
        verbose_name_plural = "Granjas"
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name


class BirdBatch(models.Model):
    class Status(models.TextChoices):
        ACTIVE = "active", "Activo"
        INACTIVE = "inactive", "Inactivo"

    farm = models.ForeignKey(
        Farm,
        on_delete=models.CASCADE,
        related_name="bird_batches",
        verbose_name="Granja",
    )
    status = models.CharField(
        "Estado", max_length=8, choices=Status.choices, default=Status.ACTIVE
    )
    birth_date = models.DateField("Fecha de nacimiento")
    initial_quantity = models.PositiveIntegerField("Cantidad inicial")
    breed = models.CharField("Raza", max_length=150, blank=True)

    class Meta:
        verbose_name = "Lote de aves"
        verbose_name_plural = "Lotes de aves"
        ordering = ("-birth_date", "farm__name")

    def __str__(self) -> str:
        return f"Lote #{self.pk} - {self.farm.name}"

    def age_in_weeks(self, reference=None) -> int:
        reference = reference or timezone.localdate()
        days = (reference - self.birth_date).days
        return max(days // 7, 0)


class ProductionRecord(models.Model):
    bird_batch = models.ForeignKey(
        BirdBatch,
        on_delete=models.CASCADE,
        related_name="production_records",
        verbose_name="Lote de aves",
    )
    date = models.DateTimeField("Fecha de registro", null=True, blank=True)
    total_quantity = models.PositiveIntegerField("Producción total", null=True, blank=True)
    defective_quantity = models.PositiveIntegerField("Defectuosos", null=True, blank=True)
    is_active = models.BooleanField("Activo", default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Registro de produccion"
        verbose_name_plural = "Registros de produccion"
        ordering = ("-date",)
        indexes = [
            models.Index(fields=("bird_batch", "is_active", "date"), name="prod_record_batch_date_idx"),
        ]

    def __str__(self) -> str:
        moment = f"{self.date:%Y-%m-%d}" if self.date else "sin fecha"
        return f"{moment} · {self.total_quantity or 0} · {self.bird_batch}"

    def clean(self) -> None:
        super().clean()
        total = self.total_quantity or 0
        defective = self.defective_quantity or 0
        if defective > total:
            raise ValidationError("Los defectuosos no pueden superar la producción total.")

    @property
    def defect_ratio(self) -> Decimal:
        if not self.total_quantity:
            return Decimal("0")
        return Decimal(self.defective_quantity or 0) / Decimal(self.total_quantity)


class EggSize(models.TextChoices):
    JUMBO = "jumbo", "Jumbo"
    TRIPLE_A = "aaa", "AAA"
    DOUBLE_A = "aa", "AA"
    SINGLE_A = "a", "A"
    B = "b", "B"
    C = "c", "C"


class EggClassificationEntry(models.Model):
    production_record = models.ForeignKey(
        ProductionRecord,
        on_delete=models.CASCADE,
        related_name="classification_entries",
        verbose_name="Registro de producción",
    )
    size = models.CharField("Tamaño", max_length=8, choices=EggSize.choices)
    unit_total = models.PositiveIntegerField("Total unitario", null=True, blank=True)
    is_active = models.BooleanField("Activo", default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Clasificación de huevo"
        verbose_name_plural = "Clasificaciones de huevo"
        ordering = ("production_record__date", "size")

    def __str__(self) -> str:
        return f"{self.production_record} · {self.get_size_display()} · {self.unit_total or 0}"


class BatchStateRecord(models.Model):
    bird_batch = models.ForeignKey(
        BirdBatch,
        on_delete=models.CASCADE,
        related_name="state_records",
        verbose_name="Lote de aves",
    )
    date = models.DateTimeField("Fecha de registro", default=timezone.now)
    headcount = models.PositiveIntegerField("Cantidad de gallinas")
    losses = models.PositiveIntegerField("Bajas", default=0)
    is_active = models.BooleanField("Activo", default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Estado de lote"
        verbose_name_plural = "Estados de lote"
        ordering = ("-date",)
        indexes = [
            models.Index(fields=("bird_batch", "is_active", "date"), name="batch_state_batch_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.date:%Y-%m-%d} · {self.headcount} aves · {self.bird_batch}"
