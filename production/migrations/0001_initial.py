import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Farm",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("name", models.CharField(max_length=150, verbose_name="Nombre")),
            ],
            options={
                "verbose_name": "Granja",
                "verbose_name_plural": "Granjas",
                "ordering": ("name",),
            },
        ),
        migrations.CreateModel(
            name="BirdBatch",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Activo"), ("inactive", "Inactivo")],
                        default="active",
                        max_length=8,
                        verbose_name="Estado",
                    ),
                ),
                ("birth_date", models.DateField(verbose_name="Fecha de nacimiento")),
                ("initial_quantity", models.PositiveIntegerField(verbose_name="Cantidad inicial")),
                ("breed", models.CharField(blank=True, max_length=150, verbose_name="Raza")),
                (
                    "farm",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bird_batches",
                        to="production.farm",
                        verbose_name="Granja",
                    ),
                ),
            ],
            options={
                "verbose_name": "Lote de aves",
                "verbose_name_plural": "Lotes de aves",
                "ordering": ("-birth_date", "farm__name"),
            },
        ),
        migrations.CreateModel(
            name="ProductionRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("date", models.DateTimeField(blank=True, null=True, verbose_name="Fecha de registro")),
                (
                    "total_quantity",
                    models.PositiveIntegerField(blank=True, null=True, verbose_name="Producción total"),
                ),
                (
                    "defective_quantity",
                    models.PositiveIntegerField(blank=True, null=True, verbose_name="Defectuosos"),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Activo")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "bird_batch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="production_records",
                        to="production.birdbatch",
                        verbose_name="Lote de aves",
                    ),
                ),
            ],
            options={
                "verbose_name": "Registro de produccion",
                "verbose_name_plural": "Registros de produccion",
                "ordering": ("-date",),
                "indexes": [
                    models.Index(
                        fields=["bird_batch", "is_active", "date"], name="prod_record_batch_date_idx"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="EggClassificationEntry",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "size",
                    models.CharField(
                        choices=[
                            ("jumbo", "Jumbo"),
                            ("aaa", "AAA"),
                            ("aa", "AA"),
                            ("a", "A"),
                            ("b", "B"),
                            ("c", "C"),
                        ],
                        max_length=8,
                        verbose_name="Tamaño",
                    ),
                ),
                (
                    "unit_total",
                    models.PositiveIntegerField(blank=True, null=True, verbose_name="Total unitario"),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Activo")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "production_record",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="classification_entries",
                        to="production.productionrecord",
                        verbose_name="Registro de producción",
                    ),
                ),
            ],
            options={
                "verbose_name": "Clasificación de huevo",
                "verbose_name_plural": "Clasificaciones de huevo",
                "ordering": ("production_record__date", "size"),
            },
        ),
        migrations.CreateModel(
            name="BatchStateRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "date",
                    models.DateTimeField(
                        default=django.utils.timezone.now, verbose_name="Fecha de registro"
                    ),
                ),
                ("headcount", models.PositiveIntegerField(verbose_name="Cantidad de gallinas")),
                ("losses", models.PositiveIntegerField(default=0, verbose_name="Bajas")),
                ("is_active", models.BooleanField(default=True, verbose_name="Activo")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "bird_batch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="state_records",
                        to="production.birdbatch",
                        verbose_name="Lote de aves",
                    ),
                ),
            ],
            options={
                "verbose_name": "Estado de lote",
                "verbose_name_plural": "Estados de lote",
                "ordering": ("-date",),
                "indexes": [
                    models.Index(
                        fields=["bird_batch", "is_active", "date"], name="batch_state_batch_date_idx"
                    )
                ],
            },
        ),
    ]
