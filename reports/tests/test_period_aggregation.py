from __future__ import annotations

from datetime import date, datetime

from django.test import SimpleTestCase, override_settings

from production.selectors import ClassificationRow, LotStateRow, ProductionRow
from reports.services.period_aggregation import (
    BucketSummary,
    InvalidPeriod,
    Period,
    aggregate_classification,
    aggregate_lot_state,
    aggregate_production,
    format_bucket_label,
    group_and_sum,
    parse_period,
    resolve_bucket_key,
)


class ParsePeriodTests(SimpleTestCase):
    def test_accepts_spanish_and_english_selectors(self) -> None:
        self.assertEqual(parse_period("diario"), Period.DAILY)
        self.assertEqual(parse_period("Semanal"), Period.WEEKLY)
        self.assertEqual(parse_period(" mensual "), Period.MONTHLY)
        self.assertEqual(parse_period("daily"), Period.DAILY)
        self.assertEqual(parse_period("WEEKLY"), Period.WEEKLY)
        self.assertEqual(parse_period(Period.MONTHLY), Period.MONTHLY)

    def test_rejects_unknown_selectors(self) -> None:
        for value in ("anual", "", "dia", None, 7):
            with self.subTest(value=value):
                with self.assertRaises(InvalidPeriod) as ctx:
                    parse_period(value)
                self.assertEqual(ctx.exception.value, value)

    def test_invalid_period_is_raised_for_empty_and_populated_input(self) -> None:
        rows = [ProductionRow(datetime(2024, 1, 5, 8, 0), 10, 1)]
        for aggregate in (aggregate_production, aggregate_classification, aggregate_lot_state):
            with self.subTest(aggregate=aggregate.__name__):
                with self.assertRaises(InvalidPeriod):
                    aggregate([], "quincenal")
        with self.assertRaises(InvalidPeriod):
            aggregate_production(rows, "anual")


class BucketKeyTests(SimpleTestCase):
    def test_daily_key_ignores_time_of_day(self) -> None:
        morning = resolve_bucket_key(datetime(2024, 3, 9, 6, 15), Period.DAILY)
        night = resolve_bucket_key(datetime(2024, 3, 9, 23, 59), Period.DAILY)
        self.assertEqual(morning, date(2024, 3, 9))
        self.assertEqual(morning, night)

    def test_weekly_key_follows_iso_weeks(self) -> None:
        # 2021-01-01 is a Friday, so it still belongs to the last week of 2020.
        self.assertEqual(resolve_bucket_key(date(2021, 1, 1), Period.WEEKLY), (2020, 53))
        # 2024-12-30 is a Monday and opens week 1 of 2025.
        self.assertEqual(resolve_bucket_key(date(2024, 12, 30), Period.WEEKLY), (2025, 1))
        self.assertEqual(resolve_bucket_key(date(2025, 1, 1), Period.WEEKLY), (2025, 1))

    def test_weekly_key_starts_on_monday(self) -> None:
        sunday = resolve_bucket_key(date(2024, 1, 14), Period.WEEKLY)
        monday = resolve_bucket_key(date(2024, 1, 15), Period.WEEKLY)
        self.assertEqual(sunday, (2024, 2))
        self.assertEqual(monday, (2024, 3))

    def test_monthly_key(self) -> None:
        self.assertEqual(resolve_bucket_key(datetime(2024, 2, 29, 12, 0), Period.MONTHLY), (2024, 2))


class LabelTests(SimpleTestCase):
    def test_labels_are_zero_padded(self) -> None:
        self.assertEqual(format_bucket_label(date(2024, 1, 5), Period.DAILY), "2024-01-05")
        self.assertEqual(format_bucket_label((2024, 3), Period.MONTHLY), "2024-03")
        self.assertEqual(format_bucket_label((2024, 7), Period.WEEKLY), "Week 7")

    def test_week_label_template_is_configurable(self) -> None:
        label = format_bucket_label((2025, 1), Period.WEEKLY, week_label="Semana {week}")
        self.assertEqual(label, "Semana 1")

    @override_settings(REPORTS_WEEK_LABEL="Semana {week}")
    def test_aggregation_uses_week_label_setting(self) -> None:
        rows = [ProductionRow(date(2024, 1, 3), 4, 0)]
        buckets = aggregate_production(rows, Period.WEEKLY)
        self.assertEqual(buckets[0].label, "Semana 1")

    @override_settings(REPORTS_WEEK_LABEL="Semana {semana}")
    def test_unknown_placeholder_falls_back_to_default_label(self) -> None:
        rows = [ProductionRow(date(2024, 1, 3), 1, 0)]
        with self.assertLogs("reports.services.period_aggregation", level="WARNING"):
            buckets = aggregate_production(rows, Period.WEEKLY)
        self.assertEqual(buckets[0].label, "Week 1")

    @override_settings(REPORTS_WEEK_LABEL="Semana {week")
    def test_malformed_week_label_falls_back_to_default_label(self) -> None:
        rows = [LotStateRow(date(2024, 1, 10), 10, 0)]
        with self.assertLogs("reports.services.period_aggregation", level="WARNING"):
            buckets = aggregate_lot_state(rows, "semanal")
        self.assertEqual(buckets[0].label, "Week 2")

    @override_settings(REPORTS_WEEK_LABEL="Semana {week} de {year}")
    def test_week_label_may_include_the_iso_year(self) -> None:
        rows = [ProductionRow(date(2024, 12, 31), 1, 0)]
        buckets = aggregate_production(rows, Period.WEEKLY)
        self.assertEqual(buckets[0].label, "Semana 1 de 2025")


class GroupAndSumTests(SimpleTestCase):
    def test_empty_input_yields_no_groups(self) -> None:
        self.assertEqual(group_and_sum([], lambda row: row, {"total": lambda row: row}), [])

    def test_groups_keep_first_seen_order_and_count_none_as_zero(self) -> None:
        rows = [("b", 1), ("a", None), ("b", 2), ("c", 5), ("a", 4)]
        groups = group_and_sum(rows, lambda row: row[0], {"total": lambda row: row[1]})
        self.assertEqual(groups, [("b", {"total": 3}), ("a", {"total": 4}), ("c", {"total": 5})])

    def test_all_none_sums_to_zero(self) -> None:
        groups = group_and_sum([("a", None), ("a", None)], lambda row: row[0], {"total": lambda row: row[1]})
        self.assertEqual(groups, [("a", {"total": 0})])


class AggregateProductionTests(SimpleTestCase):
    def test_daily_buckets_sum_and_treat_missing_as_zero(self) -> None:
        rows = [
            ProductionRow(datetime(2024, 1, 5, 7, 30), 10, 1),
            ProductionRow(datetime(2024, 1, 5, 17, 0), 5, None),
        ]
        buckets = aggregate_production(rows, "diario")
        self.assertEqual(len(buckets), 1)
        self.assertEqual(
            buckets[0].as_payload(),
            {"label": "2024-01-05", "Produccion": 15, "Defectuosos": 1},
        )

    def test_monthly_buckets_follow_input_order(self) -> None:
        rows = [
            ProductionRow(date(2024, 2, 1), 10, 0),
            ProductionRow(date(2024, 2, 20), 12, 2),
            ProductionRow(date(2024, 3, 3), None, None),
        ]
        buckets = aggregate_production(rows, Period.MONTHLY)
        self.assertEqual([bucket.label for bucket in buckets], ["2024-02", "2024-03"])
        self.assertEqual(buckets[0].sums, {"Produccion": 22, "Defectuosos": 2})
        self.assertEqual(buckets[1].sums, {"Produccion": 0, "Defectuosos": 0})

    def test_weekly_buckets_do_not_merge_across_years(self) -> None:
        rows = [
            ProductionRow(date(2024, 1, 2), 7, 1),
            ProductionRow(date(2024, 12, 31), 3, 0),
            ProductionRow(date(2025, 1, 2), 4, 1),
        ]
        buckets = aggregate_production(rows, Period.WEEKLY)
        self.assertEqual([bucket.label for bucket in buckets], ["Week 1", "Week 1"])
        self.assertEqual([bucket.key for bucket in buckets], [(2024, 1), (2025, 1)])
        self.assertEqual(buckets[1].sums, {"Produccion": 7, "Defectuosos": 1})

    def test_bucket_count_matches_distinct_keys(self) -> None:
        days = [date(2024, 5, day) for day in (1, 1, 2, 9, 9, 9, 15, 31)]
        rows = [ProductionRow(day, 1, 0) for day in days]
        for period in Period:
            with self.subTest(period=period):
                expected = len({resolve_bucket_key(day, period) for day in days})
                self.assertEqual(len(aggregate_production(rows, period)), expected)

    def test_empty_input_returns_empty_list(self) -> None:
        for period in Period:
            with self.subTest(period=period):
                self.assertEqual(aggregate_production([], period), [])

    def test_reaggregating_summaries_is_stable(self) -> None:
        rows = [
            ProductionRow(datetime(2024, 4, 1, 6, 0), 30, 2),
            ProductionRow(datetime(2024, 4, 1, 18, 0), 25, None),
            ProductionRow(datetime(2024, 4, 2, 6, 0), None, 1),
            ProductionRow(datetime(2024, 5, 7, 6, 0), 40, 3),
        ]
        daily = aggregate_production(rows, Period.DAILY)
        rebuilt = [
            ProductionRow(bucket.key, bucket.sums["Produccion"], bucket.sums["Defectuosos"])
            for bucket in daily
        ]
        self.assertEqual(aggregate_production(rebuilt, Period.DAILY), daily)

        monthly = aggregate_production(rows, Period.MONTHLY)
        rebuilt_monthly = [
            ProductionRow(date(*bucket.key, 1), bucket.sums["Produccion"], bucket.sums["Defectuosos"])
            for bucket in monthly
        ]
        self.assertEqual(aggregate_production(rebuilt_monthly, Period.MONTHLY), monthly)


class AggregateClassificationTests(SimpleTestCase):
    def test_weekly_classification_keeps_years_apart_for_the_same_size(self) -> None:
        rows = [
            ClassificationRow(date(2024, 1, 3), "aa", 10),
            ClassificationRow(date(2024, 1, 3), "b", 4),
            ClassificationRow(date(2025, 1, 2), "aa", 7),
            ClassificationRow(date(2024, 12, 30), "aa", 1),
        ]
        buckets = aggregate_classification(rows, Period.WEEKLY)
        self.assertEqual(
            [(bucket.label, bucket.size, bucket.sums["TotalUnitaria"]) for bucket in buckets],
            [("Week 1", "aa", 10), ("Week 1", "b", 4), ("Week 1", "aa", 8)],
        )
        self.assertEqual(
            [bucket.key for bucket in buckets],
            [((2024, 1), "aa"), ((2024, 1), "b"), ((2025, 1), "aa")],
        )

    def test_sizes_on_the_same_day_are_separate_buckets(self) -> None:
        rows = [
            ClassificationRow(datetime(2024, 1, 5, 8, 0), "aa", 120),
            ClassificationRow(datetime(2024, 1, 5, 8, 0), "jumbo", 40),
            ClassificationRow(datetime(2024, 1, 5, 15, 0), "aa", None),
            ClassificationRow(datetime(2024, 1, 6, 8, 0), "aa", 100),
        ]
        buckets = aggregate_classification(rows, Period.DAILY)
        self.assertEqual(
            [bucket.as_payload() for bucket in buckets],
            [
                {"label": "2024-01-05", "Tamano": "aa", "TotalUnitaria": 120},
                {"label": "2024-01-05", "Tamano": "jumbo", "TotalUnitaria": 40},
                {"label": "2024-01-06", "Tamano": "aa", "TotalUnitaria": 100},
            ],
        )

    def test_monthly_classification_groups_by_month_and_size(self) -> None:
        rows = [
            ClassificationRow(date(2024, 2, 1), "a", 5),
            ClassificationRow(date(2024, 2, 2), "b", 6),
            ClassificationRow(date(2024, 2, 28), "a", 7),
        ]
        buckets = aggregate_classification(rows, "monthly")
        self.assertEqual(
            buckets,
            [
                BucketSummary(label="2024-02", sums={"TotalUnitaria": 12}, size="a"),
                BucketSummary(label="2024-02", sums={"TotalUnitaria": 6}, size="b"),
            ],
        )


class AggregateLotStateTests(SimpleTestCase):
    def test_weekly_lot_state_sums_headcount_and_losses(self) -> None:
        rows = [
            LotStateRow(date(2024, 6, 3), 1000, 2),
            LotStateRow(date(2024, 6, 5), 998, 1),
            LotStateRow(date(2024, 6, 10), 997, 0),
        ]
        buckets = aggregate_lot_state(rows, "semanal")
        self.assertEqual([bucket.label for bucket in buckets], ["Week 23", "Week 24"])
        self.assertEqual(buckets[0].sums, {"CantidadG": 1998, "Bajas": 3})
        self.assertEqual(buckets[1].as_payload(), {"label": "Week 24", "CantidadG": 997, "Bajas": 0})


class BucketSummaryTests(SimpleTestCase):
    def test_summaries_are_hashable_and_read_only(self) -> None:
        rows = [ProductionRow(date(2024, 1, 5), 10, 1), ProductionRow(date(2024, 1, 5), 5, None)]
        bucket = aggregate_production(rows, Period.DAILY)[0]
        same = BucketSummary(label="2024-01-05", sums={"Produccion": 15, "Defectuosos": 1})

        self.assertEqual(hash(bucket), hash(same))
        self.assertEqual(len({bucket, same}), 1)
        with self.assertRaises(TypeError):
            bucket.sums["Produccion"] = 0
        self.assertEqual(bucket.as_payload(), {"label": "2024-01-05", "Produccion": 15, "Defectuosos": 1})
