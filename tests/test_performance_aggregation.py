"""Tests for target pro-ration and achievement aggregation."""

from datetime import date, timedelta

import pytest

from app.services.performance.aggregation import (
    MonthlyTarget,
    ParameterPerformance,
    ProrationBasis,
    ReportInput,
    TargetValue,
    achievement_pct,
    elapsed_range,
    employee_performance,
    extract_value,
    pick_best_and_worst,
    prorated_target,
    team_performance,
)
from app.services.performance.periods import DateRange, ReportPeriod, month_range
from app.services.performance.work_calendar import WorkCalendar

JUNE = month_range("2024-06")
CALENDAR = WorkCalendar.build()


def _target(month="2024-06", **values):
    return MonthlyTarget(
        month=month,
        parameters=tuple(TargetValue(name=name, value=value) for name, value in values.items()),
    )


def _report(day, **values):
    return ReportInput(report_date=day, employee_id="emp-1", parameter_values=values)


def _performance(targets, reports, date_range=JUNE, period=ReportPeriod.monthly, employee_id="emp-1", as_of=None):
    return employee_performance(
        employee_id=employee_id,
        employee_name="Eli Agent",
        role_name="Sales Agent",
        period=period,
        date_range=date_range,
        targets=targets,
        reports=reports,
        calendar=CALENDAR,
        as_of=as_of,
    )


def _param(key, pct, **overrides):
    fields = dict(
        param_key=key,
        param_label=key,
        param_type="number",
        target=1.0,
        total_target=10.0,
        total_actual=pct / 10,
        achievement_pct=pct,
        average_daily=1.0,
        days_reported=1,
    )
    fields.update(overrides)
    return ParameterPerformance(**fields)


class TestAchievementPct:
    def test_rounds_to_one_decimal(self):
        assert achievement_pct(1, 3) == 33.3

    def test_non_positive_target_is_zero(self):
        assert achievement_pct(5, 0) == 0.0
        assert achievement_pct(5, -2) == 0.0


class TestExtractValue:
    def test_plain_number(self):
        assert extract_value({"calls": 7}, "calls") == 7.0

    def test_wrapped_value(self):
        assert extract_value({"calls": {"value": 4}}, "calls") == 4.0

    def test_numeric_string(self):
        assert extract_value({"calls": " 2.5 "}, "calls") == 2.5

    @pytest.mark.parametrize(
        "values",
        [None, {}, {"calls": None}, {"calls": "n/a"}, {"calls": True}, {"calls": float("nan")}, {"calls": "inf"}],
    )
    def test_missing_or_invalid_is_zero(self, values):
        assert extract_value(values, "calls") == 0.0


class TestProratedTarget:
    def test_full_month_is_whole_target(self):
        assert prorated_target({"2024-06": {"calls": 200}}, "calls", JUNE, CALENDAR) == pytest.approx(200)

    def test_working_day_share(self):
        week = DateRange(date(2024, 6, 3), date(2024, 6, 9))
        assert prorated_target({"2024-06": {"calls": 200}}, "calls", week, CALENDAR) == pytest.approx(50)

    def test_calendar_day_share(self):
        half = DateRange(date(2024, 6, 1), date(2024, 6, 15))
        result = prorated_target(
            {"2024-06": {"calls": 200}}, "calls", half, CALENDAR, basis=ProrationBasis.calendar_days
        )
        assert result == pytest.approx(100)

    def test_weekend_only_range_has_no_working_day_target(self):
        weekend = DateRange(date(2024, 6, 1), date(2024, 6, 2))
        assert prorated_target({"2024-06": {"calls": 200}}, "calls", weekend, CALENDAR) == 0

    def test_range_spanning_months_adds_each_share(self):
        values = {"2024-05": {"calls": 230}, "2024-06": {"calls": 200}}
        # May 31 is one of 23 May working days, June 3 is one of 20 June working days
        span = DateRange(date(2024, 5, 31), date(2024, 6, 3))
        assert prorated_target(values, "calls", span, CALENDAR) == pytest.approx(20)


class TestEmployeePerformance:
    def test_basic_month(self):
        result = _performance(
            [_target(calls=200)],
            [_report(date(2024, 6, 3), calls=10), _report(date(2024, 6, 4), calls=20)],
        )
        calls = result.parameters[0]
        assert calls.param_key == "calls"
        assert calls.total_target == 200
        assert calls.total_actual == 30
        assert calls.target == 10
        assert calls.achievement_pct == 15.0
        assert calls.days_reported == 2
        assert calls.average_daily == 15.0
        assert result.total_working_days == 20
        assert result.total_reports == 2
        assert result.submission_rate == 10.0

    def test_bucket_actuals_sum_to_parameter_total(self):
        reports = [
            _report(date(2024, 6, 1), calls=5),
            _report(date(2024, 6, 5), calls=12),
            _report(date(2024, 6, 14), calls=8),
            _report(date(2024, 6, 28), calls=3),
        ]
        result = _performance([_target(calls=200)], reports)
        bucket_sum = sum(bucket.parameters["calls"].actual for bucket in result.time_series)
        assert bucket_sum == result.parameters[0].total_actual == 28

    def test_weekend_report_counts_towards_actual_but_not_submissions(self):
        result = _performance([_target(calls=200)], [_report(date(2024, 6, 1), calls=5)])
        first_week = result.time_series[0]
        assert first_week.parameters["calls"].actual == 5
        assert first_week.submission_count == 0
        assert first_week.expected_submissions == 0
        assert result.submission_rate == 0.0
        assert result.total_reports == 1

    def test_meeting_every_daily_target_is_one_hundred_percent(self):
        working_days = CALENDAR.working_dates(JUNE)
        reports = [_report(day, calls=10, emails=5) for day in working_days]
        result = _performance([_target(calls=200, emails=100)], reports)
        assert [p.achievement_pct for p in result.parameters] == [100.0, 100.0]
        assert result.overall_achievement_pct == 100.0
        assert result.submission_rate == 100.0
        for bucket in result.time_series:
            assert bucket.submission_count == bucket.expected_submissions

    def test_no_reports_gives_zero_figures(self):
        result = _performance([_target(calls=200)], [])
        calls = result.parameters[0]
        assert calls.total_actual == 0
        assert calls.achievement_pct == 0.0
        assert calls.average_daily == 0.0
        assert result.submission_rate == 0.0
        assert result.overall_achievement_pct == 0.0

    def test_no_targets_gives_empty_parameters(self):
        result = _performance([], [_report(date(2024, 6, 3), calls=10)])
        assert result.parameters == []
        assert result.best_parameter is None
        assert result.worst_parameter is None
        assert result.overall_achievement_pct == 0.0
        assert all(bucket.parameters == {} for bucket in result.time_series)

    def test_reports_outside_range_are_ignored(self):
        reports = [_report(date(2024, 5, 31), calls=50), _report(date(2024, 6, 3), calls=10)]
        result = _performance([_target(calls=200)], reports)
        assert result.parameters[0].total_actual == 10
        assert result.total_reports == 1

    def test_unit_becomes_parameter_type(self):
        target = MonthlyTarget(month="2024-06", parameters=(TargetValue(name="revenue", value=1000, unit="USD"),))
        result = _performance([target], [])
        assert result.parameters[0].param_type == "USD"

    def test_weekly_period_buckets_per_day(self):
        week = DateRange(date(2024, 6, 10), date(2024, 6, 16))
        result = _performance(
            [_target(calls=200)],
            [_report(date(2024, 6, 10), calls=10)],
            date_range=week,
            period=ReportPeriod.weekly,
        )
        assert len(result.time_series) == 7
        assert result.time_series[0].parameters["calls"].target == 10
        assert result.time_series[0].parameters["calls"].achievement_pct == 100.0
        assert result.parameters[0].total_target == 50

    def test_holiday_shrinks_working_days(self):
        calendar = WorkCalendar.build(holidays=[date(2024, 6, 3)])
        result = employee_performance(
            employee_id="emp-1",
            employee_name="Eli Agent",
            role_name=None,
            period=ReportPeriod.monthly,
            date_range=JUNE,
            targets=[_target(calls=190)],
            reports=[],
            calendar=calendar,
        )
        assert result.total_working_days == 19
        assert result.parameters[0].target == 10


class TestElapsedRange:
    def test_no_cutoff_keeps_range(self):
        assert elapsed_range(JUNE, None) == JUNE

    def test_cutoff_after_end_keeps_range(self):
        assert elapsed_range(JUNE, date(2024, 7, 1)) == JUNE

    def test_cutoff_inside_range(self):
        assert elapsed_range(JUNE, date(2024, 6, 12)) == DateRange(date(2024, 6, 1), date(2024, 6, 12))

    def test_cutoff_before_start(self):
        assert elapsed_range(JUNE, date(2024, 5, 31)) is None


class TestCurrentPeriod:
    def test_mid_month_full_compliance_is_one_hundred_percent(self):
        as_of = date(2024, 6, 12)
        days = [day for day in CALENDAR.working_dates(JUNE) if day <= as_of]
        result = _performance([_target(calls=200)], [_report(day, calls=10) for day in days], as_of=as_of)

        assert result.total_working_days == 8
        assert result.submission_rate == 100.0
        assert result.parameters[0].total_target == 80
        assert result.parameters[0].achievement_pct == 100.0
        assert len(result.time_series) == 5

    def test_partly_elapsed_and_future_buckets(self):
        result = _performance([_target(calls=200)], [], as_of=date(2024, 6, 12))
        current, future = result.time_series[2], result.time_series[4]

        assert (current.bucket_start, current.expected_submissions) == (date(2024, 6, 10), 3)
        assert current.parameters["calls"].target == 30
        assert future.expected_submissions == 0
        assert future.parameters["calls"].target == 0
        assert future.parameters["calls"].achievement_pct == 0.0

    def test_range_entirely_in_future_expects_nothing(self):
        result = _performance([_target(calls=200)], [], as_of=date(2024, 5, 20))
        assert result.total_working_days == 0
        assert result.submission_rate == 0.0
        assert result.parameters[0].total_target == 0
        assert result.parameters[0].target == 0.0
        assert all(bucket.expected_submissions == 0 for bucket in result.time_series)


class TestBestAndWorst:
    def test_empty_has_no_highlights(self):
        assert pick_best_and_worst([]) == (None, None)

    def test_single_parameter_is_both(self):
        best, worst = pick_best_and_worst([_param("calls", 80.0)])
        assert best.key == worst.key == "calls"

    def test_first_wins_ties(self):
        best, worst = pick_best_and_worst([_param("calls", 50.0), _param("emails", 50.0)])
        assert best.key == "calls"
        assert worst.key == "calls"

    def test_picks_extremes(self):
        best, worst = pick_best_and_worst([_param("calls", 50.0), _param("emails", 120.0), _param("demos", 10.0)])
        assert (best.key, best.pct) == ("emails", 120.0)
        assert (worst.key, worst.pct) == ("demos", 10.0)


class TestTeamPerformance:
    def test_empty_team(self):
        result = team_performance([])
        assert result.employees == []
        assert result.team_average_achievement == 0.0
        assert result.team_average_submission_rate == 0.0
        assert result.parameter_averages == []

    def test_sorted_by_overall_achievement(self):
        days = CALENDAR.working_dates(JUNE)
        low = _performance([_target(calls=200)], [_report(days[0], calls=20)], employee_id="low")
        high = _performance(
            [_target(calls=200)], [_report(day, calls=10) for day in days], employee_id="high"
        )
        result = team_performance([low, high])
        assert [member.employee_id for member in result.employees] == ["high", "low"]
        assert result.team_average_achievement == round((100.0 + 10.0) / 2, 1)

    def test_parameter_average_counts_only_tracking_members(self):
        day = date(2024, 6, 3) + timedelta(days=1)
        first = _performance([_target(calls=200, emails=100)], [_report(day, calls=20, emails=50)], employee_id="a")
        second = _performance([_target(calls=200)], [_report(day, calls=40)], employee_id="b")
        result = team_performance([first, second])
        averages = {row.param_key: row for row in result.parameter_averages}
        assert averages["calls"].achievement_pct == 15.0
        assert averages["emails"].achievement_pct == 50.0
        assert averages["calls"].total_actual == 60
