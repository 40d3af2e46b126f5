"""Target achievement aggregation.

Everything here is a pure function of its inputs: targets, daily reports and a work
calendar go in, immutable result dataclasses come out. Database access lives in
``app.services.performance.reports``.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from app.services.performance.periods import Bucket, DateRange, ReportPeriod, build_buckets, month_range
from app.services.performance.work_calendar import WorkCalendar


class ProrationBasis(enum.Enum):
    working_days = "working_days"
    calendar_days = "calendar_days"


@dataclass(frozen=True)
class TargetValue:
    name: str
    value: float
    unit: str | None = None


@dataclass(frozen=True)
class MonthlyTarget:
    month: str
    parameters: tuple[TargetValue, ...]


@dataclass(frozen=True)
class ReportInput:
    report_date: date
    employee_id: str
    parameter_values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BucketParameter:
    actual: float
    target: float
    achievement_pct: float


@dataclass(frozen=True)
class TimeBucketData:
    bucket_label: str
    bucket_start: date
    bucket_end: date
    parameters: dict[str, BucketParameter]
    submission_count: int
    expected_submissions: int


@dataclass(frozen=True)
class ParameterPerformance:
    param_key: str
    param_label: str
    param_type: str
    target: float
    total_target: float
    total_actual: float
    achievement_pct: float
    average_daily: float
    days_reported: int


@dataclass(frozen=True)
class ParameterHighlight:
    key: str
    label: str
    pct: float


@dataclass(frozen=True)
class EmployeeReportPerformance:
    employee_id: str
    employee_name: str
    role_name: str | None
    period: ReportPeriod
    start_date: date
    end_date: date
    parameters: list[ParameterPerformance]
    overall_achievement_pct: float
    submission_rate: float
    total_reports: int
    total_working_days: int
    time_series: list[TimeBucketData]
    best_parameter: ParameterHighlight | None
    worst_parameter: ParameterHighlight | None


@dataclass(frozen=True)
class TeamReportPerformance:
    employees: list[EmployeeReportPerformance]
    team_average_achievement: float
    team_average_submission_rate: float
    parameter_averages: list[ParameterPerformance]


@dataclass(frozen=True)
class _TrackedParameter:
    key: str
    label: str
    param_type: str


def achievement_pct(actual: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return round(actual / target * 100, 1)


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 1)


def extract_value(values: Mapping[str, Any] | None, key: str) -> float:
    """Numeric value of ``key`` in a report; ``{"value": n}`` objects are unwrapped."""
    if not values:
        return 0.0
    raw = values.get(key)
    if isinstance(raw, Mapping):
        raw = raw.get("value")
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, int | float | Decimal):
        value = float(raw)
    else:
        try:
            value = float(str(raw).strip())
        except ValueError:
            return 0.0
    return value if math.isfinite(value) else 0.0


def _has_value(values: Mapping[str, Any] | None, key: str) -> bool:
    return bool(values) and values.get(key) is not None


def tracked_parameters(targets: Iterable[MonthlyTarget]) -> list[_TrackedParameter]:
    seen: dict[str, _TrackedParameter] = {}
    for target in sorted(targets, key=lambda t: t.month):
        for parameter in target.parameters:
            if parameter.name not in seen:
                seen[parameter.name] = _TrackedParameter(
                    key=parameter.name,
                    label=parameter.name,
                    param_type=parameter.unit or "number",
                )
    return list(seen.values())


def _target_lookup(targets: Iterable[MonthlyTarget]) -> dict[str, dict[str, float]]:
    lookup: dict[str, dict[str, float]] = {}
    for target in targets:
        values = lookup.setdefault(target.month, {})
        for parameter in target.parameters:
            values[parameter.name] = float(parameter.value)
    return lookup


def prorated_target(
    monthly_values: Mapping[str, Mapping[str, float]],
    key: str,
    date_range: DateRange,
    calendar: WorkCalendar,
    basis: ProrationBasis = ProrationBasis.working_days,
) -> float:
    """Share of the monthly target figures that falls inside ``date_range``.

    Each overlapped month contributes ``value * days_in_overlap / days_in_month``, where
    days are working days or calendar days depending on ``basis``. A month with no
    working days at all falls back to calendar days.
    """
    total = 0.0
    for month, values in monthly_values.items():
        value = values.get(key)
        if not value:
            continue
        month_span = month_range(month)
        overlap = month_span.overlap(date_range)
        if overlap is None:
            continue
        if basis == ProrationBasis.working_days and calendar.working_days(month_span) > 0:
            share = calendar.working_days(overlap) / calendar.working_days(month_span)
        else:
            share = overlap.length / month_span.length
        total += value * share
    return total


def elapsed_range(date_range: DateRange, as_of: date | None) -> DateRange | None:
    """Part of ``date_range`` on or before ``as_of``; ``None`` when it lies entirely after."""
    if as_of is None or as_of >= date_range.end:
        return date_range
    if as_of < date_range.start:
        return None
    return DateRange(date_range.start, as_of)


def _working_days(calendar: WorkCalendar, date_range: DateRange | None) -> int:
    return calendar.working_days(date_range) if date_range else 0


def build_time_series(
    buckets: Sequence[Bucket],
    parameters: Sequence[_TrackedParameter],
    monthly_values: Mapping[str, Mapping[str, float]],
    reports: Sequence[ReportInput],
    calendar: WorkCalendar,
    basis: ProrationBasis = ProrationBasis.working_days,
    as_of: date | None = None,
) -> tuple[list[TimeBucketData], dict[str, tuple[float, float]]]:
    """Bucket-level figures plus unrounded (actual, target) sums per parameter key.

    Targets and expected submissions only cover days up to ``as_of``, so a bucket that
    is still in the future expects nothing yet. Buckets themselves always span the range.
    """
    series: list[TimeBucketData] = []
    totals = {parameter.key: (0.0, 0.0) for parameter in parameters}

    for bucket in buckets:
        elapsed = elapsed_range(bucket.range, as_of)
        bucket_reports = [report for report in reports if report.report_date in bucket.range]
        bucket_params: dict[str, BucketParameter] = {}
        for parameter in parameters:
            actual = sum(extract_value(report.parameter_values, parameter.key) for report in bucket_reports)
            target = prorated_target(monthly_values, parameter.key, elapsed, calendar, basis) if elapsed else 0.0
            bucket_params[parameter.key] = BucketParameter(
                actual=actual,
                target=round(target, 2),
                achievement_pct=achievement_pct(actual, target),
            )
            total_actual, total_target = totals[parameter.key]
            totals[parameter.key] = (total_actual + actual, total_target + target)

        submitted_days = {
            report.report_date
            for report in bucket_reports
            if elapsed and report.report_date in elapsed and calendar.is_working_day(report.report_date)
        }
        series.append(
            TimeBucketData(
                bucket_label=bucket.label,
                bucket_start=bucket.start,
                bucket_end=bucket.end,
                parameters=bucket_params,
                submission_count=len(submitted_days),
                expected_submissions=_working_days(calendar, elapsed),
            )
        )
    return series, totals


def pick_best_and_worst(
    parameters: Sequence[ParameterPerformance],
) -> tuple[ParameterHighlight | None, ParameterHighlight | None]:
    if not parameters:
        return None, None
    best = worst = parameters[0]
    for parameter in parameters[1:]:
        if parameter.achievement_pct > best.achievement_pct:
            best = parameter
        if parameter.achievement_pct < worst.achievement_pct:
            worst = parameter
    return (
        ParameterHighlight(key=best.param_key, label=best.param_label, pct=best.achievement_pct),
        ParameterHighlight(key=worst.param_key, label=worst.param_label, pct=worst.achievement_pct),
    )


def employee_performance(
    *,
    employee_id: str,
    employee_name: str,
    role_name: str | None,
    period: ReportPeriod,
    date_range: DateRange,
    targets: Iterable[MonthlyTarget],
    reports: Iterable[ReportInput],
    calendar: WorkCalendar,
    basis: ProrationBasis = ProrationBasis.working_days,
    as_of: date | None = None,
) -> EmployeeReportPerformance:
    targets = list(targets)
    in_range = sorted(
        (report for report in reports if report.report_date in date_range),
        key=lambda report: report.report_date,
    )
    parameters = tracked_parameters(targets)
    monthly_values = _target_lookup(targets)
    buckets = build_buckets(period, date_range)
    time_series, totals = build_time_series(
        buckets, parameters, monthly_values, in_range, calendar, basis, as_of
    )

    elapsed = elapsed_range(date_range, as_of)
    working_days = _working_days(calendar, elapsed)
    performances: list[ParameterPerformance] = []
    for parameter in parameters:
        total_actual, total_target = totals[parameter.key]
        days_reported = sum(1 for report in in_range if _has_value(report.parameter_values, parameter.key))
        performances.append(
            ParameterPerformance(
                param_key=parameter.key,
                param_label=parameter.label,
                param_type=parameter.param_type,
                target=round(total_target / working_days, 2) if working_days else 0.0,
                total_target=round(total_target, 2),
                total_actual=total_actual,
                achievement_pct=achievement_pct(total_actual, total_target),
                average_daily=round(total_actual / days_reported, 1) if days_reported else 0.0,
                days_reported=days_reported,
            )
        )

    submitted_days = {
        report.report_date
        for report in in_range
        if elapsed and report.report_date in elapsed and calendar.is_working_day(report.report_date)
    }
    best, worst = pick_best_and_worst(performances)
    return EmployeeReportPerformance(
        employee_id=employee_id,
        employee_name=employee_name,
        role_name=role_name,
        period=period,
        start_date=date_range.start,
        end_date=date_range.end,
        parameters=performances,
        overall_achievement_pct=_mean([p.achievement_pct for p in performances]),
        submission_rate=round(len(submitted_days) / working_days * 100, 1) if working_days else 0.0,
        total_reports=len(in_range),
        total_working_days=working_days,
        time_series=time_series,
        best_parameter=best,
        worst_parameter=worst,
    )


def team_performance(employees: Iterable[EmployeeReportPerformance]) -> TeamReportPerformance:
    """Team rollup; a parameter's average only counts employees that track it."""
    members = sorted(employees, key=lambda e: e.overall_achievement_pct, reverse=True)

    grouped: dict[str, list[ParameterPerformance]] = {}
    for member in members:
        for parameter in member.parameters:
            grouped.setdefault(parameter.param_key, []).append(parameter)

    parameter_averages: list[ParameterPerformance] = []
    for key, rows in grouped.items():
        first = rows[0]
        total_actual = sum(row.total_actual for row in rows)
        days_reported = sum(row.days_reported for row in rows)
        parameter_averages.append(
            ParameterPerformance(
                param_key=key,
                param_label=first.param_label,
                param_type=first.param_type,
                target=first.target,
                total_target=round(sum(row.total_target for row in rows), 2),
                total_actual=total_actual,
                achievement_pct=_mean([row.achievement_pct for row in rows]),
                average_daily=round(total_actual / days_reported, 1) if days_reported else 0.0,
                days_reported=days_reported,
            )
        )

    return TeamReportPerformance(
        employees=members,
        team_average_achievement=_mean([member.overall_achievement_pct for member in members]),
        team_average_submission_rate=_mean([member.submission_rate for member in members]),
        parameter_averages=parameter_averages,
    )
