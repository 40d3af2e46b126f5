from datetime import date

from pydantic import BaseModel, ConfigDict

from app.services.performance.periods import ReportPeriod


class ReportPerformanceFilter(BaseModel):
    period: ReportPeriod = ReportPeriod.monthly
    start_date: date | None = None
    end_date: date | None = None


class ParameterPerformanceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    param_key: str
    param_label: str
    param_type: str
    target: float
    total_target: float
    total_actual: float
    achievement_pct: float
    average_daily: float
    days_reported: int


class BucketParameterRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    actual: float
    target: float
    achievement_pct: float


class TimeBucketRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    bucket_label: str
    bucket_start: date
    bucket_end: date
    parameters: dict[str, BucketParameterRead]
    submission_count: int
    expected_submissions: int


class ParameterHighlightRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    label: str
    pct: float


class EmployeeReportPerformanceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    employee_name: str
    role_name: str | None = None
    period: ReportPeriod
    start_date: date
    end_date: date
    parameters: list[ParameterPerformanceRead]
    overall_achievement_pct: float
    submission_rate: float
    total_reports: int
    total_working_days: int
    time_series: list[TimeBucketRead]
    best_parameter: ParameterHighlightRead | None = None
    worst_parameter: ParameterHighlightRead | None = None


class TeamReportPerformanceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employees: list[EmployeeReportPerformanceRead]
    team_average_achievement: float
    team_average_submission_rate: float
    parameter_averages: list[ParameterPerformanceRead]
