from app.services.performance.periods import InvalidDateRange, ReportPeriod

__all__ = ["InvalidDateRange", "ReportPeriod"]
