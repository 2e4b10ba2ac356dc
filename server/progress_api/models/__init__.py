"""Pydantic models for progress API requests and responses."""
from .history import CheckIn, CheckInRecord
from .report import (
    GenerateReportRequest,
    DailyChartDataPoint,
    WeeklyAverageDataPoint,
    MonthlyInsightEntry,
    RecommendationItem,
    ProgressReportResponse,
)

__all__ = [
    "CheckIn",
    "CheckInRecord",
    "GenerateReportRequest",
    "DailyChartDataPoint",
    "WeeklyAverageDataPoint",
    "MonthlyInsightEntry",
    "RecommendationItem",
    "ProgressReportResponse",
]
