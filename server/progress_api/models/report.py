"""Progress report models."""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .history import CheckIn

TrendStatus = Literal["Improving", "Declining", "Stable"]


class GenerateReportRequest(BaseModel):
    """Request body for an on-demand report over an explicit history."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    history: List[CheckIn]


class DailyChartDataPoint(BaseModel):
    """Day-level scores for the daily trends chart."""

    date: str
    sadness: Optional[float] = None
    anxiety: Optional[float] = None
    stress: Optional[float] = None
    hopefulness: Optional[float] = None
    sleep: Optional[float] = None


class IndicatorAverages(BaseModel):
    """Per-indicator averages shared by weekly and monthly rows."""

    model_config = ConfigDict(populate_by_name=True)

    sadness_avg: Optional[float] = Field(default=None, alias="sadnessAvg")
    anxiety_avg: Optional[float] = Field(default=None, alias="anxietyAvg")
    stress_avg: Optional[float] = Field(default=None, alias="stressAvg")
    hopefulness_avg: Optional[float] = Field(default=None, alias="hopefulnessAvg")
    sleep_avg: Optional[float] = Field(default=None, alias="sleepAvg")


class WeeklyAverageDataPoint(IndicatorAverages):
    """Week-level averages (of day-level means)."""

    week: str


class MonthlyInsightEntry(IndicatorAverages):
    """Month-level averages with a status label and optional trend text."""

    month: str
    trend: Optional[str] = None
    status: Optional[TrendStatus] = None


class RecommendationItem(BaseModel):
    """Insight or suggested action from the narrative generator."""

    type: Literal["Insight", "Action"]
    text: str


class ProgressReportResponse(BaseModel):
    """Complete progress report."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    report_id: str = Field(alias="reportId")
    timestamp: str
    summary: str = ""
    daily_chart_data: List[DailyChartDataPoint] = Field(alias="dailyChartData")
    weekly_averages: List[WeeklyAverageDataPoint] = Field(alias="weeklyAverages")
    monthly_insights: List[MonthlyInsightEntry] = Field(alias="monthlyInsights")
    recommendations: List[RecommendationItem] = Field(default_factory=list, max_length=5)
