"""
Dashboard metric schemas.

GET /metrics/habits     → HabitMetricsResponse
GET /metrics/rules      → RuleMetricsResponse
GET /metrics/discipline → DisciplineResponse
"""
from pydantic import BaseModel, Field


class AggregateResponse(BaseModel):
    total: int
    completed_today: int
    completion_rate: float = Field(description="completed_today / total. Range: 0.0–1.0.")
    average_streak: float
    consistency_score: float = Field(
        description="Percentage of entities whose streak meets the threshold.",
    )
    longest_streak: int
    mastered: int


class HabitMetricsResponse(BaseModel):
    threshold_days: int
    overall: AggregateResponse
    by_category: dict[str, AggregateResponse]


class RuleMetricsResponse(BaseModel):
    threshold_days: int
    overall: AggregateResponse
    total_failures: int


class DisciplineResponse(BaseModel):
    active_rules: int
    kept_today: int
    total_failures: int
    active_challenges: int
    average_challenge_progress: int
