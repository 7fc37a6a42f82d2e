"""
Aggregate Metrics Service — dashboard summaries over a user's entities.

Everything here is derived on read from the already-reconciled views; there
is no persisted cache. Empty input degrades to zero-valued output.

    completion_rate   = completed_today / total              (0.0000 – 1.0000)
    average_streak    = mean(streak)                         (2 decimals)
    consistency_score = % of entities with streak >= threshold (2 decimals)
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from foundations.models.habit import HabitCategory
from foundations.services.challenges import ChallengeView
from foundations.services.habits import HabitView
from foundations.services.rules import RuleView

DEFAULT_THRESHOLD = 7
DEFAULT_MASTERY = 67


@dataclass
class EntitySnapshot:
    """The two facts every aggregate needs about one habit or rule."""
    streak: int
    completed_today: bool


@dataclass
class AggregateMetrics:
    total: int
    completed_today: int
    completion_rate: Decimal
    average_streak: Decimal
    consistency_score: Decimal
    longest_streak: int
    mastered: int


@dataclass
class HabitMetrics:
    overall: AggregateMetrics
    by_category: dict[str, AggregateMetrics] = field(default_factory=dict)


@dataclass
class RuleMetrics:
    overall: AggregateMetrics
    total_failures: int


@dataclass
class DisciplineMetrics:
    active_rules: int
    kept_today: int
    total_failures: int
    active_challenges: int
    average_challenge_progress: int


def _q(value: Decimal, places: str) -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def summarize(
    snapshots: Sequence[EntitySnapshot],
    threshold: int = DEFAULT_THRESHOLD,
    mastery: int = DEFAULT_MASTERY,
) -> AggregateMetrics:
    total = len(snapshots)
    if total == 0:
        return AggregateMetrics(
            total=0,
            completed_today=0,
            completion_rate=Decimal("0"),
            average_streak=Decimal("0"),
            consistency_score=Decimal("0"),
            longest_streak=0,
            mastered=0,
        )

    completed = sum(1 for s in snapshots if s.completed_today)
    streaks = [s.streak for s in snapshots]
    consistent = sum(1 for s in streaks if s >= threshold)

    return AggregateMetrics(
        total=total,
        completed_today=completed,
        completion_rate=_q(Decimal(completed) / Decimal(total), "0.0001"),
        average_streak=_q(Decimal(sum(streaks)) / Decimal(total), "0.01"),
        consistency_score=_q(Decimal(consistent) * 100 / Decimal(total), "0.01"),
        longest_streak=max(streaks),
        mastered=sum(1 for s in streaks if s >= mastery),
    )


def _snap(view: HabitView | RuleView) -> EntitySnapshot:
    return EntitySnapshot(streak=view.state.current, completed_today=view.state.completed_today)


def _category(view: HabitView) -> str:
    c = view.habit.category
    return c.value if hasattr(c, "value") else str(c)


def habit_metrics(
    views: Sequence[HabitView],
    threshold: int = DEFAULT_THRESHOLD,
    mastery: int = DEFAULT_MASTERY,
) -> HabitMetrics:
    by_category: dict[str, AggregateMetrics] = {}
    for category in HabitCategory:
        members = [v for v in views if _category(v) == category.value]
        by_category[category.value] = summarize([_snap(v) for v in members], threshold, mastery)
    return HabitMetrics(
        overall=summarize([_snap(v) for v in views], threshold, mastery),
        by_category=by_category,
    )


def rule_metrics(
    views: Sequence[RuleView],
    threshold: int = DEFAULT_THRESHOLD,
    mastery: int = DEFAULT_MASTERY,
) -> RuleMetrics:
    return RuleMetrics(
        overall=summarize([_snap(v) for v in views], threshold, mastery),
        total_failures=sum(v.rule.failures or 0 for v in views),
    )


def discipline_metrics(
    rules: Sequence[RuleView],
    challenges: Sequence[ChallengeView],
) -> DisciplineMetrics:
    """Rules adherence plus mean challenge progress (the discipline panel)."""
    avg_progress = (
        int(_q(Decimal(sum(c.progress_percentage for c in challenges)) / len(challenges), "1"))
        if challenges else 0
    )
    return DisciplineMetrics(
        active_rules=len(rules),
        kept_today=sum(1 for r in rules if r.state.completed_today),
        total_failures=sum(r.rule.failures or 0 for r in rules),
        active_challenges=len(challenges),
        average_challenge_progress=avg_progress,
    )
