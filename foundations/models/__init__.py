from .habit import Habit
from .rule import Rule
from .completion import CompletionRecord
from .challenge import Challenge, ChallengeDayLog

__all__ = [
    "Habit",
    "Rule",
    "CompletionRecord",
    "Challenge",
    "ChallengeDayLog",
]
