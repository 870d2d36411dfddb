# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from models.user import User
from models.feature_selection import FeatureSelection
from models.journal import JournalEntry
from models.workout_log import WorkoutLog
from models.calendar_item import CalendarItem
from models.analyzer_finding import AnalyzerFinding
from models.api_usage import APIUsage
from models.workout_plan import AIWorkoutPlan

__all__ = [
    "User",
    "FeatureSelection",
    "JournalEntry",
    "WorkoutLog",
    "CalendarItem",
    "AnalyzerFinding",
    "APIUsage",
    "AIWorkoutPlan",
]
