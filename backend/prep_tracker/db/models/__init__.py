"""ORM models exposed for metadata discovery."""
from prep_tracker.db.models.agent_action_log import AgentActionLog
from prep_tracker.db.models.application import Application
from prep_tracker.db.models.interview_round import InterviewRound
from prep_tracker.db.models.question import Question
from prep_tracker.db.models.sprint import Sprint
from prep_tracker.db.models.user import User
from prep_tracker.db.models.user_progress import UserProgress

__all__ = [
    "AgentActionLog",
    "Application",
    "InterviewRound",
    "Question",
    "Sprint",
    "User",
    "UserProgress",
]
