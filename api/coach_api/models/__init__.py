"""
Models package - imports all models so SQLModel registers their tables.
"""
# Import enums first
from coach_api.models.enums import CEFRLevel, TargetStatus, ErrorType, CorrectionMode

# Import all models
from coach_api.models.user import User
from coach_api.models.session import PracticeSession
from coach_api.models.target import Target
from coach_api.models.error_record import ErrorRecord
from coach_api.models.conversation_session import ConversationSession
from coach_api.models.recommended_action import RecommendedAction
from coach_api.models.fluency_snapshot import FluencySnapshot

__all__ = [
    'CEFRLevel',
    'TargetStatus',
    'ErrorType',
    'CorrectionMode',
    'User',
    'PracticeSession',
    'Target',
    'ErrorRecord',
    'ConversationSession',
    'RecommendedAction',
    'FluencySnapshot',
]
