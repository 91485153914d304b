from backend.core.models.feedback import Feedback
from backend.core.models.tokens import FeedbackToken
from backend.core.models.users import RefreshToken, User

__all__ = ["Feedback", "FeedbackToken", "RefreshToken", "User"]
