"""Services layer - Business logic"""

from .auth_service import AuthService
from .timer_service import TimerService, TimerValidationError, validate_draft

__all__ = [
    "AuthService",
    "TimerService",
    "TimerValidationError",
    "validate_draft",
]
