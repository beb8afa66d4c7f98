from app.models.app_user import AppUser
from app.models.user_statistics import UserStatistics
from app.models.user_signal import UserSignal, UNKNOWN_COFFEE_NAME
from app.models.user_taste_profile import UserTasteProfile
from app.models.enums import SignalEventKind

__all__ = [
    "AppUser",
    "UserStatistics",
    "UserSignal",
    "UNKNOWN_COFFEE_NAME",
    "UserTasteProfile",
    "SignalEventKind",
]
