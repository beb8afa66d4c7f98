from enum import Enum


class SignalEventKind(str, Enum):
    SCAN = "scan"
    IGNORE = "ignore"
    FAVORITE = "favorite"
    CONSUMPTION = "consumption"
    FEEDBACK = "feedback"
