from __future__ import annotations

from enum import Enum


class Source(str, Enum):
    GUEST = "Guest"
    STAFF = "Staff"


class Sentiment(str, Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


class Category(str, Enum):
    ROOM = "Room"
    FOOD = "Food"
    SERVICE = "Service"
    MAINTENANCE = "Maintenance"
    OTHER = "Other"


class Severity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class FeedbackType(str, Enum):
    COMPLIMENT = "compliment"
    COMPLAINT = "complaint"
    SUGGESTION = "suggestion"
    GENERAL = "general"


class Role(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
