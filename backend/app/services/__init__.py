"""Service layer utilities for the application."""

__all__ = [
    "alerts",
    "chat_history",
    "chat_service",
    "feedback_ingestion",
    "token_validator",
]
