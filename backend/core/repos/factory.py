from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from backend.core.db.session import SessionLocal
from backend.core.repos.feedback_repo_db import FeedbackRepoDB
from backend.core.repos.feedback_tokens_repo_db import FeedbackTokensRepoDB
from backend.core.repos.users_repo_db import RefreshTokensRepoDB, UsersRepoDB


def get_users_repo(session: Optional[Session] = None) -> UsersRepoDB:
    return UsersRepoDB(session or SessionLocal())


def get_refresh_tokens_repo(session: Optional[Session] = None) -> RefreshTokensRepoDB:
    return RefreshTokensRepoDB(session or SessionLocal())


def get_feedback_repo(session: Optional[Session] = None) -> FeedbackRepoDB:
    return FeedbackRepoDB(session or SessionLocal())


def get_feedback_tokens_repo(session: Optional[Session] = None) -> FeedbackTokensRepoDB:
    return FeedbackTokensRepoDB(session or SessionLocal())
