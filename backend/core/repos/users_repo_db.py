from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from backend.core.models.users import RefreshToken, User


class UsersRepoDB:
    def __init__(self, session: Session):
        self.session = session

    def create(self, data: Dict[str, Any]) -> User:
        user = User(**data)
        self.session.add(user)
        self.session.flush()
        return user

    def get(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        return self.session.execute(stmt).scalar_one_or_none()

    def count(self) -> int:
        return int(self.session.execute(select(func.count()).select_from(User)).scalar_one())


class RefreshTokensRepoDB:
    def __init__(self, session: Session):
        self.session = session

    def create(self, *, token: str, user_id: int, expires: datetime) -> RefreshToken:
        row = RefreshToken(token=token, user_id=user_id, expires=expires)
        self.session.add(row)
        self.session.flush()
        return row

    def get_by_token(self, token: str) -> Optional[RefreshToken]:
        stmt = select(RefreshToken).where(RefreshToken.token == token)
        return self.session.execute(stmt).scalars().first()

    def delete(self, row: RefreshToken) -> None:
        self.session.execute(delete(RefreshToken).where(RefreshToken.id == row.id))
