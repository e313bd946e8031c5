# stockroom/repositories/user_repo.py
import uuid

from sqlmodel import Session, select

from stockroom.models.user import User


class UserRepository:
    """
    Data access layer for User (staff accounts).
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        return session.get(User, user_id)

    def list_users(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        stmt = select(User).order_by(User.created_at).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def list_emails(self, session: Session) -> list[str]:
        """All registered user emails: the low-stock alert recipients."""
        stmt = select(User.email).order_by(User.email)
        return list(session.exec(stmt).all())

    def create(self, session: Session, user: User) -> User:
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
