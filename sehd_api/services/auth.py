import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..models import User, utcnow
from ..schemas import UserProfile
from ..security import create_access_token, profile_from_user, verify_password


logger = logging.getLogger(__name__)


class AuthService:
    """Credential checks, token issuance and profile lookup."""

    def __init__(self, session: Session):
        self.session = session

    def _active_user(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == email, User.is_active == True)  # noqa: E712
        return self.session.exec(statement).first()

    def login(self, email: str, password: str) -> Optional[UserProfile]:
        """Return the profile of the active user matching the credentials.

        The last-login timestamp is persisted before returning. A failure to
        persist it is logged and does not fail the login.
        """
        user = self._active_user(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        now = utcnow()
        user.last_login = now
        user.modified_at = now
        profile = profile_from_user(user)
        self._persist_last_login(user)
        return profile

    def _persist_last_login(self, user: User) -> None:
        user_id = user.id
        try:
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        except SQLAlchemyError:
            self.session.rollback()
            logger.warning("Could not record last login for user %s", user_id, exc_info=True)

    def profile(self, email: str) -> Optional[UserProfile]:
        user = self._active_user(email)
        if user is None:
            return None
        return profile_from_user(user)

    def issue_token(self, profile: UserProfile) -> str:
        return create_access_token(profile)
