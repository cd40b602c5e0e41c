from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.errors import Forbidden, Unauthorized
from app.core.security import decode_token
from app.models.user import User, UserRole

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller, handed explicitly to every handler."""

    user: User

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def role(self) -> UserRole:
        return self.user.role

    @property
    def is_admin(self) -> bool:
        return self.user.role == UserRole.ADMIN


def get_auth_context(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    db: Session = Depends(get_db),
) -> AuthContext:
    if creds is None:
        raise Unauthorized("Not authenticated")

    payload = decode_token(creds.credentials)

    user = db.get(User, payload["sub"])
    if not user or not user.is_active:
        raise Unauthorized("User inactive or not found")
    return AuthContext(user=user)


def require_roles(*roles: UserRole):
    def _guard(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if ctx.role not in roles:
            raise Forbidden("Forbidden")
        return ctx

    return _guard


require_admin = require_roles(UserRole.ADMIN)
require_driver = require_roles(UserRole.DRIVER)
