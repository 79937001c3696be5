import base64
import hashlib
import hmac
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, Optional, Tuple

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from starlette.routing import Match

from .config import settings
from .errors import AuthenticationError, AuthorizationError
from .models import User
from .schemas import TokenClaims, UserProfile


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)

ALL_ROLES: Tuple[str, ...] = ("admin", "staff", "viewer")

# (method, route path) -> roles allowed; unlisted routes accept any authenticated role
ROLE_REQUIREMENTS: Dict[Tuple[str, str], Tuple[str, ...]] = {
    ("POST", "/api/admissionsdata"): ("admin", "staff"),
    ("PUT", "/api/admissionsdata/{admission_id}"): ("admin", "staff"),
    ("DELETE", "/api/admissionsdata/{admission_id}"): ("admin",),
}


def _legacy_hash(password: str) -> str:
    digest = hashlib.sha256((password + settings.password_salt).encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")


def hash_password(password: str) -> str:
    if settings.password_scheme == "bcrypt":
        return pwd_context.hash(password)
    return _legacy_hash(password)


def verify_password(plain_password: str, stored_hash: str) -> bool:
    if not stored_hash:
        return False
    if pwd_context.identify(stored_hash) is not None:
        return pwd_context.verify(plain_password, stored_hash)
    return hmac.compare_digest(_legacy_hash(plain_password), stored_hash)


def full_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    return f"{first_name or ''} {last_name or ''}".strip()


def create_access_token(user: UserProfile, expires_delta: Optional[timedelta] = None) -> str:
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta if expires_delta is not None else timedelta(days=settings.jwt_expiry_days)
    to_encode = {
        "sub": str(user.user_id),
        "email": user.email,
        "name": user.full_name,
        "role": user.role,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + lifetime).timestamp()),
    }
    return jwt.encode(to_encode, settings.jwt_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    try:
        payload = jwt.decode(
            token,
            settings.jwt_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"leeway": 0, "require_exp": True, "require_iss": True, "require_aud": True},
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except JWTError:
        raise AuthenticationError("Invalid token")

    subject = payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")
    if not subject or not email or not role:
        raise AuthenticationError("Invalid token payload")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token payload")
    return TokenClaims(user_id=user_id, email=email, name=payload.get("name") or "", role=role)


def profile_from_user(user: User) -> UserProfile:
    return UserProfile(
        user_id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        is_active=user.is_active,
        last_login=user.last_login,
        full_name=full_name(user.first_name, user.last_name),
    )


def get_current_claims(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> TokenClaims:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError()
    return decode_access_token(credentials.credentials)


def check_roles(claims: TokenClaims, roles: Iterable[str]) -> None:
    if claims.role not in tuple(roles):
        raise AuthorizationError()


def required_roles_for(method: str, path: str) -> Tuple[str, ...]:
    return ROLE_REQUIREMENTS.get((method.upper(), path), ALL_ROLES)


def _route_template(request: Request) -> str:
    """Path template of the matched route, e.g. ``/api/admissionsdata/{admission_id}``.

    Raises AuthorizationError when no template can be resolved so an unknown
    route never falls through to the any-role default.
    """
    path = getattr(request.scope.get("route"), "path", None)
    if isinstance(path, str):
        return path
    for route in request.app.router.routes:
        candidate = getattr(route, "path", None)
        if not isinstance(candidate, str):
            continue
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return candidate
    raise AuthorizationError("Route could not be resolved for authorization")


def route_guard(request: Request, claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    check_roles(claims, required_roles_for(request.method, _route_template(request)))
    return claims


def require_roles(*roles: str):
    def _inner(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        check_roles(claims, roles)
        return claims

    return _inner
