from fastapi import APIRouter, Depends

from ..db import get_session
from ..errors import AuthenticationError, NotFoundError
from ..schemas import LoginRequest, LoginResponse, LoginUser, TokenClaims, UserProfile
from ..security import get_current_claims
from ..services.auth import AuthService


router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(session=Depends(get_session)) -> AuthService:
    return AuthService(session)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    profile = service.login(payload.email, payload.password)
    if profile is None:
        raise AuthenticationError("Invalid email or password")
    token = service.issue_token(profile)
    return LoginResponse(token=token, user=LoginUser.model_validate(profile.model_dump()))


@router.get("/profile", response_model=UserProfile)
def get_profile(
    claims: TokenClaims = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    profile = service.profile(claims.email)
    if profile is None:
        raise NotFoundError("User not found")
    return profile
