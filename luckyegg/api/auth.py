"""Account endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from luckyegg.api.deps import BackendDep, get_access_token
from luckyegg.backend import AuthSession
from luckyegg.models.order import UserProfile
from luckyegg.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str
    confirm_password: str
    first_name: str = ""
    last_name: str = ""


class SignInRequest(BaseModel):
    email: str
    password: str


class SessionResponse(BaseModel):
    user_id: str
    email: str
    access_token: str | None = None


def _session_response(session: AuthSession) -> SessionResponse:
    return SessionResponse(
        user_id=session.user_id, email=session.email, access_token=session.access_token
    )


@router.post("/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(request: SignUpRequest, backend: BackendDep) -> SessionResponse:
    session = await auth_service.sign_up(
        backend,
        request.email,
        request.password,
        request.confirm_password,
        first_name=request.first_name,
        last_name=request.last_name,
    )
    return _session_response(session)


@router.post("/login", response_model=SessionResponse)
async def sign_in(request: SignInRequest, backend: BackendDep) -> SessionResponse:
    session = await auth_service.sign_in(backend, request.email, request.password)
    return _session_response(session)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    backend: BackendDep, token: Annotated[str, Depends(get_access_token)]
) -> None:
    await auth_service.sign_out(backend, token)


@router.get("/me", response_model=UserProfile)
async def me(backend: BackendDep, token: Annotated[str, Depends(get_access_token)]) -> UserProfile:
    return await auth_service.current_profile(backend, token)
