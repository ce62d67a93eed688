"""Newsletter sign-up endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel

from luckyegg.api.deps import BackendDep
from luckyegg.services.newsletter import subscribe

router = APIRouter(prefix="/newsletter", tags=["newsletter"])


class SubscribeRequest(BaseModel):
    email: str
    first_name: str = ""


class SubscribeResponse(BaseModel):
    email: str
    already_subscribed: bool
    message: str


@router.post("", response_model=SubscribeResponse)
async def subscribe_to_newsletter(
    request: SubscribeRequest, backend: BackendDep
) -> SubscribeResponse:
    result = await subscribe(backend, request.email, request.first_name)
    message = (
        "You're already subscribed!"
        if result.already_subscribed
        else "Successfully subscribed! Welcome to the Lucky Egg family!"
    )
    return SubscribeResponse(
        email=result.email, already_subscribed=result.already_subscribed, message=message
    )
