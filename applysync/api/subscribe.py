from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from applysync.db.session import SubscriberStore, get_store
from applysync.schemas.subscriber import (
    ALREADY_SUBSCRIBED_MESSAGE, INVALID_EMAIL_MESSAGE, STORE_FAILURE_MESSAGE,
    SUBSCRIBED_MESSAGE, MessageResponse, SubscribeRequest,
)
from applysync.services.subscriptions import Outcome, SubscriptionService

router = APIRouter(tags=["subscribe"])

# outcome -> (status code, success flag, message)
_RESPONSES = {
    Outcome.subscribed:         (status.HTTP_201_CREATED, True, SUBSCRIBED_MESSAGE),
    Outcome.already_subscribed: (status.HTTP_200_OK, True, ALREADY_SUBSCRIBED_MESSAGE),
    Outcome.invalid_input:      (status.HTTP_400_BAD_REQUEST, False, INVALID_EMAIL_MESSAGE),
    Outcome.store_failure:      (status.HTTP_500_INTERNAL_SERVER_ERROR, False, STORE_FAILURE_MESSAGE),
}


def outcome_response(outcome: Outcome, error: Optional[str] = None) -> JSONResponse:
    code, success, message = _RESPONSES[outcome]
    body = MessageResponse(success=success, message=message, error=error)
    return JSONResponse(status_code=code, content=body.model_dump(exclude_none=True))


def get_subscription_service(store: SubscriberStore = Depends(get_store)) -> SubscriptionService:
    return SubscriptionService(store)


@router.post(
    "/subscribe",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        200: {"model": MessageResponse, "description": "Already subscribed"},
        400: {"model": MessageResponse, "description": "Invalid email"},
        500: {"model": MessageResponse, "description": "Store failure"},
    },
)
async def subscribe(
    payload: SubscribeRequest,
    service: SubscriptionService = Depends(get_subscription_service),
):
    outcome = await service.submit(payload.email)
    return outcome_response(outcome)
