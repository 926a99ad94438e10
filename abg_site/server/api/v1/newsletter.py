"""
Newsletter Endpoints.

Public subscribe and unsubscribe, plus the admin subscriber list.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Response, status

from abg_site.core.database.entities.users import User
from abg_site.core.models.io.newsletter import SubscribeRequest, SubscribeResult, SubscriberRead, UnsubscribeRequest
from abg_site.server.services.deps import SessionDep, require_page_access
from abg_site.server.services.newsletter import NewsletterService

router = APIRouter()

NewsletterManagerDep = Annotated[User, Depends(require_page_access("newsletter"))]


@router.post(
    "/subscribe",
    response_model=SubscribeResult,
    status_code=status.HTTP_201_CREATED,
    summary="Subscribe",
    description="Subscribe an email. Existing subscribers get 200; a previous unsubscribe is reactivated.",
    response_description="The subscription.",
    responses={200: {"description": "Already subscribed or reactivated"}},
)
async def subscribe(body: SubscribeRequest, response: Response, session: SessionDep) -> SubscribeResult:
    subscriber, created, message = await NewsletterService(session).subscribe(body)
    if not created:
        response.status_code = status.HTTP_200_OK
    return SubscribeResult(message=message, subscriber=SubscriberRead.model_validate(subscriber))


@router.post(
    "/unsubscribe",
    response_model=SubscriberRead,
    summary="Unsubscribe",
    description="Stop sending the newsletter to an email.",
    response_description="The deactivated subscription.",
    responses={404: {"description": "Subscriber not found"}},
)
async def unsubscribe(body: UnsubscribeRequest, session: SessionDep) -> SubscriberRead:
    return SubscriberRead.model_validate(await NewsletterService(session).unsubscribe(body.email))


@router.get(
    "/subscribers",
    response_model=List[SubscriberRead],
    summary="List Subscribers",
    description="Active subscribers, newest first.",
    response_description="A list of subscribers.",
)
async def list_subscribers(session: SessionDep, _: NewsletterManagerDep) -> List[SubscriberRead]:
    return [SubscriberRead.model_validate(s) for s in await NewsletterService(session).list_active()]
