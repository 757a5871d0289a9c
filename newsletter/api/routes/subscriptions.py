"""Subscriptions — registration of a new, pending subscriber.

Invariants:
    - Invalid email or name → 400 before any database access
    - Success → 200 with an empty body; the token only travels by email
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter.api.deps import get_email_client, get_settings
from newsletter.config import Settings
from newsletter.core.subscriber_email import SubscriberEmail
from newsletter.core.subscriber_name import SubscriberName
from newsletter.infrastructure.database import get_db
from newsletter.infrastructure.email_client import EmailClient
from newsletter.schemas.subscription import SubscribeRequest
from newsletter.services.register_subscriber import register_subscriber

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


@router.post("", status_code=status.HTTP_200_OK)
async def subscribe(
    body: SubscribeRequest,
    db: AsyncSession = Depends(get_db),
    email_client: EmailClient = Depends(get_email_client),
    settings: Settings = Depends(get_settings),
):
    """Register a subscriber and send the confirmation email."""
    email = SubscriberEmail.parse(body.email)
    name = SubscriberName.parse(body.name)
    await register_subscriber(
        db, email, name, email_client, settings.application.base_url,
    )
    return Response(status_code=status.HTTP_200_OK)
