"""Subscription Confirmation — the link target of the confirmation email.

Invariants:
    - Missing subscription_token → 400 (request validation)
    - Unknown token → 401; any storage failure → 500; success → 200 with no body
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter.infrastructure.database import get_db
from newsletter.infrastructure.subscription_repository import (
    SqlSubscriberRepository, SqlSubscriptionTokenRepository,
)
from newsletter.services.confirm_subscription import confirm_subscription

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


@router.get("/confirm", status_code=status.HTTP_200_OK)
async def confirm(
    subscription_token: str = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Confirm a pending subscriber."""
    await confirm_subscription(
        subscription_token,
        SqlSubscriptionTokenRepository(db),
        SqlSubscriberRepository(db),
    )
    return Response(status_code=status.HTTP_200_OK)
