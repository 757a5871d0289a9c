"""ORM Models — SQLAlchemy declarative models for subscribers and their tokens.

Design Decisions:
    - One file per table for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from newsletter.models.subscription import Subscription  # noqa: F401
from newsletter.models.subscription_token import SubscriptionTokenRecord  # noqa: F401
