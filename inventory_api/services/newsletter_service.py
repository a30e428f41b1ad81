"""
Newsletter service - public subscribe/unsubscribe plus admin listings.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from inventory_api.core.errors import BadRequestError, NotFoundError
from inventory_api.db.base import utcnow
from inventory_api.db.models.enums import SubscriptionStatus
from inventory_api.db.models.newsletter import NewsletterSubscription
from inventory_api.db.repositories.newsletter_repository import NewsletterRepository


class NewsletterService:
    def __init__(self, session: AsyncSession):
        self.repo = NewsletterRepository(session)

    async def subscribe(self, email: str, source: str = "website") -> tuple[NewsletterSubscription, str]:
        """Returns the subscription and one of subscribed / already_subscribed / reactivated."""
        email = email.lower()
        existing = await self.repo.get_by_email(email)
        if existing is None:
            sub = await self.repo.add(NewsletterSubscription(email=email, source=source))
            return sub, "subscribed"
        if existing.status == SubscriptionStatus.SUBSCRIBED.value:
            return existing, "already_subscribed"
        existing.status = SubscriptionStatus.SUBSCRIBED.value
        existing.subscribed_at = utcnow()
        existing.unsubscribed_at = None
        return await self.repo.save(existing), "reactivated"

    async def unsubscribe(self, token: str | None = None, email: str | None = None) -> NewsletterSubscription:
        if token:
            sub = await self.repo.get_by_token(token)
        elif email:
            sub = await self.repo.get_by_email(email)
        else:
            raise BadRequestError("Token or email is required")
        if sub is None:
            raise NotFoundError("Subscription not found")
        if sub.status != SubscriptionStatus.UNSUBSCRIBED.value:
            sub.status = SubscriptionStatus.UNSUBSCRIBED.value
            sub.unsubscribed_at = utcnow()
            sub = await self.repo.save(sub)
        return sub

    async def list_subscribers(
        self, status: str | None = None, page: int = 1, limit: int = 20
    ) -> tuple[list[NewsletterSubscription], int]:
        conditions = [NewsletterSubscription.status == status] if status else []
        rows = await self.repo.find(
            *conditions,
            order_by=[NewsletterSubscription.subscribed_at.desc()],
            skip=(page - 1) * limit,
            limit=limit,
        )
        return rows, await self.repo.count(*conditions)

    async def stats(self) -> dict[str, int]:
        counts = {status.value: 0 for status in SubscriptionStatus}
        counts.update(await self.repo.status_counts())
        counts["total"] = sum(counts[s.value] for s in SubscriptionStatus)
        return counts
