"""
Newsletter repository - subscriptions keyed by email or unsubscribe token.
"""

from sqlalchemy import func, select

from inventory_api.db.models.newsletter import NewsletterSubscription
from inventory_api.db.repositories.base_repository import BaseRepository


class NewsletterRepository(BaseRepository[NewsletterSubscription]):
    def __init__(self, session):
        super().__init__(session, NewsletterSubscription)

    async def get_by_email(self, email: str) -> NewsletterSubscription | None:
        result = await self.session.execute(
            select(NewsletterSubscription).where(NewsletterSubscription.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_token(self, token: str) -> NewsletterSubscription | None:
        result = await self.session.execute(
            select(NewsletterSubscription).where(NewsletterSubscription.unsubscribe_token == token)
        )
        return result.scalar_one_or_none()

    async def status_counts(self) -> dict[str, int]:
        result = await self.session.execute(
            select(NewsletterSubscription.status, func.count()).group_by(NewsletterSubscription.status)
        )
        return {status: int(n) for status, n in result.all()}
