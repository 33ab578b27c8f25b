"""PostgreSQL repository implementations.

Rows scoped to a (user, url) pair are upserted in place: a rescan replaces
the previous result rather than appending history.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from llmscore.models import (
    AIFileCheck,
    CreditTransaction,
    Evaluation,
    UserCredits,
    WebsiteMap,
)


class PostgresUserCreditsRepository:
    """PostgreSQL implementation of the credit balance repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user(self, user_id: str) -> UserCredits | None:
        """Get the balance row for a user."""
        result = await self.session.execute(
            select(UserCredits).where(UserCredits.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def save(self, user_credits: UserCredits) -> UserCredits:
        """Save a balance row (insert or update)."""
        self.session.add(user_credits)
        await self.session.flush()
        return user_credits

    async def decrement_if_sufficient(self, user_id: str, amount: int) -> int | None:
        """Atomically debit `amount` if the balance covers it.

        Returns the new balance, or None when no row was updated (missing
        row or insufficient balance).
        """
        result = await self.session.execute(
            update(UserCredits)
            .where(UserCredits.user_id == user_id, UserCredits.credits >= amount)
            .values(
                credits=UserCredits.credits - amount,
                total_consumed=UserCredits.total_consumed + amount,
                last_updated=datetime.now(timezone.utc),
            )
            .returning(UserCredits.credits)
        )
        return result.scalar_one_or_none()

    async def increment(self, user_id: str, amount: int) -> int | None:
        """Atomically credit `amount` to an existing row. Returns the new balance."""
        result = await self.session.execute(
            update(UserCredits)
            .where(UserCredits.user_id == user_id)
            .values(
                credits=UserCredits.credits + amount,
                total_purchased=UserCredits.total_purchased + amount,
                last_updated=datetime.now(timezone.utc),
            )
            .returning(UserCredits.credits)
        )
        return result.scalar_one_or_none()


class PostgresCreditTransactionRepository:
    """PostgreSQL implementation of the credit transaction ledger."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, transaction: CreditTransaction) -> CreditTransaction:
        """Append a transaction."""
        self.session.add(transaction)
        await self.session.flush()
        return transaction

    async def get_history(
        self,
        user_id: str,
        limit: int = 50,
        type: str | None = None,
    ) -> list[CreditTransaction]:
        """Get a user's transactions, newest first, optionally filtered by type."""
        query = select(CreditTransaction).where(CreditTransaction.user_id == user_id)
        if type:
            query = query.where(CreditTransaction.type == type)
        result = await self.session.execute(
            query.order_by(
                CreditTransaction.created_at.desc(), CreditTransaction.id.desc()
            ).limit(limit)
        )
        return list(result.scalars().all())

    async def get_all_by_user(self, user_id: str) -> list[CreditTransaction]:
        """Get every transaction for a user, newest first."""
        result = await self.session.execute(
            select(CreditTransaction)
            .where(CreditTransaction.user_id == user_id)
            .order_by(CreditTransaction.created_at.desc(), CreditTransaction.id.desc())
        )
        return list(result.scalars().all())

    async def get_latest(self, user_id: str) -> CreditTransaction | None:
        """Get the most recent transaction for a user."""
        history = await self.get_history(user_id, limit=1)
        return history[0] if history else None


class PostgresEvaluationRepository:
    """PostgreSQL implementation of evaluation repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_url(self, user_id: str, url: str) -> Evaluation | None:
        """Get the evaluation for a user and URL."""
        result = await self.session.execute(
            select(Evaluation).where(Evaluation.user_id == user_id, Evaluation.url == url)
        )
        return result.scalar_one_or_none()

    async def get_by_user(self, user_id: str, limit: int = 50) -> list[Evaluation]:
        """Get a user's evaluations, most recently updated first."""
        result = await self.session.execute(
            select(Evaluation)
            .where(Evaluation.user_id == user_id)
            .order_by(Evaluation.updated_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_by_user_domain(self, user_id: str, domain: str) -> list[Evaluation]:
        """Get a user's evaluations for one domain, newest first."""
        result = await self.session.execute(
            select(Evaluation)
            .where(Evaluation.user_id == user_id, Evaluation.domain == domain)
            .order_by(Evaluation.created_at.desc())
        )
        return list(result.scalars().all())

    async def upsert(self, user_id: str, url: str, **fields: Any) -> Evaluation:
        """Insert or overwrite the evaluation for (user, url)."""
        existing = await self.get_by_user_url(user_id, url)
        if existing:
            for name, value in fields.items():
                setattr(existing, name, value)
            existing.updated_at = datetime.now(timezone.utc)
            await self.session.flush()
            return existing
        evaluation = Evaluation(user_id=user_id, url=url, **fields)
        self.session.add(evaluation)
        await self.session.flush()
        return evaluation


class PostgresAIFileCheckRepository:
    """PostgreSQL implementation of AI file check repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_url(self, user_id: str, url: str) -> AIFileCheck | None:
        """Get the latest file check for a user and URL."""
        result = await self.session.execute(
            select(AIFileCheck).where(AIFileCheck.user_id == user_id, AIFileCheck.url == url)
        )
        return result.scalar_one_or_none()

    async def upsert(self, user_id: str, url: str, **fields: Any) -> AIFileCheck:
        """Insert or overwrite the file check for (user, url)."""
        existing = await self.get_by_user_url(user_id, url)
        if existing:
            for name, value in fields.items():
                setattr(existing, name, value)
            existing.created_at = datetime.now(timezone.utc)
            await self.session.flush()
            return existing
        check = AIFileCheck(user_id=user_id, url=url, **fields)
        self.session.add(check)
        await self.session.flush()
        return check


class PostgresWebsiteMapRepository:
    """PostgreSQL implementation of website map repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_url(self, user_id: str, url: str) -> WebsiteMap | None:
        """Get the latest map for a user and URL."""
        result = await self.session.execute(
            select(WebsiteMap).where(WebsiteMap.user_id == user_id, WebsiteMap.url == url)
        )
        return result.scalar_one_or_none()

    async def upsert(self, user_id: str, url: str, **fields: Any) -> WebsiteMap:
        """Insert or overwrite the map for (user, url)."""
        existing = await self.get_by_user_url(user_id, url)
        if existing:
            for name, value in fields.items():
                setattr(existing, name, value)
            existing.created_at = datetime.now(timezone.utc)
            await self.session.flush()
            return existing
        website_map = WebsiteMap(user_id=user_id, url=url, **fields)
        self.session.add(website_map)
        await self.session.flush()
        return website_map
