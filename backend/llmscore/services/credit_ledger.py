"""Prepaid credit ledger gating costed scans.

Every balance change is paired with an append-only CreditTransaction, so
for any user the newest transaction's ``credits_after`` equals the current
balance and ``total_purchased - total_consumed == credits``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from llmscore.models import (
    TRANSACTION_CONSUMPTION,
    TRANSACTION_PURCHASE,
    CreditTransaction,
    UserCredits,
)
from llmscore.repositories import (
    PostgresCreditTransactionRepository,
    PostgresUserCreditsRepository,
)

logger = logging.getLogger(__name__)

SCAN_COSTS = {
    "basic": 1,
    "premium": 3,
}

# Prices in USD cents
PRICING_PACKAGES = {
    "starter": {
        "name": "Starter Pack",
        "credits": 1,
        "price": 500,
        "description": "Perfect for testing our service",
    },
    "growth": {
        "name": "Growth Pack",
        "credits": 5,
        "price": 2000,
        "description": "Best value for regular users",
        "savings": 500,
    },
    "pro": {
        "name": "Pro Pack",
        "credits": 15,
        "price": 5000,
        "description": "For power users and agencies",
        "savings": 2500,
    },
}

WELCOME_BONUS_DESCRIPTION = "Welcome bonus - Free credit for new users"


def normalize_scan_type(scan_type: str | None) -> str:
    """Anything other than "premium" is billed and recorded as a basic scan."""
    return "premium" if scan_type == "premium" else "basic"


def credits_required(scan_type: str) -> int:
    """Credits charged for one scan of the given type."""
    return SCAN_COSTS["premium"] if scan_type == "premium" else SCAN_COSTS["basic"]


def pricing_table() -> dict:
    """Public pricing in dollars, as shown to clients."""
    packages = {}
    for key, package in PRICING_PACKAGES.items():
        entry = {
            "name": package["name"],
            "credits": package["credits"],
            "price": package["price"] / 100,
            "description": package["description"],
        }
        if "savings" in package:
            entry["savings"] = package["savings"] / 100
        packages[key] = entry
    return {"packages": packages, "scan_costs": dict(SCAN_COSTS)}


class InsufficientCreditsError(Exception):
    """Raised when a debit is larger than the available balance."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        self.shortfall = max(0, required - available)
        super().__init__(
            f"Insufficient credits: required {required}, available {available}"
        )

    def to_details(self) -> dict:
        return {
            "required": self.required,
            "available": self.available,
            "shortfall": self.shortfall,
        }


@dataclass
class CreditCheck:
    """Result of checking a balance against a scan's cost."""
    has_enough_credits: bool
    available_credits: int
    required_credits: int
    shortfall: int


class CreditLedger:
    """Reads and mutates user credit balances."""

    def __init__(self, session: AsyncSession, signup_bonus: int = 1):
        self.session = session
        self.signup_bonus = signup_bonus
        self.credits_repo = PostgresUserCreditsRepository(session)
        self.transaction_repo = PostgresCreditTransactionRepository(session)

    async def get_user_credits(self, user_id: str) -> UserCredits | None:
        """Get a user's balance row, or None if never initialized."""
        return await self.credits_repo.get_by_user(user_id)

    async def initialize(self, user_id: str) -> str:
        """Create the user's balance with the signup bonus.

        Idempotent: returns the existing row id when one already exists.
        """
        existing = await self.credits_repo.get_by_user(user_id)
        if existing:
            return existing.id

        try:
            async with self.session.begin_nested():
                user_credits = UserCredits(
                    user_id=user_id,
                    credits=self.signup_bonus,
                    total_purchased=self.signup_bonus,
                    total_consumed=0,
                )
                await self.credits_repo.save(user_credits)

                if self.signup_bonus > 0:
                    await self.transaction_repo.add(
                        CreditTransaction(
                            user_id=user_id,
                            type=TRANSACTION_PURCHASE,
                            amount=self.signup_bonus,
                            credits_before=0,
                            credits_after=self.signup_bonus,
                            description=WELCOME_BONUS_DESCRIPTION,
                            package_type="free",
                            price_paid=0,
                        )
                    )
        except IntegrityError:
            # Another request created the row first
            logger.info(f"Credits for user {user_id} were initialized concurrently")
            existing = await self.credits_repo.get_by_user(user_id)
            if existing is None:
                raise
            return existing.id

        logger.info(f"Initialized credits for user {user_id} with {self.signup_bonus} credit(s)")
        return user_credits.id

    async def check_credits_for_scan(self, user_id: str, scan_type: str) -> CreditCheck:
        """Compare the balance against the cost of a scan. Read only."""
        required = credits_required(scan_type)
        user_credits = await self.credits_repo.get_by_user(user_id)
        available = user_credits.credits if user_credits else 0

        return CreditCheck(
            has_enough_credits=available >= required,
            available_credits=available,
            required_credits=required,
            shortfall=max(0, required - available),
        )

    async def consume_credits(
        self,
        user_id: str,
        credits: int,
        scan_type: str,
        scan_url: str,
        description: str,
    ) -> int:
        """Debit credits for a scan and record the consumption.

        The balance check and the debit are a single conditional UPDATE, so
        concurrent scans cannot overspend. Returns the new balance.

        Raises:
            InsufficientCreditsError: No balance row, or balance below `credits`.
                Nothing is mutated in that case.
        """
        if credits <= 0:
            raise ValueError("Credits to consume must be positive")

        credits_after = await self.credits_repo.decrement_if_sufficient(user_id, credits)
        if credits_after is None:
            user_credits = await self.credits_repo.get_by_user(user_id)
            if user_credits is not None:
                # Another session may have debited since this one loaded the row
                await self.session.refresh(user_credits)
            available = user_credits.credits if user_credits else 0
            raise InsufficientCreditsError(required=credits, available=available)

        await self.transaction_repo.add(
            CreditTransaction(
                user_id=user_id,
                type=TRANSACTION_CONSUMPTION,
                amount=credits,
                credits_before=credits_after + credits,
                credits_after=credits_after,
                description=description,
                scan_type=scan_type,
                scan_url=scan_url,
            )
        )
        logger.info(f"User {user_id} consumed {credits} credit(s) for {scan_type} scan of {scan_url}")
        return credits_after

    async def add_credits(
        self,
        user_id: str,
        credits: int,
        package_type: str,
        price_paid: int,
        description: str,
    ) -> int:
        """Credit a purchase to the user's balance. Returns the new balance."""
        if credits <= 0:
            raise ValueError("Credits to add must be positive")

        user_credits = await self.credits_repo.get_by_user(user_id)
        if user_credits is None:
            await self.credits_repo.save(
                UserCredits(
                    user_id=user_id,
                    credits=0,
                    total_purchased=0,
                    total_consumed=0,
                )
            )

        credits_after = await self.credits_repo.increment(user_id, credits)
        if credits_after is None:
            raise RuntimeError(f"Failed to update credits for user {user_id}")

        await self.transaction_repo.add(
            CreditTransaction(
                user_id=user_id,
                type=TRANSACTION_PURCHASE,
                amount=credits,
                credits_before=credits_after - credits,
                credits_after=credits_after,
                description=description,
                package_type=package_type,
                price_paid=price_paid,
            )
        )
        logger.info(f"Added {credits} credit(s) to user {user_id} ({package_type})")
        return credits_after

    async def get_transaction_history(
        self,
        user_id: str,
        limit: int = 50,
        type: str | None = None,
    ) -> list[CreditTransaction]:
        """Newest-first transaction history."""
        return await self.transaction_repo.get_history(user_id, limit=limit, type=type)

    async def get_credit_stats(self, user_id: str) -> dict:
        """Usage statistics for the credits dashboard."""
        user_credits = await self.credits_repo.get_by_user(user_id)
        transactions = await self.transaction_repo.get_all_by_user(user_id)

        purchases = [t for t in transactions if t.type == TRANSACTION_PURCHASE]
        consumptions = [t for t in transactions if t.type == TRANSACTION_CONSUMPTION]

        thirty_days_ago = datetime.now(timezone.utc) - timedelta(days=30)
        recent_consumptions = [
            t for t in consumptions if _as_utc(t.created_at) > thirty_days_ago
        ]

        return {
            "current_balance": user_credits.credits if user_credits else 0,
            "total_purchased": user_credits.total_purchased if user_credits else 0,
            "total_consumed": user_credits.total_consumed if user_credits else 0,
            "total_purchases": len(purchases),
            "total_scans": len(consumptions),
            "recent_scans_30d": len(recent_consumptions),
            "average_monthly_usage": len(recent_consumptions),
            "last_purchase": purchases[0].created_at.isoformat() if purchases else None,
            "last_scan": consumptions[0].created_at.isoformat() if consumptions else None,
        }


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
