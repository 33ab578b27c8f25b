"""Tests for the credit ledger against SQLite."""

import pytest

from llmscore.models import TRANSACTION_CONSUMPTION, TRANSACTION_PURCHASE
from llmscore.repositories import PostgresCreditTransactionRepository
from llmscore.services.credit_ledger import (
    CreditLedger,
    InsufficientCreditsError,
    credits_required,
    pricing_table,
)


async def assert_consistent(ledger: CreditLedger, user_id: str) -> None:
    user_credits = await ledger.get_user_credits(user_id)
    latest = await PostgresCreditTransactionRepository(ledger.session).get_latest(user_id)
    assert user_credits.total_purchased - user_credits.total_consumed == user_credits.credits
    assert latest.credits_after == user_credits.credits


def test_scan_costs():
    assert credits_required("basic") == 1
    assert credits_required("premium") == 3
    assert credits_required("anything-else") == 1


def test_pricing_table_is_in_dollars():
    table = pricing_table()
    assert table["packages"]["growth"]["price"] == 20.0
    assert table["packages"]["growth"]["savings"] == 5.0
    assert "savings" not in table["packages"]["starter"]
    assert table["scan_costs"] == {"basic": 1, "premium": 3}


async def test_initialize_grants_signup_bonus_once(session):
    ledger = CreditLedger(session, signup_bonus=1)

    first_id = await ledger.initialize("alice")
    second_id = await ledger.initialize("alice")

    assert first_id == second_id
    user_credits = await ledger.get_user_credits("alice")
    assert user_credits.credits == 1
    history = await ledger.get_transaction_history("alice")
    assert len(history) == 1
    assert history[0].type == TRANSACTION_PURCHASE
    assert history[0].description == "Welcome bonus - Free credit for new users"
    assert history[0].package_type == "free"
    await assert_consistent(ledger, "alice")


async def test_consume_debits_and_records_transaction(session):
    ledger = CreditLedger(session)
    await ledger.initialize("bob")
    await ledger.add_credits("bob", 5, package_type="growth", price_paid=2000, description="Growth")

    remaining = await ledger.consume_credits(
        "bob", 3, scan_type="premium", scan_url="https://example.com", description="Premium scan"
    )

    assert remaining == 3
    latest = (await ledger.get_transaction_history("bob", limit=1))[0]
    assert latest.type == TRANSACTION_CONSUMPTION
    assert latest.credits_before == 6
    assert latest.credits_after == 3
    assert latest.scan_url == "https://example.com"
    await assert_consistent(ledger, "bob")


async def test_overspend_raises_without_mutation(session):
    ledger = CreditLedger(session)
    await ledger.initialize("carol")

    with pytest.raises(InsufficientCreditsError) as exc_info:
        await ledger.consume_credits(
            "carol", 3, scan_type="premium", scan_url="https://example.com", description="Premium scan"
        )

    assert exc_info.value.to_details() == {"required": 3, "available": 1, "shortfall": 2}
    user_credits = await ledger.get_user_credits("carol")
    assert user_credits.credits == 1
    assert user_credits.total_consumed == 0
    assert len(await ledger.get_transaction_history("carol")) == 1


async def test_consume_for_unknown_user_reports_zero_available(session):
    with pytest.raises(InsufficientCreditsError) as exc_info:
        await CreditLedger(session).consume_credits(
            "nobody", 1, scan_type="basic", scan_url="https://example.com", description="Basic scan"
        )
    assert exc_info.value.available == 0


async def test_consume_rejects_non_positive_amounts(session):
    with pytest.raises(ValueError):
        await CreditLedger(session).consume_credits(
            "dave", 0, scan_type="basic", scan_url="https://example.com", description="Basic scan"
        )


async def test_add_credits_creates_missing_balance_row(session):
    ledger = CreditLedger(session)

    new_balance = await ledger.add_credits(
        "erin", 15, package_type="pro", price_paid=5000, description="Pro"
    )

    assert new_balance == 15
    await assert_consistent(ledger, "erin")


async def test_check_credits_for_scan_is_read_only(session):
    ledger = CreditLedger(session)
    await ledger.initialize("frank")

    check = await ledger.check_credits_for_scan("frank", "premium")

    assert not check.has_enough_credits
    assert check.available_credits == 1
    assert check.required_credits == 3
    assert check.shortfall == 2


async def test_transaction_history_filters_by_type(session):
    ledger = CreditLedger(session)
    await ledger.initialize("gina")
    await ledger.consume_credits(
        "gina", 1, scan_type="basic", scan_url="https://example.com", description="Basic scan"
    )

    consumptions = await ledger.get_transaction_history("gina", type=TRANSACTION_CONSUMPTION)
    everything = await ledger.get_transaction_history("gina")

    assert [t.type for t in consumptions] == [TRANSACTION_CONSUMPTION]
    assert [t.type for t in everything] == [TRANSACTION_CONSUMPTION, TRANSACTION_PURCHASE]


async def test_credit_stats(session):
    ledger = CreditLedger(session)
    await ledger.initialize("hank")
    await ledger.add_credits("hank", 5, package_type="growth", price_paid=2000, description="Growth")
    await ledger.consume_credits(
        "hank", 1, scan_type="basic", scan_url="https://example.com", description="Basic scan"
    )

    stats = await ledger.get_credit_stats("hank")

    assert stats["current_balance"] == 5
    assert stats["total_purchased"] == 6
    assert stats["total_consumed"] == 1
    assert stats["total_purchases"] == 2
    assert stats["total_scans"] == 1
    assert stats["recent_scans_30d"] == 1
    assert stats["last_scan"] is not None


async def test_concurrent_debits_cannot_overspend(session_maker):
    async with session_maker() as first, session_maker() as second:
        first_ledger = CreditLedger(first)
        second_ledger = CreditLedger(second)
        await first_ledger.initialize("ivy")
        await first.commit()

        # Both sessions see the same single credit before either debits
        assert (await first_ledger.check_credits_for_scan("ivy", "basic")).has_enough_credits
        await first.commit()
        assert (await second_ledger.check_credits_for_scan("ivy", "basic")).has_enough_credits
        await second.commit()

        await first_ledger.consume_credits(
            "ivy", 1, scan_type="basic", scan_url="https://example.com", description="Basic scan"
        )
        await first.commit()

        with pytest.raises(InsufficientCreditsError) as exc_info:
            await second_ledger.consume_credits(
                "ivy", 1, scan_type="basic", scan_url="https://example.org", description="Basic scan"
            )
        await second.rollback()

    assert exc_info.value.available == 0

    async with session_maker() as fresh:
        ledger = CreditLedger(fresh)
        user_credits = await ledger.get_user_credits("ivy")
        consumptions = await ledger.get_transaction_history("ivy", type=TRANSACTION_CONSUMPTION)

    assert user_credits.credits == 0
    assert user_credits.total_consumed == 1
    assert [t.scan_url for t in consumptions] == ["https://example.com"]
