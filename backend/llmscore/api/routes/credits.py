"""Credit balance, purchase and transaction history routes."""

from typing import Any, Literal

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from llmscore.api.deps import AppSettings, CurrentUserId, Ledger
from llmscore.services.credit_ledger import PRICING_PACKAGES, pricing_table

router = APIRouter()


class PurchaseRequest(BaseModel):
    """Request to buy a credit package."""

    model_config = ConfigDict(populate_by_name=True)

    package_type: str | None = Field(default=None, alias="packageType")
    payment_token: str | None = Field(default=None, alias="paymentToken")


@router.get("")
async def get_credits(
    user_id: CurrentUserId,
    ledger: Ledger,
) -> dict[str, Any]:
    """Balance, usage stats, recent transactions and pricing."""
    await ledger.initialize(user_id)

    user_credits = await ledger.get_user_credits(user_id)
    stats = await ledger.get_credit_stats(user_id)
    transactions = await ledger.get_transaction_history(user_id, limit=10)

    return {
        "success": True,
        "credits": user_credits.to_dict(),
        "stats": stats,
        "recent_transactions": [t.to_dict() for t in transactions],
        "pricing": pricing_table(),
    }


@router.post("")
async def purchase_credits(
    request: PurchaseRequest,
    user_id: CurrentUserId,
    ledger: Ledger,
    settings: AppSettings,
) -> dict[str, Any]:
    """Buy a credit package."""
    if not request.package_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Package type is required",
        )

    package = PRICING_PACKAGES.get(request.package_type)
    if package is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid package type",
        )

    # TODO: charge through a payment processor instead of accepting the demo token
    if request.payment_token != settings.demo_payment_token:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail="Payment processing failed",
        )

    new_balance = await ledger.add_credits(
        user_id,
        package["credits"],
        package_type=request.package_type,
        price_paid=package["price"],
        description=f"Purchased {request.package_type} package ({package['credits']} credits)",
    )

    return {
        "success": True,
        "message": "Credits purchased successfully",
        "credits_added": package["credits"],
        "new_balance": new_balance,
        "package": request.package_type,
        "amount_paid": package["price"] / 100,
    }


@router.get("/transactions")
async def list_transactions(
    user_id: CurrentUserId,
    ledger: Ledger,
    limit: int = Query(default=50, ge=1, le=500),
    type: Literal["purchase", "consumption"] | None = Query(default=None),
) -> dict[str, Any]:
    """Transaction history, newest first."""
    transactions = await ledger.get_transaction_history(user_id, limit=limit, type=type)

    return {
        "success": True,
        "transactions": [t.to_dict() for t in transactions],
        "total": len(transactions),
    }
