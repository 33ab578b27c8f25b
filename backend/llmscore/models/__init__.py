"""SQLAlchemy models."""

from llmscore.models.ai_file_check import AIFileCheck
from llmscore.models.credit_transaction import (
    TRANSACTION_CONSUMPTION,
    TRANSACTION_PURCHASE,
    CreditTransaction,
)
from llmscore.models.evaluation import Evaluation
from llmscore.models.user_credits import UserCredits
from llmscore.models.website_map import WebsiteMap

__all__ = [
    "UserCredits",
    "CreditTransaction",
    "Evaluation",
    "AIFileCheck",
    "WebsiteMap",
    "TRANSACTION_PURCHASE",
    "TRANSACTION_CONSUMPTION",
]
