"""Repository implementations for data access."""

from llmscore.repositories.postgres import (
    PostgresAIFileCheckRepository,
    PostgresCreditTransactionRepository,
    PostgresEvaluationRepository,
    PostgresUserCreditsRepository,
    PostgresWebsiteMapRepository,
)

__all__ = [
    "PostgresUserCreditsRepository",
    "PostgresCreditTransactionRepository",
    "PostgresEvaluationRepository",
    "PostgresAIFileCheckRepository",
    "PostgresWebsiteMapRepository",
]
