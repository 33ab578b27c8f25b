"""Dependency injection for FastAPI routes."""

import logging
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from llmscore.config import Settings, get_settings
from llmscore.database import get_db
from llmscore.services.ai_file_prober import AIFileProber
from llmscore.services.credit_ledger import CreditLedger
from llmscore.services.firecrawl_service import FirecrawlService
from llmscore.services.llm_client import LLMClient

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# Type aliases for dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_current_user_id(
    settings: AppSettings,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Resolve the user id from the bearer token's ``sub`` claim."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected session token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return str(user_id)


def get_firecrawl_service(settings: AppSettings) -> FirecrawlService:
    return FirecrawlService(settings)


def get_llm_client(settings: AppSettings) -> LLMClient:
    return LLMClient(settings)


def get_ai_file_prober(settings: AppSettings) -> AIFileProber:
    return AIFileProber(settings)


def get_credit_ledger(db: DbSession, settings: AppSettings) -> CreditLedger:
    return CreditLedger(db, signup_bonus=settings.signup_bonus_credits)


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
Crawler = Annotated[FirecrawlService, Depends(get_firecrawl_service)]
LLM = Annotated[LLMClient, Depends(get_llm_client)]
Prober = Annotated[AIFileProber, Depends(get_ai_file_prober)]
Ledger = Annotated[CreditLedger, Depends(get_credit_ledger)]
