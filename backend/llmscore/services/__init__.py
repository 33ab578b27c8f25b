"""Business logic services."""

from llmscore.services.ai_file_prober import AIFileProber, FileCheck
from llmscore.services.credit_ledger import CreditLedger, InsufficientCreditsError
from llmscore.services.evaluator import EvaluationResult, WebsiteEvaluator
from llmscore.services.firecrawl_service import FirecrawlService, MapServiceError
from llmscore.services.link_mapper import LinkMapper, LinkRecord
from llmscore.services.llm_client import LLMClient
from llmscore.services.url_validator import InvalidURLError, URLValidator

__all__ = [
    "AIFileProber",
    "FileCheck",
    "CreditLedger",
    "InsufficientCreditsError",
    "EvaluationResult",
    "WebsiteEvaluator",
    "FirecrawlService",
    "MapServiceError",
    "LinkMapper",
    "LinkRecord",
    "LLMClient",
    "InvalidURLError",
    "URLValidator",
]
