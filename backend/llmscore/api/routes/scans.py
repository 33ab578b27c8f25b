"""Scan routes: site map, AI file probe, evaluation and the full scan."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from llmscore.api.deps import LLM, Crawler, CurrentUserId, DbSession, Ledger, Prober
from llmscore.config import get_settings
from llmscore.repositories import (
    PostgresAIFileCheckRepository,
    PostgresEvaluationRepository,
    PostgresWebsiteMapRepository,
)
from llmscore.services.ai_file_prober import FileCheck
from llmscore.services.credit_ledger import (
    CreditLedger,
    InsufficientCreditsError,
    credits_required,
    normalize_scan_type,
)
from llmscore.services.evaluator import EvaluationResult, WebsiteEvaluator
from llmscore.services.firecrawl_service import MapServiceError
from llmscore.services.link_mapper import LinkMapper, LinkRecord, MapResult
from llmscore.services.url_validator import InvalidURLError, TargetURL, URLValidator

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()


class ScanRequest(BaseModel):
    """Request naming a site to scan."""

    model_config = ConfigDict(populate_by_name=True)

    url: str | None = None
    scan_type: str = Field(default="basic", alias="scanType")

    @field_validator("scan_type")
    @classmethod
    def billable_scan_type(cls, value: str) -> str:
        return normalize_scan_type(value)


class LinkPayload(BaseModel):
    url: str = ""
    title: str | None = None
    description: str | None = None


class FileCheckPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: str
    exists: bool
    content: str | None = None
    error: str | None = None
    status_code: int | None = Field(default=None, alias="statusCode")
    content_type: str | None = Field(default=None, alias="contentType")


class EvaluateRequest(ScanRequest):
    """Evaluation request; map and file results may come from the client."""

    site_map: list[LinkPayload] | None = Field(default=None, alias="siteMap")
    ai_files: list[FileCheckPayload] | None = Field(default=None, alias="aiFiles")


def _parse_target(url: str | None) -> TargetURL:
    try:
        return URLValidator().parse(url)
    except InvalidURLError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


async def _charge_scan(
    ledger: CreditLedger,
    db: AsyncSession,
    user_id: str,
    target: TargetURL,
    scan_type: str,
) -> tuple[int, int]:
    """Debit the scan's cost. Returns (credits charged, remaining balance)."""
    required = credits_required(scan_type)
    await ledger.initialize(user_id)
    # Keep the signup bonus even if this scan is rejected
    await db.commit()

    try:
        remaining = await ledger.consume_credits(
            user_id,
            required,
            scan_type=scan_type,
            scan_url=target.url,
            description=f"{scan_type.capitalize()} scan of {target.domain}",
        )
    except InsufficientCreditsError as e:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail={"error": "Insufficient credits", "details": e.to_details()},
        )

    # IMPORTANT: Commit the debit before the slow external calls so the
    # balance row isn't held locked for the whole scan
    await db.commit()
    return required, remaining


async def _save_quietly(db: AsyncSession, what: str, operation) -> None:
    """Run a persistence step in a savepoint; failures are logged only."""
    try:
        async with db.begin_nested():
            await operation()
    except SQLAlchemyError as e:
        logger.error(f"Error saving {what}: {e}")


async def _run_map(crawler, target: TargetURL) -> MapResult:
    try:
        return await LinkMapper(crawler).map(target.url)
    except MapServiceError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to map website",
        )


async def _save_map(
    db: AsyncSession,
    user_id: str,
    target: TargetURL,
    result: MapResult,
    credits_consumed: int,
    scan_type: str,
) -> None:
    repo = PostgresWebsiteMapRepository(db)
    await _save_quietly(
        db,
        f"website map for {target.url}",
        lambda: repo.upsert(
            user_id,
            target.url,
            domain=target.domain,
            links=[link.to_dict() for link in result.links],
            total_links=result.summary.total_links,
            html_pages=result.summary.html_pages,
            missing_titles=result.summary.missing_titles,
            missing_descriptions=result.summary.missing_descriptions,
            credits_consumed=credits_consumed,
            scan_type=scan_type,
        ),
    )


async def _save_files(
    db: AsyncSession,
    user_id: str,
    target: TargetURL,
    files: list[FileCheck],
    credits_consumed: int = 0,
    scan_type: str = "basic",
) -> None:
    repo = PostgresAIFileCheckRepository(db)
    await _save_quietly(
        db,
        f"AI files for {target.url}",
        lambda: repo.upsert(
            user_id,
            target.url,
            domain=target.domain,
            files=[check.to_dict() for check in files],
            credits_consumed=credits_consumed,
            scan_type=scan_type,
        ),
    )


async def _save_evaluation(
    db: AsyncSession,
    user_id: str,
    target: TargetURL,
    result: EvaluationResult,
    credits_consumed: int,
    scan_type: str,
) -> None:
    repo = PostgresEvaluationRepository(db)
    await _save_quietly(
        db,
        f"evaluation for {target.url}",
        lambda: repo.upsert(
            user_id,
            target.url,
            domain=target.domain,
            overall_score=result.overall_score,
            search_visibility_score=result.search_visibility.score,
            content_quality_score=result.content_quality.score,
            technical_seo_score=result.technical_seo.score,
            ai_optimization_score=result.ai_optimization.score,
            search_performance=result.search_performance,
            recommendations=result.recommendations,
            credits_consumed=credits_consumed,
            scan_type=scan_type,
        ),
    )


def _map_payload(result: MapResult) -> dict[str, Any]:
    return {
        "links": [link.to_dict() for link in result.links],
        "totalLinks": result.summary.total_links,
        "htmlPages": result.summary.html_pages,
        "missingTitles": result.summary.missing_titles,
        "missingDescriptions": result.summary.missing_descriptions,
    }


@router.post("/map")
async def map_website(
    request: ScanRequest,
    user_id: CurrentUserId,
    db: DbSession,
    ledger: Ledger,
    crawler: Crawler,
) -> dict[str, Any]:
    """Map a site's URLs. Costs one scan's worth of credits."""
    target = _parse_target(request.url)
    charged, remaining = await _charge_scan(ledger, db, user_id, target, request.scan_type)

    result = await _run_map(crawler, target)
    await _save_map(db, user_id, target, result, charged, request.scan_type)

    return {
        "success": True,
        **_map_payload(result),
        "creditsRemaining": remaining,
    }


@router.post("/check-files")
async def check_files(
    request: ScanRequest,
    user_id: CurrentUserId,
    db: DbSession,
    prober: Prober,
) -> dict[str, Any]:
    """Probe the site's origin for AI discovery files."""
    target = _parse_target(request.url)

    files = await prober.probe(target.origin)
    await _save_files(db, user_id, target, files)

    return {
        "success": True,
        "url": target.origin,
        "files": [check.to_dict() for check in files],
    }


@router.post("/evaluate")
async def evaluate_website(
    request: EvaluateRequest,
    user_id: CurrentUserId,
    db: DbSession,
    crawler: Crawler,
    llm: LLM,
) -> dict[str, Any]:
    """Score a site from its map and file results.

    Missing ``siteMap``/``aiFiles`` fall back to this user's stored results
    for the same URL.
    """
    target = _parse_target(request.url)

    site_map: list[LinkRecord] | None = None
    if request.site_map is not None:
        site_map = [LinkRecord.from_dict(link.model_dump()) for link in request.site_map]
    else:
        stored_map = await PostgresWebsiteMapRepository(db).get_by_user_url(user_id, target.url)
        if stored_map:
            site_map = [LinkRecord.from_dict(link) for link in stored_map.links]

    ai_files: list[FileCheck] | None = None
    if request.ai_files is not None:
        ai_files = [
            FileCheck.from_dict(check.model_dump(by_alias=True)) for check in request.ai_files
        ]
    else:
        stored_files = await PostgresAIFileCheckRepository(db).get_by_user_url(user_id, target.url)
        if stored_files:
            ai_files = [FileCheck.from_dict(check) for check in stored_files.files]

    evaluator = WebsiteEvaluator(crawler, llm, settings.scrape_max_chars)
    result = await evaluator.evaluate(target.url, target.domain, site_map, ai_files)
    await _save_evaluation(db, user_id, target, result, 0, request.scan_type)

    return {
        "success": True,
        "evaluation": result.to_dict(),
    }


@router.post("/scan")
async def run_scan(
    request: ScanRequest,
    user_id: CurrentUserId,
    db: DbSession,
    ledger: Ledger,
    crawler: Crawler,
    llm: LLM,
    prober: Prober,
) -> dict[str, Any]:
    """Full scan: map, AI file probe and evaluation for a single debit."""
    target = _parse_target(request.url)
    charged, remaining = await _charge_scan(ledger, db, user_id, target, request.scan_type)

    map_result = await _run_map(crawler, target)
    files = await prober.probe(target.origin)

    evaluator = WebsiteEvaluator(crawler, llm, settings.scrape_max_chars)
    evaluation = await evaluator.evaluate(target.url, target.domain, map_result.links, files)

    await _save_map(db, user_id, target, map_result, charged, request.scan_type)
    await _save_files(db, user_id, target, files, charged, request.scan_type)
    await _save_evaluation(db, user_id, target, evaluation, charged, request.scan_type)

    return {
        "success": True,
        "url": target.url,
        "map": _map_payload(map_result),
        "files": [check.to_dict() for check in files],
        "evaluation": evaluation.to_dict(),
        "creditsConsumed": charged,
        "creditsRemaining": remaining,
    }
