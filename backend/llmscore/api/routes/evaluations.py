"""Stored evaluation history routes."""

from collections import defaultdict
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from llmscore.api.deps import CurrentUserId, DbSession
from llmscore.repositories import PostgresEvaluationRepository

router = APIRouter()


@router.get("")
async def list_evaluations(
    user_id: CurrentUserId,
    db: DbSession,
    limit: int = Query(default=50, ge=1, le=500),
) -> dict[str, Any]:
    """List the user's evaluations, most recently updated first."""
    evaluations = await PostgresEvaluationRepository(db).get_by_user(user_id, limit=limit)
    return {
        "success": True,
        "evaluations": [e.to_dict() for e in evaluations],
        "total": len(evaluations),
    }


@router.get("/lookup")
async def get_evaluation(
    user_id: CurrentUserId,
    db: DbSession,
    url: str = Query(...),
) -> dict[str, Any]:
    """Get the latest evaluation of one URL."""
    evaluation = await PostgresEvaluationRepository(db).get_by_user_url(user_id, url)
    if not evaluation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Evaluation not found",
        )
    return {"success": True, "evaluation": evaluation.to_dict()}


@router.get("/by-domain")
async def list_evaluations_by_domain(
    user_id: CurrentUserId,
    db: DbSession,
) -> dict[str, Any]:
    """Group the user's evaluations by domain, newest first within each."""
    evaluations = await PostgresEvaluationRepository(db).get_by_user(user_id, limit=1000)

    grouped: dict[str, list] = defaultdict(list)
    for evaluation in sorted(evaluations, key=lambda e: e.created_at, reverse=True):
        grouped[evaluation.domain].append(evaluation.to_dict())

    return {"success": True, "domains": dict(grouped)}


@router.get("/domains/{domain}/stats")
async def get_domain_stats(
    domain: str,
    user_id: CurrentUserId,
    db: DbSession,
) -> dict[str, Any]:
    """Score summary across every URL the user evaluated on a domain."""
    domain = domain.lower()
    evaluations = await PostgresEvaluationRepository(db).get_by_user_domain(user_id, domain)
    if not evaluations:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No evaluations found for this domain",
        )

    latest = evaluations[0]
    oldest = evaluations[-1]
    average = sum(e.overall_score for e in evaluations) / len(evaluations)
    improvement = latest.overall_score - oldest.overall_score if len(evaluations) > 1 else 0

    return {
        "success": True,
        "stats": {
            "domain": domain,
            "total_evaluations": len(evaluations),
            "latest_score": latest.overall_score,
            "average_score": round(average, 1),
            "improvement": improvement,
            "first_evaluated": oldest.created_at.isoformat(),
            "last_evaluated": latest.created_at.isoformat(),
            "evaluations": [e.to_dict() for e in evaluations[:5]],
        },
    }
