from fastapi import APIRouter, Depends, HTTPException, status

from dsa_coach.core.errors import ProblemNotFound, UpstreamLookupFailure
from dsa_coach.dependencies import get_catalog
from dsa_coach.schemas.problems import ProblemDetails, ProblemValidation
from dsa_coach.services.catalog import LeetCodeCatalog

router = APIRouter(prefix="/problems", tags=["problems"])


@router.get("/validate/{title_slug}", response_model=ProblemValidation)
async def validate_problem(
    title_slug: str,
    catalog: LeetCodeCatalog = Depends(get_catalog),
) -> ProblemValidation:
    try:
        exists = await catalog.exists(title_slug)
    except UpstreamLookupFailure as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return ProblemValidation(title_slug=title_slug, exists=exists)


@router.get("/{title_slug}", response_model=ProblemDetails)
async def get_problem_details(
    title_slug: str,
    catalog: LeetCodeCatalog = Depends(get_catalog),
) -> ProblemDetails:
    try:
        return await catalog.get_details(title_slug)
    except ProblemNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except UpstreamLookupFailure as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
