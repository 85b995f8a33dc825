from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from schemas.schemas import (
    MatchRequest,
    MatchResponse,
    ProviderMatch,
    ErrorResponse,
    ExplainResponse,
    CatalogReloadResponse,
    HealthCheckResponse,
)
from services.matcher_service import (
    run_matcher,
    run_explanation,
    REQUEST_COUNTER,
)
from utils.load_providers import CatalogUnavailableError
import structlog

log = structlog.get_logger()

router = APIRouter()

def catalog_unavailable(e: CatalogUnavailableError) -> JSONResponse:
    log.error("Provider catalog unavailable", error=str(e))
    return JSONResponse(
        status_code=503,
        content=ErrorResponse(
            status="error",
            message="Provider catalog is unavailable.",
            info=str(e)
        ).model_dump()
    )

def missing_fields_error(missing) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            status="error",
            message=f"Missing required fields: {', '.join(missing)}"
        ).model_dump()
    )

@router.get("/", response_model=HealthCheckResponse)
async def healthcheck(request: Request):
    return JSONResponse(content=HealthCheckResponse(
        status="ok",
        message="CoachMatch matching engine live",
        version=request.app.version
    ).model_dump())

@router.post("/match", response_model=MatchResponse, responses={422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}})
async def match(body: MatchRequest, request: Request):
    REQUEST_COUNTER.inc()
    state = request.app.state

    missing = body.missing_fields()
    if missing:
        return missing_fields_error(missing)

    try:
        providers = state.catalog.providers()
    except CatalogUnavailableError as e:
        return catalog_unavailable(e)

    matches = await run_matcher(
        body.to_preferences(),
        providers,
        top_n=state.top_n,
        weights=state.weights,
        geography=state.geography,
    )

    # An empty list is a valid outcome: no provider has capacity left
    return MatchResponse(
        status="success",
        data=[ProviderMatch.model_validate(m.to_dict()) for m in matches]
    )

@router.post("/explain", response_model=ExplainResponse, responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}})
async def explain(body: MatchRequest, request: Request):
    state = request.app.state

    try:
        providers = state.catalog.providers()
    except CatalogUnavailableError as e:
        return catalog_unavailable(e)

    best = await run_explanation(
        body.to_preferences(),
        providers,
        weights=state.weights,
        geography=state.geography,
    )

    if not best:
        return JSONResponse(
            status_code=404,
            content=ErrorResponse(
                status="error",
                message="No eligible provider found for explanation."
            ).model_dump()
        )

    return ExplainResponse(
        status="success",
        data={
            "name": best.provider.name,
            "match_score": best.match_score,
            "breakdown": best.breakdown,
        }
    )

@router.post("/catalog/reload", response_model=CatalogReloadResponse, responses={503: {"model": ErrorResponse}})
async def reload_catalog(request: Request):
    try:
        providers = request.app.state.catalog.reload()
    except CatalogUnavailableError as e:
        return catalog_unavailable(e)

    log.info("Catalog reloaded via API", providers=len(providers))
    return CatalogReloadResponse(status="success", providers=len(providers))
