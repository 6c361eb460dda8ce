import logging

from fastapi import BackgroundTasks, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from sparksave.adapters.config.settings_loader import load_settings
from sparksave.adapters.explainers.openrouter import OpenRouterExplanationService, RetryPolicy
from sparksave.adapters.stores.yaml_catalog import YamlPlanCatalog
from sparksave.core.domain.errors import MissingUserDataError, RecommendationError
from sparksave.core.domain.recommendation import RankedRecommendations, RecommendationRequest
from sparksave.core.domain.settings import SystemSettings
from sparksave.core.domain.usage import UsageProfile
from sparksave.core.services.engine import RecommendationEngine
from sparksave.core.services.recommendation_service import RecommendationService

# Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Configuration (Load from YAML with Env Overrides)
settings = load_settings()

# FastAPI Application
app = FastAPI(title="SparkSave")


def build_service(config: SystemSettings) -> RecommendationService:
    """
    Instantiate the engine and its collaborators from settings.
    """
    explainer = None
    if config.explanations_enabled:
        explainer = OpenRouterExplanationService(
            api_key=config.openrouter_api_key,
            base_url=config.openrouter_base_url,
            model=config.openrouter_model,
            timeout=config.explainer_timeout,
            retry=RetryPolicy(
                max_attempts=config.explainer_max_attempts,
                backoff_seconds=config.explainer_backoff_seconds,
            ),
        )
    engine = RecommendationEngine(explainer=explainer, top_n=config.default_top_n)

    if config.plan_catalog_type == "mongo":
        from sparksave.adapters.stores.mongo_store import MongoPlanCatalog
        catalog = MongoPlanCatalog(config)
    else:
        catalog = YamlPlanCatalog(catalog_path=config.plans_file)

    memory_bank = None
    if config.memory_bank_type == "mongo":
        from sparksave.adapters.stores.mongo_store import MongoMemoryBank
        memory_bank = MongoMemoryBank(config)

    return RecommendationService(engine, catalog=catalog, profiles=memory_bank, history=memory_bank)


def _response(result: RankedRecommendations) -> dict:
    return {
        "success": True,
        "recommendations": [r.to_response() for r in result.recommendations],
        "currentAnnualCost": result.current_annual_cost,
        "annualKwh": result.annual_kwh,
        "eligiblePlanCount": result.eligible_plan_count,
        "explanationSource": result.explanation_source,
    }


@app.exception_handler(RecommendationError)
async def recommendation_error_handler(request: Request, exc: RecommendationError):
    status_code = 404 if isinstance(exc, MissingUserDataError) else 400
    logger.info(f"Recommendation request rejected ({status_code}): {exc}")
    return JSONResponse(status_code=status_code, content={"success": False, "error": str(exc)})


@app.get("/health")
def health_check():
    return {"status": "ok", "version": "0.1.0"}


@app.post("/recommendations")
async def create_recommendations(body: RecommendationRequest, background_tasks: BackgroundTasks):
    """
    Recommend plans from usage, preferences and plans supplied in the request.
    History is stored after the response when a userId is given.
    """
    service = build_service(settings)
    try:
        result = await service.recommend(
            body.usage_data,
            body.preferences,
            body.available_plans,
            user_id=body.user_id,
            top_n=body.top_n,
        )
    except Exception:
        await service.close()
        raise
    if body.user_id:
        background_tasks.add_task(service.record_history, body.user_id, result)
    # Background tasks run in order; stores stay open until history is written
    background_tasks.add_task(service.close)
    return _response(result)


@app.post("/users/{user_id}/recommendations")
async def create_user_recommendations(
    user_id: str,
    background_tasks: BackgroundTasks,
    state: str | None = None,
    top_n: int | None = Query(default=None, ge=1),
):
    """
    Recommend plans from the user's stored usage and preferences and the plan catalog.
    """
    service = build_service(settings)
    try:
        result = await service.recommend_for_user(user_id, state=state, top_n=top_n)
    except Exception:
        await service.close()
        raise
    background_tasks.add_task(service.record_history, user_id, result)
    background_tasks.add_task(service.close)
    return _response(result)


@app.get("/users/{user_id}/recommendations/history")
async def get_recommendation_history(user_id: str, limit: int = Query(10, ge=1, le=100)):
    service = build_service(settings)
    try:
        entries = await service.list_history(user_id, limit=limit)
    finally:
        await service.close()
    return {
        "success": True,
        "history": [e.model_dump(mode="json", by_alias=True) for e in entries],
    }


@app.post("/users/{user_id}/usage/analyze")
async def analyze_usage(user_id: str, usage: UsageProfile):
    """
    Derive the seasonal usage pattern of a usage history and remember it.
    """
    service = build_service(settings)
    try:
        pattern, pattern_id = await service.analyze_usage(user_id, usage)
    finally:
        await service.close()
    return {
        "success": True,
        "patternId": pattern_id,
        "pattern": pattern.model_dump(by_alias=True),
    }
