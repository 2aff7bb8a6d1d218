from fastapi import APIRouter, Depends

from unichat.config import Settings, get_settings
from unichat.models.schemas import ModelListResponse
from unichat.services.cost_tracker import CostTracker
from unichat.services.pricing import build_catalog
from unichat.dependencies import get_cost_tracker, get_current_user

router = APIRouter(prefix="/models", tags=["models"])


@router.get("", response_model=ModelListResponse)
async def list_models(
    user_id: str = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    cost_tracker: CostTracker = Depends(get_cost_tracker),
):
    """Model catalog with prices taken from the price table."""
    models = build_catalog(settings.models_config, cost_tracker.price_table)
    return ModelListResponse(models=models)
