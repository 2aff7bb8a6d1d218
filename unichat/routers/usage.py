from fastapi import APIRouter, Depends

from unichat.models.schemas import UsageResponse
from unichat.services.usage_ledger import UsageLedger
from unichat.dependencies import get_current_user, get_usage_ledger

router = APIRouter(prefix="/usage", tags=["usage"])


@router.get("", response_model=UsageResponse)
async def get_usage(
    user_id: str = Depends(get_current_user),
    ledger: UsageLedger = Depends(get_usage_ledger),
):
    return await ledger.get_usage(user_id)
