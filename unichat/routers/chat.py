from fastapi import APIRouter, Depends

from unichat.models.schemas import ChatRequest, ChatResult
from unichat.services.chat_orchestrator import ChatOrchestrator
from unichat.dependencies import get_chat_orchestrator, get_current_user

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResult)
async def chat(
    request: ChatRequest,
    user_id: str = Depends(get_current_user),
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator),
):
    """Run one chat completion against the provider for ``model_id``."""
    return await orchestrator.handle(user_id, request)
