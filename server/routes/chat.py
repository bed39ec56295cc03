"""Chat endpoint: one search-augmented turn per request."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from config.config import Config
from orchestrator.core import ChatOrchestrator
from server.dependencies import get_config, get_orchestrator
from server.schemas.requests import ChatRequest
from server.schemas.responses import ChatErrorDTO, ChatResponseDTO
from server.utils import trim_history
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Chat"])


@router.post(
    "/chat",
    response_model=ChatResponseDTO,
    response_model_exclude_none=True,
    responses={500: {"model": ChatErrorDTO}},
)
async def chat(
    request: ChatRequest,
    http_request: Request,
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
    config: Config = Depends(get_config),
):
    """Send a message (with prior history) and get the assistant's reply."""
    request_id = getattr(http_request.state, "request_id", "unknown")
    history = trim_history(request.history, config.MAX_HISTORY_MESSAGES)

    result = await orchestrator.ask(
        message=request.message,
        history=history,
        enable_search=request.enable_search,
    )

    if not result.success:
        logger.error(
            "Chat turn failed",
            extra={"extra_fields": {"request_id": request_id, "details": result.details}},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ChatErrorDTO(error=result.error, details=result.details or "").model_dump(),
        )

    logger.info(
        "Chat turn completed",
        extra={
            "extra_fields": {
                "request_id": request_id,
                "model": result.model,
                "search_trigger": result.search.trigger if result.search else None,
                "tokens": result.usage.total_tokens,
            }
        },
    )
    return ChatResponseDTO.from_turn_result(result)
