"""
Роутер чата: один ход диалога с ассистентом.
"""
import logging
from functools import lru_cache

from fastapi import APIRouter, Depends

from assistant_chat.errors import InvalidRequest
from assistant_chat.schemas import ChatRequest, ChatResponse, ErrorResponse
from assistant_chat.security import require_allowed_email
from assistant_chat.services.orchestrator import ConversationOrchestrator, build_orchestrator

router = APIRouter(prefix="/api", tags=["chat"])
logger = logging.getLogger(__name__)

def require_input(request: ChatRequest) -> ChatRequest:
    if not request.input.strip():
        raise InvalidRequest("Input is required")
    return request

# Зависимость для получения оркестратора; разрешается после проверки входа
@lru_cache(maxsize=1)
def get_orchestrator() -> ConversationOrchestrator:
    return build_orchestrator()

@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def chat(
    email: str = Depends(require_allowed_email),
    request: ChatRequest = Depends(require_input),
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    """
    Отправка сообщения ассистенту. Возвращает ответ и идентификатор треда,
    который клиент передает в следующем запросе.
    """
    logger.info(f"Запрос чата от {email} (тред {request.threadId or 'новый'})")
    result = await orchestrator.run_turn(request.input, request.threadId)
    return ChatResponse(reply=result.reply, threadId=result.thread_id)
