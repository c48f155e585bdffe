"""
Роутер веб-поиска: прямой доступ к инструменту web_search.
"""
import logging

from fastapi import APIRouter, Depends

from assistant_chat.schemas import ErrorResponse, SearchRequest, SearchResponse
from assistant_chat.security import require_allowed_email
from assistant_chat.services.search_svc import SearchService

router = APIRouter(prefix="/api", tags=["search"])
logger = logging.getLogger(__name__)

def get_search_service() -> SearchService:
    return SearchService()

@router.post(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def search(
    request: SearchRequest,
    email: str = Depends(require_allowed_email),
    search_service: SearchService = Depends(get_search_service),
):
    """
    Поиск через Tavily. Пустой include_domains обрабатывается согласно
    SEARCH_EMPTY_MEANS_UNRESTRICTED.
    """
    return await search_service.execute(request.query, request.max_results, request.include_domains)
