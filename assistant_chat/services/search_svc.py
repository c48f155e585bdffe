"""
Сервис веб-поиска через Tavily.

Используется как инструмент web_search ассистента и напрямую роутером /api/search.
execute() бросает типизированные ошибки; search() превращает их в payload
{"error": ...}, пригодный для отправки в качестве результата инструмента.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from assistant_chat import config
from assistant_chat.errors import ConfigurationError, InvalidRequest, UpstreamError
from assistant_chat.schemas import SearchResponse, SearchResultItem

logger = logging.getLogger(__name__)

MIN_RESULTS = 1
MAX_RESULTS = 10
DEFAULT_RESULTS = 3

def clamp_max_results(value: Any) -> int:
    if value is None:
        return DEFAULT_RESULTS
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return MIN_RESULTS
    return min(max(number, MIN_RESULTS), MAX_RESULTS)

class SearchService:
    """Класс для поиска через Tavily."""
    def __init__(
        self,
        api_key: Optional[str] = None,
        default_domains: Optional[Sequence[str]] = None,
        empty_means_unrestricted: Optional[bool] = None,
        timeout: Optional[float] = None,
        url: Optional[str] = None,
        search_depth: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else config.TAVILY_API_KEY
        self.default_domains = list(default_domains if default_domains is not None else config.SEARCH_DEFAULT_DOMAINS)
        self.empty_means_unrestricted = (
            empty_means_unrestricted if empty_means_unrestricted is not None
            else config.SEARCH_EMPTY_MEANS_UNRESTRICTED
        )
        self.timeout = timeout if timeout is not None else config.SEARCH_TIMEOUT
        self.url = url or config.TAVILY_URL
        self.search_depth = search_depth or config.SEARCH_DEPTH
        self.transport = transport
    def resolve_domains(self, include_domains: Optional[Sequence[Any]]) -> List[str]:
        """
        None -> домены по умолчанию.
        [] -> без ограничений при empty_means_unrestricted, иначе домены по умолчанию.
        Непустой список используется как есть (без пустых и нестроковых элементов).
        """
        if include_domains is None:
            return list(self.default_domains)
        domains = [d.strip() for d in include_domains if isinstance(d, str) and d.strip()]
        if domains:
            return domains
        if self.empty_means_unrestricted:
            return []
        return list(self.default_domains)
    async def execute(self, query: Any, max_results: Any = DEFAULT_RESULTS,
                      include_domains: Optional[Sequence[Any]] = None) -> Dict[str, Any]:
        query = query.strip() if isinstance(query, str) else ""
        if not query:
            raise InvalidRequest("Query is required")
        if not self.api_key:
            raise ConfigurationError("Tavily API key not configured")
        limit = clamp_max_results(max_results)
        domains = self.resolve_domains(include_domains)
        body = {
            "query": query,
            "include_domains": domains,
            "max_results": limit,
            "search_depth": self.search_depth,
            "include_answer": False,
            "include_raw_content": False,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        logger.info(f"Поиск Tavily: {query!r} (max_results={limit}, include_domains={domains})")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=body, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"Таймаут запроса к Tavily ({self.timeout}s): {e}")
            raise UpstreamError(f"Tavily request timed out after {self.timeout:g}s") from e
        except httpx.HTTPError as e:
            logger.error(f"Ошибка сети при запросе к Tavily: {e}")
            raise UpstreamError(f"Tavily request failed: {e}") from e
        if response.status_code >= 400:
            logger.error(f"Tavily вернул {response.status_code}")
            raise UpstreamError(f"Tavily error: {response.status_code} {response.text}",
                                status_code=response.status_code)
        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Tavily returned invalid JSON", status_code=response.status_code) from e
        raw_results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(raw_results, list):
            raw_results = []
        results = [
            SearchResultItem(
                title=item.get("title") or "",
                url=item.get("url") or "",
                snippet=item.get("content") or item.get("snippet") or "",
            )
            for item in raw_results[:limit]
            if isinstance(item, dict)
        ]
        return SearchResponse(
            query=query,
            include_domains=domains,
            count=len(results),
            results=results,
        ).model_dump()
    async def search(self, query: Any, max_results: Any = DEFAULT_RESULTS,
                     include_domains: Optional[Sequence[Any]] = None) -> Dict[str, Any]:
        """Как execute(), но ошибки возвращаются payload'ом {"error": ...}."""
        try:
            return await self.execute(query, max_results, include_domains)
        except (InvalidRequest, ConfigurationError, UpstreamError) as e:
            return {"error": str(e)}
    async def web_search_tool(self, args: Dict[str, Any]) -> Dict[str, Any]:
        """Обработчик инструмента web_search."""
        return await self.search(
            args.get("query"),
            args.get("max_results", DEFAULT_RESULTS),
            args.get("include_domains"),
        )
