"""
Схемы данных для чат-прокси.
"""
from pydantic import BaseModel
from typing import Optional, List

class ChatRequest(BaseModel):
    input: str = ""
    threadId: Optional[str] = None

class ChatResponse(BaseModel):
    reply: str
    threadId: str

class ErrorResponse(BaseModel):
    error: str
    threadId: Optional[str] = None

class SearchRequest(BaseModel):
    query: str = ""
    max_results: Optional[int] = 3
    include_domains: Optional[List[str]] = None

class SearchResultItem(BaseModel):
    title: str = ""
    url: str = ""
    snippet: str = ""

class SearchResponse(BaseModel):
    query: str
    include_domains: List[str]
    count: int
    results: List[SearchResultItem]
