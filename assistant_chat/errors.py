"""
Ошибки чат-прокси.
"""
from typing import Optional

from openai import APIError, APIStatusError


class ConfigurationError(RuntimeError):
    """Не заданы обязательные учетные данные бэкенда."""


class InvalidRequest(ValueError):
    """Некорректный запрос к инструменту."""


class UpstreamError(RuntimeError):
    """Неуспешный ответ OpenAI или поискового провайдера."""
    def __init__(self, message: str, status_code: Optional[int] = None, thread_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.thread_id = thread_id
    @classmethod
    def from_openai(cls, exc: APIError) -> "UpstreamError":
        if isinstance(exc, APIStatusError):
            return cls(exc.message, status_code=exc.status_code)
        return cls(exc.message or str(exc))
