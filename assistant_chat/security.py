"""
Модуль безопасности для чат-прокси.
Пропускает только пользователей из белого списка email.

Аутентификацию выполняет внешний identity-прокси (OAuth): он кладет
подтвержденный email в заголовок X-Authenticated-Email.
"""
import logging
from typing import FrozenSet, Optional

from fastapi import Depends, HTTPException, Security
from fastapi.security.api_key import APIKeyHeader
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from assistant_chat import config

logger = logging.getLogger(__name__)

email_header = APIKeyHeader(name="X-Authenticated-Email", auto_error=False)

def get_allowed_emails() -> FrozenSet[str]:
    return config.ALLOWED_EMAILS

async def require_allowed_email(
    email: Optional[str] = Security(email_header),
    allowed_emails: FrozenSet[str] = Depends(get_allowed_emails),
) -> str:
    if not email or not email.strip():
        logger.warning("Отсутствует заголовок X-Authenticated-Email")
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    normalized = email.strip().lower()
    if normalized not in {allowed.lower() for allowed in allowed_emails}:
        logger.warning(f"Email не в белом списке: {normalized}")
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Access denied")
    return normalized
