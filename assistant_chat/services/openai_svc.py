"""
Сервис для работы с OpenAI Assistants API (v2).
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import APIError

from assistant_chat import config
from assistant_chat.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

class OpenAIService:
    """Класс для работы с тредами и запусками ассистента."""
    def __init__(
        self,
        api_key: Optional[str] = None,
        assistant_id: Optional[str] = None,
        organization: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        max_retries: int = 0,
    ):
        api_key = api_key if api_key is not None else config.OPENAI_API_KEY
        assistant_id = assistant_id if assistant_id is not None else config.OPENAI_ASSISTANT_ID
        organization = organization if organization is not None else config.OPENAI_ORGANIZATION
        if not api_key or not assistant_id:
            raise ConfigurationError("Missing OpenAI credentials")
        self.assistant_id = assistant_id
        self.client = openai.AsyncOpenAI(
            api_key=api_key,
            organization=(organization or None),
            default_headers={"OpenAI-Beta": "assistants=v2"},
            http_client=http_client,
            max_retries=max_retries,
        )
    async def create_thread(self) -> Any:
        try:
            thread = await self.client.beta.threads.create()
            logger.info(f"Создан тред {thread.id}")
            return thread
        except APIError as e:
            logger.error(f"Ошибка при создании треда: {e}")
            raise UpstreamError.from_openai(e) from e
    async def add_message(self, thread_id: str, role: str, content: str) -> Any:
        try:
            message = await self.client.beta.threads.messages.create(
                thread_id=thread_id,
                role=role,
                content=content
            )
            return message
        except APIError as e:
            logger.error(f"Ошибка при добавлении сообщения в тред {thread_id}: {e}")
            raise UpstreamError.from_openai(e) from e
    async def create_run(self, thread_id: str) -> Any:
        try:
            run = await self.client.beta.threads.runs.create(
                thread_id=thread_id,
                assistant_id=self.assistant_id
            )
            logger.info(f"Создан запуск {run.id} для треда {thread_id} (статус {run.status})")
            return run
        except APIError as e:
            logger.error(f"Ошибка при создании запуска для треда {thread_id}: {e}")
            raise UpstreamError.from_openai(e) from e
    async def get_run(self, thread_id: str, run_id: str) -> Any:
        try:
            run = await self.client.beta.threads.runs.retrieve(
                thread_id=thread_id,
                run_id=run_id
            )
            return run
        except APIError as e:
            logger.error(f"Ошибка при получении информации о запуске {run_id} для треда {thread_id}: {e}")
            raise UpstreamError.from_openai(e) from e
    async def submit_tool_outputs(self, thread_id: str, run_id: str, tool_outputs: List[Dict[str, str]]) -> Any:
        try:
            run = await self.client.beta.threads.runs.submit_tool_outputs(
                thread_id=thread_id,
                run_id=run_id,
                tool_outputs=tool_outputs
            )
            return run
        except APIError as e:
            logger.error(f"Ошибка при отправке результатов инструментов для запуска {run_id}: {e}")
            raise UpstreamError.from_openai(e) from e
    async def list_messages(self, thread_id: str, limit: int = 20) -> List[Any]:
        """Сообщения треда, новые первыми."""
        try:
            messages = await self.client.beta.threads.messages.list(
                thread_id=thread_id,
                order="desc",
                limit=limit
            )
            return list(messages.data)
        except APIError as e:
            logger.error(f"Ошибка при получении сообщений из треда {thread_id}: {e}")
            raise UpstreamError.from_openai(e) from e
