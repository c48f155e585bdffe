"""
Оркестратор диалога: один ход пользователя = один запуск ассистента.
Создает тред при необходимости, опрашивает запуск до конечного статуса,
обслуживает вызовы инструментов и возвращает очищенный ответ.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from assistant_chat import config
from assistant_chat.errors import UpstreamError
from assistant_chat.services.formatting import repair_markdown_tables, strip_citations
from assistant_chat.services.openai_svc import OpenAIService
from assistant_chat.services.run_state import PollAction, RunStatus, next_action
from assistant_chat.services.search_svc import SearchService
from assistant_chat.services.tools import ToolRegistry

logger = logging.getLogger(__name__)

NO_VALID_RESPONSE = "No valid response."
RUN_FAILED_REPLY = "Assistant run failed. Please try again."
RUN_ENDED_REPLY = "Assistant run ended with status: {status}."
TIMEOUT_REPLY = "The assistant is taking longer than expected. Please try again."

class TurnOutcome(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    INCOMPLETE = "incomplete"
    TIMEOUT = "timeout"

@dataclass
class TurnResult:
    reply: str
    thread_id: str
    outcome: TurnOutcome

class ConversationOrchestrator:
    """Класс для проведения одного хода диалога."""
    def __init__(
        self,
        openai_service: OpenAIService,
        tools: ToolRegistry,
        poll_interval: Optional[float] = None,
        max_poll_ticks: Optional[int] = None,
        repair_tables: Optional[bool] = None,
    ):
        self.openai_service = openai_service
        self.tools = tools
        self.poll_interval = poll_interval if poll_interval is not None else config.POLL_INTERVAL
        self.max_poll_ticks = max_poll_ticks if max_poll_ticks is not None else config.MAX_POLL_TICKS
        self.repair_tables = repair_tables if repair_tables is not None else config.REPAIR_TABLES
    async def run_turn(self, user_input: str, thread_id: Optional[str] = None) -> TurnResult:
        if not thread_id:
            thread = await self.openai_service.create_thread()
            thread_id = thread.id
        try:
            await self.openai_service.add_message(thread_id, "user", user_input)
            run = await self.openai_service.create_run(thread_id)
            status = await self._poll_run(thread_id, run)
            if status is None:
                logger.warning(f"Запуск {run.id} треда {thread_id} не завершился за {self.max_poll_ticks} опросов")
                return TurnResult(TIMEOUT_REPLY, thread_id, TurnOutcome.TIMEOUT)
            if status is RunStatus.COMPLETED:
                reply = await self._extract_reply(thread_id)
                return TurnResult(reply, thread_id, TurnOutcome.COMPLETED)
            logger.warning(f"Запуск {run.id} треда {thread_id} завершился со статусом {status.value}")
            if status is RunStatus.FAILED:
                return TurnResult(RUN_FAILED_REPLY, thread_id, TurnOutcome.FAILED)
            return TurnResult(RUN_ENDED_REPLY.format(status=status.value), thread_id, TurnOutcome(status.value))
        except UpstreamError as e:
            e.thread_id = thread_id
            raise
    async def _poll_run(self, thread_id: str, run: Any) -> Optional[RunStatus]:
        """Конечный статус запуска или None, если бюджет опросов исчерпан."""
        status = RunStatus.parse(run.status)
        ticks = 0
        while True:
            action = next_action(status)
            if action is PollAction.FINISH:
                return status
            if ticks >= self.max_poll_ticks:
                return None
            if action is PollAction.SUBMIT_TOOL_OUTPUTS and self._pending_tool_calls(run):
                await self._submit_tool_outputs(thread_id, run)
            else:
                await asyncio.sleep(self.poll_interval)
            run = await self.openai_service.get_run(thread_id, run.id)
            status = RunStatus.parse(run.status)
            ticks += 1
            logger.debug(f"Запуск {run.id}: опрос {ticks}, статус {run.status}")
    @staticmethod
    def _pending_tool_calls(run: Any) -> list:
        required_action = getattr(run, "required_action", None)
        submit = getattr(required_action, "submit_tool_outputs", None)
        return list(getattr(submit, "tool_calls", None) or [])
    async def _submit_tool_outputs(self, thread_id: str, run: Any) -> None:
        calls = self._pending_tool_calls(run)
        logger.info(f"Запуск {run.id} ожидает {len(calls)} вызов(ов) инструментов")
        outputs = await self.tools.dispatch_batch(calls)
        await self.openai_service.submit_tool_outputs(thread_id, run.id, outputs)
    async def _extract_reply(self, thread_id: str) -> str:
        messages = await self.openai_service.list_messages(thread_id)
        for message in messages:
            if message.role != "assistant":
                continue
            for block in message.content or []:
                text = getattr(block, "text", None)
                value = getattr(text, "value", None)
                if value:
                    reply = strip_citations(value)
                    if self.repair_tables:
                        reply = repair_markdown_tables(reply)
                    return reply or NO_VALID_RESPONSE
            return NO_VALID_RESPONSE
        return NO_VALID_RESPONSE

def build_orchestrator(search_service: Optional[SearchService] = None) -> ConversationOrchestrator:
    """Собирает оркестратор из настроек окружения; бросает ConfigurationError без ключей OpenAI."""
    tools = ToolRegistry()
    tools.register("web_search", (search_service or SearchService()).web_search_tool)
    return ConversationOrchestrator(OpenAIService(), tools)
