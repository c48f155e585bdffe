"""
Реестр инструментов ассистента.

Каждый инструмент: асинхронная функция (args: dict) -> dict. Любой вызов из
пачки requires_action получает ответ: ошибки обработчика и неизвестные имена
превращаются в {"error": ...}, иначе запуск зависнет на стороне OpenAI.
"""
import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]

class ToolRegistry:
    """Отображение имени инструмента в обработчик."""
    def __init__(self):
        self.handlers: Dict[str, ToolHandler] = {}
    def register(self, name: str, handler: ToolHandler) -> None:
        self.handlers[name] = handler
    async def dispatch(self, call: Any) -> Dict[str, str]:
        name = call.function.name
        handler = self.handlers.get(name)
        if handler is None:
            logger.warning(f"Ассистент запросил неизвестный инструмент: {name}")
            output = {"error": f"Unknown tool: {name}"}
        else:
            try:
                args = json.loads(call.function.arguments or "{}")
                if not isinstance(args, dict):
                    raise ValueError("arguments must be a JSON object")
            except ValueError as e:
                logger.warning(f"Некорректные аргументы для {name} ({call.id}): {e}")
                output = {"error": f"Invalid arguments for {name}: {e}"}
            else:
                logger.info(f"Вызов инструмента {name} ({call.id})")
                try:
                    output = await handler(args)
                except Exception as e:
                    logger.warning(f"Ошибка инструмента {name} ({call.id}): {e}")
                    output = {"error": f"Tool {name} failed: {e}"}
        return {"tool_call_id": call.id, "output": json.dumps(output, ensure_ascii=False)}
    async def dispatch_batch(self, calls: Iterable[Any]) -> List[Dict[str, str]]:
        """Параллельно выполняет пачку; на каждый id ровно один результат."""
        unique = {}
        for call in calls:
            unique.setdefault(call.id, call)
        return list(await asyncio.gather(*(self.dispatch(call) for call in unique.values())))
