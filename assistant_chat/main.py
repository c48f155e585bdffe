"""
Основной файл чат-прокси к OpenAI Assistants.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR, HTTP_502_BAD_GATEWAY

from assistant_chat import __version__, config
from assistant_chat.errors import ConfigurationError, InvalidRequest, UpstreamError
from assistant_chat.routers import chat, search

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Assistant Chat",
    description="Прокси чата к OpenAI Assistants с инструментом веб-поиска",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(InvalidRequest)
async def invalid_request_handler(request: Request, exc: InvalidRequest):
    return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content={"error": str(exc)})

@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Ошибка конфигурации: {exc}")
    return JSONResponse(status_code=HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})

@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error(f"Ошибка внешнего сервиса ({exc.status_code}): {exc.message}")
    content = {"error": exc.message}
    if exc.thread_id:
        content["threadId"] = exc.thread_id
    return JSONResponse(status_code=HTTP_502_BAD_GATEWAY, content=content)

app.include_router(chat.router)
app.include_router(search.router)

@app.on_event("startup")
async def startup_event():
    logger.info("Запуск чат-прокси")
    if not config.OPENAI_API_KEY or not config.OPENAI_ASSISTANT_ID:
        logger.warning("OPENAI_API_KEY или OPENAI_ASSISTANT_ID не заданы, /api/chat будет отвечать ошибкой")
    if not config.TAVILY_API_KEY:
        logger.warning("TAVILY_API_KEY не задан, инструмент web_search будет возвращать ошибку")
    if not config.ALLOWED_EMAILS:
        logger.warning("Белый список ALLOWED_EMAILS пуст, доступ закрыт для всех")

@app.get("/")
async def root():
    return {"message": "Assistant Chat API", "version": app.version}

def run():
    import uvicorn
    uvicorn.run(
        "assistant_chat.main:app",
        host=config.HOST,
        port=config.PORT,
    )

if __name__ == "__main__":
    run()
