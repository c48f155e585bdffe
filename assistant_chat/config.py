"""
Конфигурационный файл для чат-прокси.
"""
import os

from dotenv import load_dotenv

load_dotenv()

def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")

def _csv(name: str, default: str = "") -> list:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]

# OpenAI API
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY")
OPENAI_ASSISTANT_ID = os.environ.get("OPENAI_ASSISTANT_ID")
OPENAI_ORGANIZATION = os.environ.get("OPENAI_ORGANIZATION")

# Опрос запуска ассистента
POLL_INTERVAL = float(os.environ.get("POLL_INTERVAL", "2.0"))  # секунды между опросами
MAX_POLL_TICKS = int(os.environ.get("MAX_POLL_TICKS", "100"))  # после исчерпания, затем ответ-заглушка о таймауте
REPAIR_TABLES = _flag("REPAIR_TABLES", "1")

# Tavily
TAVILY_API_KEY = os.environ.get("TAVILY_API_KEY")
TAVILY_URL = os.environ.get("TAVILY_URL", "https://api.tavily.com/search")
SEARCH_TIMEOUT = float(os.environ.get("SEARCH_TIMEOUT", "10"))
SEARCH_DEPTH = os.environ.get("SEARCH_DEPTH", "advanced")
SEARCH_DEFAULT_DOMAINS = _csv("SEARCH_DEFAULT_DOMAINS", "ey.com")
# Пустой include_domains: True: поиск без ограничений, False: подставляем SEARCH_DEFAULT_DOMAINS
SEARCH_EMPTY_MEANS_UNRESTRICTED = _flag("SEARCH_EMPTY_MEANS_UNRESTRICTED", "0")

# Белый список email (через запятую); пустой список закрывает доступ всем
ALLOWED_EMAILS = frozenset(email.lower() for email in _csv("ALLOWED_EMAILS"))

# Настройки сервера
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
