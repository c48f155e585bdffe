"""
Чат-прокси к OpenAI Assistants с инструментом веб-поиска.
"""
__version__ = "1.0.0"
