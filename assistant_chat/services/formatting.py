"""
Постобработка ответа ассистента: удаление маркеров цитирования
и починка Markdown-таблиц без строки-разделителя.
"""
import re
from typing import List

CITATION_RE = re.compile(r"[ \t]*【\d+:\d+†[^】]*】")
SEPARATOR_RE = re.compile(r"^\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|?$")

def strip_citations(text: str) -> str:
    """Убирает маркеры вида 【12:3†source】, включая вложенные."""
    removed = 1
    while removed:
        text, removed = CITATION_RE.subn("", text)
    return text.strip()

def _is_table_row(line: str) -> bool:
    stripped = line.strip()
    return len(stripped) > 1 and stripped.startswith("|") and stripped.endswith("|")

def _is_separator(line: str) -> bool:
    return bool(SEPARATOR_RE.match(line.strip()))

def _separator_for(header: str) -> str:
    columns = header.strip().strip("|").split("|")
    return "|" + "---|" * len(columns)

def repair_markdown_tables(text: str) -> str:
    """Вставляет |---|---| после первой строки таблицы, если ассистент его пропустил."""
    lines = text.split("\n")
    result: List[str] = []
    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.strip().startswith("```"):
            in_fence = not in_fence
        if in_fence or not _is_table_row(line):
            result.append(line)
            i += 1
            continue
        block = []
        while i < len(lines) and _is_table_row(lines[i]):
            block.append(lines[i])
            i += 1
        result.append(block[0])
        if len(block) > 1 and not _is_separator(block[0]) and not _is_separator(block[1]):
            indent = block[0][:len(block[0]) - len(block[0].lstrip())]
            result.append(indent + _separator_for(block[0]))
        result.extend(block[1:])
    return "\n".join(result)
