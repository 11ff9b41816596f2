# src/captionguard/knowledge/parser.py
"""Convert a SQL dump of the knowledge table into knowledge items.

The dump is a single ``INSERT ... VALUES (...), (...);`` statement whose rows
hold quoted ``id``, ``name`` and Markdown ``content`` columns. Only quoted
values are collected; ``NULL`` and numeric columns are ignored.
"""

from __future__ import annotations

import re

from captionguard.models.knowledge import KnowledgeItem

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0"}

_NG_SECTION_RE = re.compile(
    r"##\s*コンテキスト：.*?\n.*?\*\*NG表現の例:\*\*\s*([^\n]+(?:\n(?!##)[^\n]+)*)"
)
_EXPRESSION_HEADING_RE = re.compile(r"^#\s*表現：(.+)$", re.MULTILINE)
_QUOTE_PREFIX_RE = re.compile(r"^[「『\"]+")
_QUOTE_SUFFIX_RE = re.compile(r"[」』\"]+$")


class KnowledgeParseError(ValueError):
    pass


def split_records(sql: str) -> list[str]:
    """Return the raw text between the parentheses of each VALUES row."""
    values_at = sql.find("VALUES")
    if values_at == -1:
        raise KnowledgeParseError("VALUES clause not found")
    body = sql[values_at + len("VALUES"):]

    records: list[str] = []
    depth = 0
    in_string = False
    escape_next = False
    record_start = 0
    for i, char in enumerate(body):
        if escape_next:
            escape_next = False
            continue
        if char == "\\":
            escape_next = True
            continue
        if char == "'":
            in_string = not in_string
            continue
        if in_string:
            continue
        if char == "(":
            if depth == 0:
                record_start = i + 1
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                records.append(body[record_start:i])
    return records


def parse_fields(record: str) -> list[str]:
    """Return the quoted string values of one row, escapes decoded.

    Both backslash escapes and SQL's doubled quote (``''``) are understood.
    """
    fields: list[str] = []
    current: list[str] = []
    in_string = False
    i = 0
    while i < len(record):
        char = record[i]
        if not in_string:
            if char == "'":
                in_string = True
                current = []
            i += 1
            continue
        if char == "\\" and i + 1 < len(record):
            nxt = record[i + 1]
            current.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        if char == "'":
            if i + 1 < len(record) and record[i + 1] == "'":
                current.append("'")
                i += 2
                continue
            fields.append("".join(current))
            in_string = False
        else:
            current.append(char)
        i += 1
    return fields


def extract_ng_patterns(content: str) -> list[str]:
    """Collect the NG example phrases of every context section.

    The expression named in the ``# 表現：`` heading is appended as well.
    """
    patterns: list[str] = []
    for match in _NG_SECTION_RE.finditer(content):
        for line in match.group(1).split("\n"):
            line = line.strip()
            if not line or line.startswith(("*", "-")):
                continue
            line = _QUOTE_SUFFIX_RE.sub("", _QUOTE_PREFIX_RE.sub("", line)).strip()
            if line:
                patterns.append(line)

    heading = _EXPRESSION_HEADING_RE.search(content)
    if heading:
        expression = heading.group(1).strip()
        if expression and expression not in patterns:
            patterns.append(expression)
    return patterns


def generate_search_patterns(name: str) -> list[str]:
    """Return ``name`` plus simple conjugated forms, without duplicates.

    明るい -> 明るく, 明るさ, 明るかった, 明るくない; 変わる -> 変わった,
    変わらない; 消えた -> 消える.
    """
    patterns = [name]
    stem = name[:-1]
    if name.endswith("い"):
        patterns += [stem + "く", stem + "さ", stem + "かった", stem + "くない"]
    if name.endswith("る"):
        patterns += [stem + "った", stem + "らない"]
    if name.endswith("た"):
        patterns.append(stem + "る")
    return list(dict.fromkeys(patterns))


def parse_knowledge_sql(sql: str) -> list[KnowledgeItem]:
    items: list[KnowledgeItem] = []
    for record in split_records(sql):
        fields = parse_fields(record)
        if len(fields) < 3:
            continue
        item_id, name, content = fields[:3]
        items.append(
            KnowledgeItem(
                id=item_id,
                name=name,
                content=content,
                ngPatterns=tuple(extract_ng_patterns(content)),
                searchPatterns=tuple(generate_search_patterns(name)),
            )
        )
    return items


__all__ = [
    "KnowledgeParseError",
    "split_records",
    "parse_fields",
    "extract_ng_patterns",
    "generate_search_patterns",
    "parse_knowledge_sql",
]
