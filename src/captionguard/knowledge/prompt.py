# src/captionguard/knowledge/prompt.py
"""Condense knowledge items into the block embedded in the review prompt."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from captionguard.models.knowledge import KnowledgeItem


def _section_re(title: str) -> re.Pattern[str]:
    return re.compile(rf"##\s*{title}\s*\n([^\n]+(?:\n(?!##)[^\n]+)*)")


_RULE_RE = _section_re("ルール（備考）")
_REVIEW_CONTEXT_RE = _section_re("コンテキスト：感想・口コミ")
_PRODUCT_CONTEXT_RE = _section_re("コンテキスト：商品説明")


@dataclass(frozen=True)
class KnowledgeDigest:
    name: str
    rule: str
    review_context: str
    product_context: str
    search_patterns: str


def _section_lines(pattern: re.Pattern[str], content: str) -> list[str]:
    match = pattern.search(content)
    if not match:
        return []
    return [line.strip() for line in match.group(1).split("\n") if line.strip()]


def extract_rule(content: str) -> str:
    lines = _section_lines(_RULE_RE, content)
    return " ".join(re.sub(r"^-\s*", "", line) for line in lines if line.startswith("-"))


def extract_context(pattern: re.Pattern[str], content: str) -> str:
    """OK/NG example lines of a context section, with Markdown bold removed."""
    examples = [
        re.sub(r"^-\s*\*\*", "", line).replace("**:", ":", 1)
        for line in _section_lines(pattern, content)
        if line.startswith(("- **OK", "- **NG"))
    ]
    return "\n  ".join(examples)


def digest(item: KnowledgeItem) -> KnowledgeDigest:
    return KnowledgeDigest(
        name=item.name,
        rule=extract_rule(item.content),
        review_context=extract_context(_REVIEW_CONTEXT_RE, item.content),
        product_context=extract_context(_PRODUCT_CONTEXT_RE, item.content),
        search_patterns=(
            f"検索パターン: {', '.join(item.search_patterns)}"
            if item.search_patterns
            else ""
        ),
    )


def summarize_knowledge(items: Iterable[KnowledgeItem]) -> str:
    """Render every item as a 【表現: ...】 block, separated by blank lines."""
    blocks: list[str] = []
    for d in map(digest, items):
        lines = [f"【表現: {d.name}】"]
        if d.rule:
            lines.append(f"ルール: {d.rule}")
        if d.search_patterns:
            lines.append(d.search_patterns)
        if d.review_context:
            lines.append(f"感想・口コミコンテキスト:\n  {d.review_context}")
        if d.product_context:
            lines.append(f"商品説明コンテキスト:\n  {d.product_context}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


__all__ = ["KnowledgeDigest", "digest", "extract_rule", "extract_context", "summarize_knowledge"]
