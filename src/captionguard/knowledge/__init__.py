# src/captionguard/knowledge/__init__.py
"""Knowledge base of regulated expressions."""

from .loader import (
    find_knowledge_by_expression,
    load_knowledge,
    reset_knowledge_cache,
    search_ng_patterns,
)
from .parser import generate_search_patterns, parse_knowledge_sql
from .prompt import summarize_knowledge

__all__ = [
    "find_knowledge_by_expression",
    "load_knowledge",
    "reset_knowledge_cache",
    "search_ng_patterns",
    "generate_search_patterns",
    "parse_knowledge_sql",
    "summarize_knowledge",
]
