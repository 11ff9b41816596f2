# scripts/parse_knowledge.py
"""Convert a knowledge table SQL dump into the JSON file the reviewer loads."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from captionguard.core.logging import get_logger, init_logging
from captionguard.knowledge import parse_knowledge_sql

logger = get_logger(__name__)

DEFAULT_OUTPUT = Path(__file__).resolve().parents[1] / "src" / "captionguard" / "data" / "knowledge.json"


def convert(source: Path, output: Path) -> int:
    """Parse ``source`` and write ``output``; returns the number of items."""
    items = parse_knowledge_sql(source.read_text(encoding="utf-8"))
    payload = [item.model_dump(by_alias=True, mode="json") for item in items]
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    return len(items)


def main(argv: list[str] | None = None) -> None:  # pragma: no cover - script entry
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("source", type=Path, help="SQL dump with an INSERT ... VALUES statement")
    parser.add_argument("-o", "--output", type=Path, default=DEFAULT_OUTPUT)
    args = parser.parse_args(argv)

    count = convert(args.source, args.output)
    logger.info("Wrote %d knowledge items to %s", count, args.output)


if __name__ == "__main__":  # pragma: no cover - CLI execution
    init_logging()
    main()
