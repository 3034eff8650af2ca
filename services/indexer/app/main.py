"""Indexer Service entrypoint: reindex item types from JSON files."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from services.indexer.app.config import Settings, get_settings
from services.indexer.app.core.indexer import DoofinderIndexer
from services.indexer.app.core.schemas import ApiStatus, RunReport
from services.indexer.app.services.run import IndexingRunner
from shared.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


class ItemFileError(Exception):
    """Raised when an item file cannot be read or holds invalid items."""


def parse_sources(sources: list[str]) -> dict[str, Path]:
    """Parse "item_type=path.json" arguments."""
    parsed: dict[str, Path] = {}
    for source in sources:
        item_type, sep, path = source.partition("=")
        if not sep or not item_type or not path:
            raise ValueError(f"Expected ITEM_TYPE=PATH, got {source!r}")
        parsed[item_type] = Path(path)
    return parsed


def load_items(path: Path) -> list[dict[str, Any]]:
    """Load a JSON array of items, or JSON Lines when the file ends in .jsonl.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the content is not valid JSON or an item is not an object
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        data = [json.loads(line) for line in text.splitlines() if line.strip()]
    else:
        data = json.loads(text)
        if not isinstance(data, list):
            raise ValueError(f"{path} must contain a JSON array")

    for position, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(
                f"{path}: item {position} is a {type(item).__name__}, expected an object"
            )
    return data


async def reindex(
    sources: dict[str, Path],
    language: str | None = None,
    settings: Settings | None = None,
) -> RunReport | ApiStatus:
    """Run a full reindex for one language.

    Returns:
        The run report, or the search engine status when it is unusable

    Raises:
        ItemFileError: If an item file cannot be loaded
    """
    settings = settings or get_settings()
    indexer = DoofinderIndexer.from_settings(settings, language=language)
    try:
        status = await indexer.connect()
        if status != ApiStatus.SUCCESS:
            logger.error("reindex_skipped", language=language, status=status.value)
            return status

        try:
            items_by_type = {
                item_type: load_items(path) for item_type, path in sources.items()
            }
        except (OSError, ValueError) as e:
            raise ItemFileError(str(e)) from e

        runner = IndexingRunner(indexer, batch_size=settings.batch_size)
        return await runner.run(items_by_type)
    finally:
        await indexer.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Reindex a Doofinder search engine")
    parser.add_argument(
        "sources",
        nargs="+",
        metavar="ITEM_TYPE=PATH",
        help="Item type and the JSON/JSONL file holding its items",
    )
    parser.add_argument("--language", default=None, help="Language context")
    args = parser.parse_args(argv)
    try:
        sources = parse_sources(args.sources)
    except ValueError as e:
        parser.error(str(e))

    settings = get_settings()
    configure_logging(
        service_name=settings.service_name,
        log_level=settings.log_level,
        json_format=settings.log_json,
    )

    try:
        result = asyncio.run(reindex(sources, args.language, settings))
    except ItemFileError as e:
        logger.error("reindex_input_invalid", error=str(e))
        print(json.dumps({"status": "invalid_input", "error": str(e)}))
        return 2

    if isinstance(result, RunReport):
        print(result.model_dump_json(indent=2))
        return 0 if result.succeeded else 1
    print(json.dumps({"status": result.value}))
    return 1


if __name__ == "__main__":
    sys.exit(main())
