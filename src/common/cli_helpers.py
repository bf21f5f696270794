"""Common CLI helper utilities."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def load_jsonl(path: str | Path) -> list[dict[str, Any]]:
    """Read one JSON object per line, skipping blank lines.

    Raises:
        ValueError: If a line is not valid JSON, naming the line number.
    """
    records = []
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{line_number}: invalid JSON") from exc
    return records


def save_jsonl_local(
    records: list[dict[str, Any]],
    prefix: str,
    timestamp: datetime,
    output_dir: str = "output",
) -> Path:
    """Save records to a local JSONL file.

    Args:
        records: List of dictionaries to save.
        prefix: Filename prefix (e.g., "article_locations").
        timestamp: Timestamp to include in filename.
        output_dir: Directory to save to (default: "output").

    Returns:
        Path to the created file.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filename = f"{prefix}_{timestamp.strftime('%Y_%m_%d_%H_%M')}.jsonl"
    filepath = output_path / filename
    with filepath.open("w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record, default=str, ensure_ascii=False) + "\n")
    logger.debug("Wrote %d records to %s", len(records), filepath)
    return filepath
