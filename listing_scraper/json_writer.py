"""JSON writer for the canonical record array consumed by the site builder."""

import json
from pathlib import Path

from listing_scraper.models import CanonicalRecord


def record_to_dict(record: CanonicalRecord) -> dict:
    """Convert a record to a plain dict in output field order."""
    return record.model_dump()


def records_to_json_string(records: list[CanonicalRecord]) -> str:
    """Serialize records as a pretty-printed JSON array."""
    return json.dumps([record_to_dict(r) for r in records], indent=2, ensure_ascii=False)


def write_records_json(records: list[CanonicalRecord], path: Path) -> None:
    """Write records to a JSON file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(records_to_json_string(records), encoding="utf-8")
