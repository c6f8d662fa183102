"""CSV and summary storage for batch resolution."""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from .resolver import Resolution

OUTPUT_COLUMNS = [
    "input_url",
    "resolved_url",
    "platform",
    "cleaned_url",
    "hops",
    "redirect_sources",
    "last_checked_utc_iso",
    "error_message",
]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ResultRow:
    """One line of the batch output. Either resolved or carrying an error."""

    input_url: str
    resolved_url: Optional[str] = None
    platform: Optional[str] = None
    cleaned_url: Optional[str] = None
    hops: Optional[int] = None
    redirect_sources: List[str] = field(default_factory=list)
    last_checked_utc_iso: str = field(default_factory=_utc_now)
    error_message: Optional[str] = None

    @classmethod
    def from_resolution(cls, resolution: Resolution) -> "ResultRow":
        return cls(
            input_url=resolution.input_url,
            resolved_url=resolution.resolved_url,
            platform=resolution.platform.value,
            cleaned_url=resolution.cleaned_url,
            hops=resolution.hops,
            redirect_sources=[candidate.source.value for candidate in resolution.chain],
        )

    @classmethod
    def failed(cls, input_url: str, message: str) -> "ResultRow":
        return cls(input_url=input_url, error_message=message)

    @property
    def ok(self) -> bool:
        return self.error_message is None

    def to_dict(self) -> Dict[str, object]:
        values = {
            "input_url": self.input_url,
            "resolved_url": self.resolved_url,
            "platform": self.platform,
            "cleaned_url": self.cleaned_url,
            "hops": self.hops,
            "redirect_sources": "|".join(self.redirect_sources),
            "last_checked_utc_iso": self.last_checked_utc_iso,
            "error_message": self.error_message,
        }
        return {column: "" if values[column] is None else values[column] for column in OUTPUT_COLUMNS}


def read_input_urls(path: Path, url_column: str = "url") -> List[str]:
    """Return the stripped ``url_column`` value of every row, blanks included."""

    with path.open("r", newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        if reader.fieldnames is not None and url_column not in reader.fieldnames:
            raise KeyError(f"Column {url_column!r} not found in {path}")
        return [(row.get(url_column) or "").strip() for row in reader]


def write_output_csv(path: Path, rows: Iterable[ResultRow]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=OUTPUT_COLUMNS)
        writer.writeheader()
        writer.writerows(row.to_dict() for row in rows)


def write_summary_json(path: Path, summary: Mapping[str, int]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(dict(summary), indent=2, sort_keys=True))


__all__ = [
    "OUTPUT_COLUMNS",
    "ResultRow",
    "read_input_urls",
    "write_output_csv",
    "write_summary_json",
]
