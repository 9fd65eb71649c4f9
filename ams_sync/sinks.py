from __future__ import annotations

import logging
from typing import Any, List, Protocol, Sequence

from .logging_utils import get_logger, log_json


class RecordSink(Protocol):
    def consume(self, records: Sequence[Any]) -> None: ...


class ListRecordSink:
    def __init__(self) -> None:
        self.records: List[Any] = []

    def consume(self, records: Sequence[Any]) -> None:
        self.records.extend(records)


class LoggingRecordSink:
    """Logs the record count and the first `preview` records as JSON."""

    def __init__(self, preview: int = 5, logger: logging.Logger | None = None) -> None:
        self.preview = max(preview, 0)
        self.logger = logger or get_logger(__name__)

    def consume(self, records: Sequence[Any]) -> None:
        head = [_as_dict(r) for r in records[: self.preview]]
        log_json(self.logger, logging.INFO, "records_received", count=len(records), preview=head)


def _as_dict(record: Any) -> Any:
    to_dict = getattr(record, "to_dict", None)
    return to_dict() if callable(to_dict) else record
