from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Generic, List, Optional, TypeVar

from .http_client import HttpClient, HttpConfig
from .logging_utils import get_logger, log_json
from .models import Envelope, RunStats, SyncResult
from .odata import build_filter, build_page_url, build_query
from .resources import ORGANIZATIONS, Resource
from .utils import as_iso, ensure_utc

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10

logger = get_logger(__name__)


class IncrementalPaginator(Generic[T]):
    """Fetch every record updated after a bookmark, one $top/$skip page at a time.

    Pages are requested strictly in order: `skip` always equals the number of
    records consumed so far. The run ends on the first page shorter than `top`,
    which may be an empty page when the last full page was exactly `top` long.
    """

    def __init__(
        self,
        base_url: str,
        http_config: HttpConfig,
        resource: Resource[T] = ORGANIZATIONS,  # type: ignore[assignment]
        top: int = DEFAULT_PAGE_SIZE,
        client_factory: Callable[[HttpConfig], HttpClient] = HttpClient,
    ):
        if isinstance(top, bool) or not isinstance(top, int) or top <= 0:
            raise ValueError(f"top must be a positive integer, got {top!r}")
        self.base_url = base_url
        self.http_config = http_config
        self.resource = resource
        self.top = top
        self.client_factory = client_factory

    def page_url(self, page: int, filter_clause: Optional[str]) -> str:
        params = build_query(self.resource.select, top=self.top, skip=page * self.top, filter_clause=filter_clause)
        return build_page_url(self.base_url, self.resource.path, params)

    def sync_records(self, bookmark: Optional[datetime]) -> SyncResult[T]:
        if bookmark is not None:
            bookmark = ensure_utc(bookmark)
        filter_clause = build_filter(self.resource.timestamp_field, bookmark)

        stats = RunStats()
        records: List[T] = []
        log_json(logger, logging.INFO, "sync_started", resource=self.resource.path, bookmark=as_iso(bookmark), top=self.top)

        with self.client_factory(self.http_config) as client:
            page = 0
            while True:
                url = self.page_url(page, filter_clause)
                envelope = Envelope.decode(client.get_json(url), self.resource.decode)
                stats.pages += 1

                if envelope.value and not records:
                    stats.total_count = envelope.count
                    log_json(logger, logging.INFO, "total_count", resource=self.resource.path, count=envelope.count)

                records.extend(envelope.value)
                stats.fetched = len(records)
                log_json(logger, logging.DEBUG, "page_fetched", resource=self.resource.path, page=page, skip=page * self.top, received=len(envelope.value))

                if len(envelope.value) < self.top:
                    break
                page += 1

        new_bookmark = max((self.resource.timestamp_of(r) for r in records), default=None)
        log_json(logger, logging.INFO, "sync_complete", resource=self.resource.path, stats=stats.__dict__, new_bookmark=as_iso(new_bookmark))
        return SyncResult(records=records, new_bookmark=new_bookmark, stats=stats)
