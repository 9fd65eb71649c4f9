from __future__ import annotations

import logging
from typing import Any, Optional

from .exceptions import SyncError
from .logging_utils import get_logger, log_json
from .models import SyncResult
from .paginator import IncrementalPaginator
from .sinks import RecordSink
from .store import BookmarkStore
from .utils import as_iso

logger = get_logger(__name__)


def synchronize(
    paginator: IncrementalPaginator[Any],
    store: BookmarkStore,
    sink: Optional[RecordSink] = None,
) -> SyncResult[Any]:
    """Read the bookmark, sync, then store the new bookmark if anything arrived.

    A failed run raises before the store is touched.
    """
    bookmark = store.get_last_update_date()
    resource = paginator.resource.path

    try:
        result = paginator.sync_records(bookmark)
    except SyncError as e:
        log_json(logger, logging.ERROR, "run_failed", resource=resource, kind=e.kind, error=str(e), bookmark=as_iso(bookmark))
        raise

    if result.bookmark_advanced:
        store.store_last_update_date(result.new_bookmark)
        log_json(logger, logging.INFO, "bookmark_stored", resource=resource, previous=as_iso(bookmark), new_bookmark=as_iso(result.new_bookmark))
    else:
        log_json(
            logger,
            logging.INFO,
            "no_matching_records",
            resource=resource,
            bookmark=as_iso(bookmark),
            hint="Nothing updated since the bookmark; try an earlier --since.",
        )

    if sink is not None:
        sink.consume(result.records)

    return result
