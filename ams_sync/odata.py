from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Sequence
from urllib.parse import quote, urlencode

from .utils import format_odata_timestamp

# Kept literal in the query string so URLs read like the API docs.
_SAFE = "$,:"


def build_filter(timestamp_field: str, since: Optional[datetime]) -> Optional[str]:
    """`<field> gt <ts>` or None when there is no bookmark (full sync)."""
    if since is None:
        return None
    return f"{timestamp_field} gt {format_odata_timestamp(since)}"


def build_query(
    select: Sequence[str],
    top: int,
    skip: int,
    filter_clause: Optional[str] = None,
    count: bool = True,
) -> Dict[str, str]:
    params: Dict[str, str] = {"$select": ",".join(select)}
    if count:
        params["$count"] = "true"
    params["$top"] = str(top)
    params["$skip"] = str(skip)
    if filter_clause:
        params["$filter"] = filter_clause
    return params


def build_page_url(base_url: str, path: str, params: Dict[str, str]) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}?{urlencode(params, quote_via=quote, safe=_SAFE)}"
