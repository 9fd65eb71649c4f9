from __future__ import annotations


class SyncError(RuntimeError):
    """Base for every failure that aborts a sync run."""

    kind = "sync_error"


class TransportError(SyncError):
    """Connection refused, DNS failure, timeout. Wraps the requests exception."""

    kind = "transport"


class RemoteRejectedError(SyncError):
    """The server answered with a non-success status."""

    kind = "remote_rejected"

    def __init__(self, status_code: int, url: str, body_excerpt: str = "") -> None:
        super().__init__(f"HTTP {status_code} from {url}")
        self.status_code = status_code
        self.url = url
        self.body_excerpt = body_excerpt


class UnparseableResponseError(SyncError):
    """Malformed JSON or a payload that does not match the envelope/record contract."""

    kind = "unparseable"
