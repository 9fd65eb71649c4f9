from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

import requests

from .exceptions import RemoteRejectedError, TransportError, UnparseableResponseError

AuthHeaderBuilder = Callable[[], str]

BODY_EXCERPT_CHARS = 500


def _encode_credentials(username: str, password: str) -> str:
    return base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")


def basic_auth_header(username: str, password: str) -> AuthHeaderBuilder:
    """Standard Basic scheme (RFC 7617)."""
    return lambda: f"Basic {_encode_credentials(username, password)}"


def bearer_credentials_header(username: str, password: str) -> AuthHeaderBuilder:
    """Base64 `user:password` under the Bearer label, as the AMS sample client sends it."""
    return lambda: f"Bearer {_encode_credentials(username, password)}"


def auth_header_for(scheme: str, username: str, password: str) -> AuthHeaderBuilder:
    if scheme == "basic":
        return basic_auth_header(username, password)
    if scheme == "bearer":
        return bearer_credentials_header(username, password)
    raise ValueError(f"Unknown auth scheme: {scheme}")


@dataclass
class HttpConfig:
    timeout_sec: float = 900.0
    accepted_encodings: Tuple[str, ...] = ("gzip", "deflate")
    auth_header_builder: Optional[AuthHeaderBuilder] = None
    user_agent: str = "ams-sync/0.1"


class HttpClient:
    """One requests.Session per sync run. Use as a context manager.

    No retries: every failure is raised as a SyncError subclass.
    """

    def __init__(self, cfg: HttpConfig, session: Optional[requests.Session] = None):
        self.cfg = cfg
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            "User-Agent": cfg.user_agent,
            "Accept": "application/json",
            "Accept-Encoding": ", ".join(cfg.accepted_encodings),
        })
        if cfg.auth_header_builder is not None:
            self.session.headers["Authorization"] = cfg.auth_header_builder()

    def get_json(self, url: str) -> Any:
        try:
            resp = self.session.get(url, timeout=self.cfg.timeout_sec)
        except requests.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}") from e

        try:
            if not 200 <= resp.status_code < 300:
                raise RemoteRejectedError(resp.status_code, url, resp.text[:BODY_EXCERPT_CHARS])
            try:
                return resp.json()
            except ValueError as e:
                raise UnparseableResponseError(f"GET {url} returned invalid JSON: {e}") from e
        finally:
            resp.close()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
