from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

from .exceptions import UnparseableResponseError
from .utils import as_iso, parse_utc

T = TypeVar("T")


def _fold(key: str) -> str:
    # orgId, OrgId, org_id -> orgid
    return key.replace("_", "").lower()


def _folded(obj: Mapping[str, Any]) -> Dict[str, Any]:
    return {_fold(str(k)): v for k, v in obj.items()}


def _pick(cls: type, obj: Mapping[str, Any]) -> Dict[str, Any]:
    """Match wire keys to dataclass fields, ignoring case and underscores."""
    folded = _folded(obj)
    return {f.name: folded[_fold(f.name)] for f in fields(cls) if _fold(f.name) in folded}


@dataclass
class Address:
    address_id: Optional[int] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state_code: Optional[str] = None
    zip: Optional[str] = None
    country_code: Optional[str] = None

    @classmethod
    def from_wire(cls, obj: Mapping[str, Any]) -> "Address":
        if not isinstance(obj, Mapping):
            raise TypeError(f"mailingAddress must be an object, got {type(obj).__name__}")
        return cls(**_pick(cls, obj))


@dataclass
class Organization:
    updated_at: datetime
    org_id: Optional[int] = None
    org_name: Optional[str] = None
    org_description: Optional[str] = None
    mailing_address: Optional[Address] = None
    phone: Optional[str] = None
    org_type: Optional[str] = None
    status: Optional[str] = None
    has_locations: bool = False

    @classmethod
    def from_wire(cls, obj: Mapping[str, Any]) -> "Organization":
        kwargs = _pick(cls, obj)

        raw_updated = kwargs.get("updated_at")
        if not isinstance(raw_updated, str) or not raw_updated.strip():
            raise ValueError("record has no UpdatedAt timestamp")
        kwargs["updated_at"] = parse_utc(raw_updated)

        addr = kwargs.get("mailing_address")
        kwargs["mailing_address"] = Address.from_wire(addr) if addr is not None else None
        kwargs["has_locations"] = bool(kwargs.get("has_locations") or False)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["updated_at"] = as_iso(self.updated_at)
        return d


@dataclass
class Envelope(Generic[T]):
    """One decoded page: the records plus the optional `@odata.count` hint."""

    value: List[T]
    count: Optional[int] = None

    @classmethod
    def decode(cls, payload: Any, record_decoder: Callable[[Mapping[str, Any]], T]) -> "Envelope[T]":
        if not isinstance(payload, Mapping):
            raise UnparseableResponseError(f"page payload must be a JSON object, got {type(payload).__name__}")

        folded = _folded(payload)
        rows = folded.get("value")
        if not isinstance(rows, list):
            raise UnparseableResponseError("page payload has no 'value' array")

        count = folded.get("@odata.count")
        if count is not None and (isinstance(count, bool) or not isinstance(count, int)):
            raise UnparseableResponseError(f"'@odata.count' must be an integer, got {count!r}")

        records: List[T] = []
        for i, row in enumerate(rows):
            if not isinstance(row, Mapping):
                raise UnparseableResponseError(f"value[{i}] is not an object")
            try:
                records.append(record_decoder(row))
            except (KeyError, TypeError, ValueError) as e:
                raise UnparseableResponseError(f"value[{i}] could not be decoded: {e}") from e

        return cls(value=records, count=count)


@dataclass
class RunStats:
    pages: int = 0
    fetched: int = 0
    total_count: Optional[int] = None


@dataclass
class SyncResult(Generic[T]):
    records: List[T]
    # None means "leave the stored bookmark as it is"
    new_bookmark: Optional[datetime] = None
    stats: RunStats = field(default_factory=RunStats)

    @property
    def bookmark_advanced(self) -> bool:
        return self.new_bookmark is not None
