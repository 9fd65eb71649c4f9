from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Generic, Mapping, Tuple, TypeVar

from .models import Organization

T = TypeVar("T")


@dataclass(frozen=True)
class Resource(Generic[T]):
    """What the paginator needs to know about one collection endpoint."""

    path: str
    select: Tuple[str, ...]
    timestamp_field: str
    decode: Callable[[Mapping[str, Any]], T]
    timestamp_of: Callable[[T], datetime]


ORGANIZATIONS: Resource[Organization] = Resource(
    path="Organizations",
    select=(
        "orgId",
        "orgName",
        "orgDescription",
        "mailingAddress",
        "phone",
        "orgType",
        "status",
        "hasLocations",
        "updatedAt",
    ),
    timestamp_field="updatedAt",
    decode=Organization.from_wire,
    timestamp_of=lambda org: org.updated_at,
)
