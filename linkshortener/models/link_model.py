"""Link record model and its serialized forms.

The same flat mapping is used for the Redis hash in the backing store
(`to_dict()` / `from_dict()`) and, JSON-encoded, for the cache value
(`to_json()` / `from_json()`). Timestamps are ISO-8601 strings with
microsecond precision and status is stored as its string value, so a
round-trip preserves every field exactly.

Example:
    >>> from datetime import datetime, UTC
    >>> link = LinkModel(
    ...     id='3f1c...',
    ...     owner_id='user-1',
    ...     long_link='https://example.com',
    ...     short_link='abc1234',
    ...     created_time=datetime(2025, 10, 15, tzinfo=UTC),
    ...     expiration_time=datetime(2025, 11, 15, tzinfo=UTC),
    ... )
    >>> LinkModel.from_json(link.to_json()) == link
    True
"""

import json
from dataclasses import dataclass, asdict
from datetime import datetime, UTC
from enum import StrEnum
from typing import Any


class LinkStatus(StrEnum):
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'


def _parse_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


@dataclass(frozen=True)
class LinkModel:
    """Represent a short code to long URL mapping.

    Attributes:
        id (str):
            Unique immutable identifier assigned at creation.
        owner_id (str):
            Identifier of the owning user.
        long_link (str):
            The original URL the short code resolves to.
        short_link (str):
            The unique short code.
        created_time (datetime):
            Creation moment (UTC).
        expiration_time (datetime):
            Rolling deadline, extended on every successful resolution.
        usage_statistics (int):
            Number of successful resolutions.
        status (LinkStatus):
            Persisted ACTIVE/INACTIVE snapshot.
    """
    id: str
    owner_id: str
    long_link: str
    short_link: str
    created_time: datetime
    expiration_time: datetime
    usage_statistics: int = 0
    status: LinkStatus = LinkStatus.ACTIVE

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True once the expiration deadline is reached (boundary included)."""
        now = now or datetime.now(UTC)
        return self.expiration_time <= now

    @property
    def is_active(self) -> bool:
        return self.status == LinkStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data['created_time'] = self.created_time.isoformat()
        data['expiration_time'] = self.expiration_time.isoformat()
        data['status'] = str(self.status)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'LinkModel':
        """Build a LinkModel from its flat mapping.

        Raises:
            KeyError: if a field is missing.
            ValueError: if a timestamp, counter or status is malformed.
        """
        return cls(
            id=str(data['id']),
            owner_id=str(data['owner_id']),
            long_link=data['long_link'],
            short_link=data['short_link'],
            created_time=_parse_datetime(data['created_time']),
            expiration_time=_parse_datetime(data['expiration_time']),
            usage_statistics=int(data['usage_statistics']),
            status=LinkStatus(data['status']),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, blob: str | bytes) -> 'LinkModel':
        return cls.from_dict(json.loads(blob))


@dataclass(frozen=True)
class LinkStatisticsModel:
    """Usage summary of a single link."""

    id: str
    short_link: str
    long_link: str
    usage_statistics: int

    @classmethod
    def from_link(cls, link: LinkModel) -> 'LinkStatisticsModel':
        return cls(
            id=link.id,
            short_link=link.short_link,
            long_link=link.long_link,
            usage_statistics=link.usage_statistics,
        )
