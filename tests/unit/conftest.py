from datetime import datetime, UTC

import pytest

from linkshortener.models import LinkModel, LinkStatus


@pytest.fixture
def make_link():
    """Build LinkModel instances with sensible defaults."""

    def _make_link(**overrides) -> LinkModel:
        fields = dict(
            id='5f0c2a3e-9a61-4d2b-8d2c-0b1e2f3a4b5c',
            owner_id='user-1',
            long_link='https://example.com/article/123',
            short_link='abc1234',
            created_time=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
            expiration_time=datetime(2025, 11, 15, 12, 0, tzinfo=UTC),
            usage_statistics=0,
            status=LinkStatus.ACTIVE,
        )
        fields.update(overrides)
        return LinkModel(**fields)

    return _make_link


@pytest.fixture
def link(make_link) -> LinkModel:
    return make_link()
