"""Tests for the UTC timestamp column type."""

from datetime import UTC, datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mlms.infrastructure.persistence.models import UTCDateTime, UserModel


class TestUTCDateTime:
    def test_bind_stores_naive_utc(self):
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2024, 5, 1, 12, 0, tzinfo=plus_two)

        stored = UTCDateTime().process_bind_param(value, dialect=None)

        assert stored == datetime(2024, 5, 1, 10, 0)
        assert stored.tzinfo is None

    def test_result_is_utc_aware(self):
        loaded = UTCDateTime().process_result_value(datetime(2024, 5, 1, 10, 0), dialect=None)

        assert loaded == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)

    def test_none_passes_through(self):
        assert UTCDateTime().process_bind_param(None, dialect=None) is None
        assert UTCDateTime().process_result_value(None, dialect=None) is None


async def test_timestamps_read_back_from_sqlite_are_aware(session: AsyncSession):
    session.add(UserModel(name="Dana", email="dana@example.com", password_hash="x"))
    await session.commit()
    session.expunge_all()

    user = (await session.execute(select(UserModel))).scalar_one()

    assert user.created_at.tzinfo is not None
    assert user.created_at.utcoffset() == timedelta(0)
