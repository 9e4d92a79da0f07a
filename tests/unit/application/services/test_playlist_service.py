"""Unit tests for PlaylistService.

Hey future me - these run against a real SQLite session (see tests/conftest.py). Ordering
and ownership rules are exactly the kind of thing mocks would happily lie about.
"""

from typing import Any

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mlms.application.services import ActivityLogger, PlaylistService
from mlms.application.services.playlist_service import FAVORITES_PLAYLIST_NAME
from mlms.domain.exceptions import (
    AuthorizationError,
    DuplicateEntityException,
    EntityNotFoundException,
    ValidationError,
)
from mlms.infrastructure.persistence.models import PlaylistTrackModel


async def _orders(session: AsyncSession, playlist_id: int) -> list[tuple[int, int]]:
    """(track_id, track_order) pairs straight from the table, in order."""
    result = await session.execute(
        select(PlaylistTrackModel.track_id, PlaylistTrackModel.track_order)
        .where(PlaylistTrackModel.playlist_id == playlist_id)
        .order_by(PlaylistTrackModel.track_order)
    )
    return [tuple(row) for row in result.all()]


class TestPlaylistService:
    """Test suite for PlaylistService."""

    @pytest.fixture
    def service(self, session: AsyncSession) -> PlaylistService:
        return PlaylistService(session)

    async def test_create_playlist_with_tracks_keeps_given_order(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any]
    ):
        a, b, c = seeded["track_ids"]
        playlist = await service.create_playlist(seeded["alice_id"], "  Evening  ", [c, a, b])

        assert playlist.name == "Evening"
        assert await _orders(session, playlist.playlist_id) == [(c, 1), (a, 2), (b, 3)]

    async def test_create_playlist_requires_name(
        self, service: PlaylistService, seeded: dict[str, Any]
    ):
        with pytest.raises(ValidationError):
            await service.create_playlist(seeded["alice_id"], "   ")

    async def test_create_playlist_with_unknown_track_fails(
        self, service: PlaylistService, seeded: dict[str, Any]
    ):
        with pytest.raises(EntityNotFoundException):
            await service.create_playlist(seeded["alice_id"], "Bad", [999])

    async def test_admin_style_create_requires_tracks(
        self, service: PlaylistService, seeded: dict[str, Any]
    ):
        with pytest.raises(ValidationError):
            await service.create_playlist(seeded["admin_id"], "Empty", [], require_tracks=True)

    async def test_create_records_activity(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any]
    ):
        await service.create_playlist(seeded["alice_id"], "Road Trip")

        recent = await ActivityLogger(session).recent(seeded["alice_id"])
        assert recent[0].activity == "Created new playlist: Road Trip"

    async def test_list_playlists_newest_first(
        self, service: PlaylistService, seeded: dict[str, Any]
    ):
        first = await service.create_playlist(seeded["alice_id"], "First")
        second = await service.create_playlist(seeded["alice_id"], "Second")
        await service.create_playlist(seeded["bob_id"], "Not mine")

        ids = [p.playlist_id for p in await service.list_playlists(seeded["alice_id"])]
        assert ids == [second.playlist_id, first.playlist_id]

    async def test_add_track_appends_at_end(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any]
    ):
        a, b, c = seeded["track_ids"]
        playlist = await service.create_playlist(seeded["alice_id"], "Mix", [a])

        await service.add_track(seeded["alice_id"], playlist.playlist_id, c)

        assert await _orders(session, playlist.playlist_id) == [(a, 1), (c, 2)]

    async def test_add_track_twice_conflicts(
        self, service: PlaylistService, seeded: dict[str, Any]
    ):
        a = seeded["track_ids"][0]
        playlist = await service.create_playlist(seeded["alice_id"], "Mix", [a])

        with pytest.raises(DuplicateEntityException):
            await service.add_track(seeded["alice_id"], playlist.playlist_id, a)

    async def test_foreign_playlist_looks_like_missing_one(
        self, service: PlaylistService, seeded: dict[str, Any]
    ):
        a, b, _ = seeded["track_ids"]
        playlist = await service.create_playlist(seeded["alice_id"], "Private", [a])

        with pytest.raises(AuthorizationError) as foreign:
            await service.add_track(seeded["bob_id"], playlist.playlist_id, b)
        with pytest.raises(AuthorizationError) as missing:
            await service.add_track(seeded["bob_id"], 424242, b)

        assert foreign.value.message == missing.value.message

    async def test_non_owner_mutations_leave_playlist_untouched(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any]
    ):
        a, b, c = seeded["track_ids"]
        playlist = await service.create_playlist(seeded["alice_id"], "Private", [a, b, c])
        bob, pid = seeded["bob_id"], playlist.playlist_id

        for attempt in (
            service.rename_playlist(bob, pid, "Mine now"),
            service.reorder(bob, pid, [c, b, a]),
            service.add_tracks(bob, pid, [a]),
            service.remove_track(bob, pid, b),
            service.delete_playlist(bob, pid),
        ):
            with pytest.raises(AuthorizationError):
                await attempt

        assert await _orders(session, pid) == [(a, 1), (b, 2), (c, 3)]

    async def test_add_tracks_skips_present_ones(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any]
    ):
        a, b, c = seeded["track_ids"]
        playlist = await service.create_playlist(seeded["alice_id"], "Mix", [b])

        added = await service.add_tracks(seeded["alice_id"], playlist.playlist_id, [a, b, c, a])

        assert added == 2
        assert await _orders(session, playlist.playlist_id) == [(b, 1), (a, 2), (c, 3)]

    async def test_remove_track_closes_gap(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any]
    ):
        a, b, c = seeded["track_ids"]
        playlist = await service.create_playlist(seeded["alice_id"], "Mix", [a, b, c])

        await service.remove_track(seeded["alice_id"], playlist.playlist_id, b)

        assert await _orders(session, playlist.playlist_id) == [(a, 1), (c, 2)]

    async def test_remove_absent_track_is_noop(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any]
    ):
        a, b, _ = seeded["track_ids"]
        playlist = await service.create_playlist(seeded["alice_id"], "Mix", [a])

        await service.remove_track(seeded["alice_id"], playlist.playlist_id, b)

        assert await _orders(session, playlist.playlist_id) == [(a, 1)]

    async def test_reorder_rewrites_positions(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any]
    ):
        a, b, c = seeded["track_ids"]
        playlist = await service.create_playlist(seeded["alice_id"], "Mix", [a, b, c])

        await service.reorder(seeded["alice_id"], playlist.playlist_id, [c, a, b])

        assert await _orders(session, playlist.playlist_id) == [(c, 1), (a, 2), (b, 3)]

    @pytest.mark.parametrize(
        "pick",
        [
            lambda a, b, c: [a, b],
            lambda a, b, c: [a, b, c, a],
            lambda a, b, c: [a, a, b],
            lambda a, b, c: [a, b, 999],
        ],
    )
    async def test_reorder_requires_exact_permutation(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any], pick
    ):
        a, b, c = seeded["track_ids"]
        playlist = await service.create_playlist(seeded["alice_id"], "Mix", [a, b, c])

        with pytest.raises(ValidationError):
            await service.reorder(seeded["alice_id"], playlist.playlist_id, pick(a, b, c))

        assert await _orders(session, playlist.playlist_id) == [(a, 1), (b, 2), (c, 3)]

    async def test_rename_and_delete(self, service: PlaylistService, seeded: dict[str, Any]):
        playlist = await service.create_playlist(seeded["alice_id"], "Old", seeded["track_ids"])

        await service.rename_playlist(seeded["alice_id"], playlist.playlist_id, "New")
        assert [p.name for p in await service.list_playlists(seeded["alice_id"])] == ["New"]

        await service.delete_playlist(seeded["alice_id"], playlist.playlist_id)
        assert await service.list_playlists(seeded["alice_id"]) == []

    async def test_favorites_created_once(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any]
    ):
        a, b, _ = seeded["track_ids"]

        first = await service.add_to_favorites(seeded["alice_id"], a)
        second = await service.add_to_favorites(seeded["alice_id"], b)
        again = await service.add_to_favorites(seeded["alice_id"], a)

        assert first.name == FAVORITES_PLAYLIST_NAME
        assert first.playlist_id == second.playlist_id == again.playlist_id
        assert await _orders(session, first.playlist_id) == [(a, 1), (b, 2)]

    async def test_favorites_unknown_track(
        self, service: PlaylistService, seeded: dict[str, Any]
    ):
        with pytest.raises(EntityNotFoundException):
            await service.add_to_favorites(seeded["alice_id"], 999)

    async def test_public_playlists_are_admin_owned_only(
        self, service: PlaylistService, seeded: dict[str, Any]
    ):
        await service.create_playlist(seeded["admin_id"], "Staff Picks", seeded["track_ids"])
        await service.create_playlist(seeded["alice_id"], "Mine", seeded["track_ids"])

        public = await service.list_public()

        assert [p.name for p in public] == ["Staff Picks"]
        assert [t.track_order for t in public[0].tracks] == [1, 2, 3]

    async def test_save_public_copies_tracks_in_order(
        self, service: PlaylistService, session: AsyncSession, seeded: dict[str, Any]
    ):
        a, b, c = seeded["track_ids"]
        source = await service.create_playlist(seeded["admin_id"], "Staff Picks", [b, c, a])

        copy = await service.save_public(seeded["alice_id"], source.playlist_id)

        assert copy.playlist_id != source.playlist_id
        assert copy.name == "Staff Picks"
        assert await _orders(session, copy.playlist_id) == [(b, 1), (c, 2), (a, 3)]

    async def test_save_public_rejects_non_admin_playlist(
        self, service: PlaylistService, seeded: dict[str, Any]
    ):
        private = await service.create_playlist(seeded["bob_id"], "Bob's", seeded["track_ids"])

        with pytest.raises(EntityNotFoundException):
            await service.save_public(seeded["alice_id"], private.playlist_id)
