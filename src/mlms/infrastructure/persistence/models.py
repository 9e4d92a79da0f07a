"""SQLAlchemy ORM models for MLMS.

One canonical snake_case schema. Foreign keys deliberately have NO
``ON DELETE CASCADE`` - the catalog admin service deletes dependent rows in
foreign-key order itself (see TRACK_DEPENDENT_MODELS below).
"""

from datetime import UTC, date, datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    TypeDecorator,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# Hey future me, utc_now() ensures ALL timestamps are UTC! Never use datetime.now() without
# timezone - that's "naive" datetime and causes bugs when servers are in different timezones.
def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


# Hey future me - SQLite doesn't preserve timezone info! When we store UTC datetimes, they come
# back as "naive" (no tzinfo). Use this before comparing DB datetimes with datetime.now(UTC).
def ensure_utc_aware(dt: datetime) -> datetime:
    """Ensure datetime is UTC-aware, assuming naive datetimes are UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


# Stored as naive UTC so SQLite and "timestamp without time zone" columns agree, and handed
# back UTC-aware so a freshly created row and one read back from the database serialize alike.
class UTCDateTime(TypeDecorator[datetime]):
    """DateTime column that always round-trips as an aware UTC value."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        return ensure_utc_aware(value).astimezone(UTC).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        return ensure_utc_aware(value)


class Base(DeclarativeBase):
    """Base class for all ORM models.

    All models inherit from this to use the same metadata registry.
    """

    type_annotation_map = {datetime: UTCDateTime()}


class UserModel(Base):
    """User account. Never hard-deleted."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Stored trimmed + lower-cased, so the unique constraint is effectively case-insensitive.
    email: Mapped[str] = mapped_column(String(150), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="regular_user", index=True
    )
    last_login_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    playlists: Mapped[list["PlaylistModel"]] = relationship(
        "PlaylistModel", back_populates="owner"
    )
    subscription: Mapped["SubscriptionModel | None"] = relationship(
        "SubscriptionModel", back_populates="user", uselist=False
    )


# Hey future me - user_id is UNIQUE! At most one subscription row per user. The PUT /subscription
# handler does update-or-insert in one transaction, and this constraint makes the concurrent
# "both requests saw no row" race fail loudly (IntegrityError → 409) instead of leaving two rows.
class SubscriptionModel(Base):
    """A user's subscription plan."""

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, unique=True
    )
    subscription_type: Mapped[str] = mapped_column(String(50), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        sa.Boolean(), nullable=False, default=True, server_default="1"
    )

    user: Mapped["UserModel"] = relationship("UserModel", back_populates="subscription")


class ArtistModel(Base):
    """SQLAlchemy model for Artist entity."""

    __tablename__ = "artists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    biography: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    albums: Mapped[list["AlbumModel"]] = relationship("AlbumModel", back_populates="artist")


class GenreModel(Base):
    """SQLAlchemy model for Genre entity."""

    __tablename__ = "genres"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)


class AlbumModel(Base):
    """SQLAlchemy model for Album entity."""

    __tablename__ = "albums"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    artist_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("artists.id"), nullable=False, index=True
    )
    genre_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("genres.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    release_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    artist: Mapped["ArtistModel"] = relationship("ArtistModel", back_populates="albums")
    genre: Mapped["GenreModel"] = relationship("GenreModel")
    tracks: Mapped[list["TrackModel"]] = relationship("TrackModel", back_populates="album")


# Case-insensitive "one title per artist". Expression index works on SQLite >= 3.9 and PostgreSQL.
Index(
    "uq_albums_artist_title_lower",
    AlbumModel.artist_id,
    func.lower(AlbumModel.title),
    unique=True,
)


# Listen up, artist_id and genre_id are DENORMALIZED copies of the album's artist/genre!
# Nothing in the schema keeps them in sync - CatalogAdminService derives them from the album
# when omitted and rejects mismatches. Don't write tracks without going through that service.
class TrackModel(Base):
    """SQLAlchemy model for Track entity."""

    __tablename__ = "tracks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    file_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    album_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("albums.id"), nullable=False, index=True
    )
    artist_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("artists.id"), nullable=False, index=True
    )
    genre_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("genres.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    album: Mapped["AlbumModel"] = relationship("AlbumModel", back_populates="tracks")
    artist: Mapped["ArtistModel"] = relationship("ArtistModel")
    genre: Mapped["GenreModel"] = relationship("GenreModel")


class PlaylistModel(Base):
    """SQLAlchemy model for Playlist entity.

    Playlists owned by an admin user are "public": anyone can list them and
    copy them into their own library.
    """

    __tablename__ = "playlists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    owner: Mapped["UserModel"] = relationship("UserModel", back_populates="playlists")
    playlist_tracks: Mapped[list["PlaylistTrackModel"]] = relationship(
        "PlaylistTrackModel",
        back_populates="playlist",
        order_by="PlaylistTrackModel.track_order",
    )


class PlaylistTrackModel(Base):
    """Association table for Playlist-Track relationship.

    track_order is 1-based and contiguous per playlist. That's a service
    convention (PlaylistService renumbers), not a constraint.
    """

    __tablename__ = "playlist_tracks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    playlist_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("playlists.id"), nullable=False
    )
    track_id: Mapped[int] = mapped_column(Integer, ForeignKey("tracks.id"), nullable=False)
    track_order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    added_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    playlist: Mapped["PlaylistModel"] = relationship(
        "PlaylistModel", back_populates="playlist_tracks"
    )
    track: Mapped["TrackModel"] = relationship("TrackModel")

    __table_args__ = (
        UniqueConstraint("playlist_id", "track_id", name="uq_playlist_tracks_playlist_track"),
        Index("ix_playlist_tracks_order", "playlist_id", "track_order"),
    )


class LikedTrackModel(Base):
    """A user's like on a track. Unique per (user, track)."""

    __tablename__ = "liked_tracks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    track_id: Mapped[int] = mapped_column(Integer, ForeignKey("tracks.id"), nullable=False)
    liked_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "track_id", name="uq_liked_tracks_user_track"),
    )


class PlaybackHistoryModel(Base):
    """Append-only playback event."""

    __tablename__ = "playback_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    track_id: Mapped[int] = mapped_column(Integer, ForeignKey("tracks.id"), nullable=False)
    played_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)


class DownloadHistoryModel(Base):
    """Append-only download event."""

    __tablename__ = "download_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    track_id: Mapped[int] = mapped_column(Integer, ForeignKey("tracks.id"), nullable=False)
    downloaded_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)


class UserActivityModel(Base):
    """Free-text audit log line, written after most mutating user actions."""

    __tablename__ = "user_activity"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    activity: Mapped[str] = mapped_column(String(255), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)


# Hey future me - this is the CLOSED list of tables that point at tracks.id! Cascading deletes
# (track/album/artist) iterate this tuple, never table names from a request. Add new models here
# when they get a track_id FK or track deletes start failing with FK violations.
TRACK_DEPENDENT_MODELS: tuple[type[Base], ...] = (
    PlaylistTrackModel,
    LikedTrackModel,
    DownloadHistoryModel,
    PlaybackHistoryModel,
)
