import uuid
from datetime import date, datetime

from sqlalchemy import String, Text, Boolean, Date, TIMESTAMP, Index
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, utcnow


def generate_channel_id() -> str:
    """Id for channels registered by hand, without a YouTube channel id."""
    return str(uuid.uuid4())


class Channel(Base, TimestampMixin):
    """A monitored YouTube channel (a competitor, or the user's own channel).

    ``id`` is the YouTube channel id (``UC...``) when known, otherwise a
    generated UUID string. Presentation flags are plain boolean columns;
    they never affect growth computations.
    """

    __tablename__ = "channels"
    __table_args__ = (
        Index("idx_channels_last_sync", "last_sync"),
    )

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=generate_channel_id)
    channel_name: Mapped[str] = mapped_column(String(255), nullable=False)
    influencer_name: Mapped[str | None] = mapped_column(String(255))
    country: Mapped[str | None] = mapped_column(String(8))
    custom_url: Mapped[str | None] = mapped_column(Text)
    avatar_url: Mapped[str | None] = mapped_column(Text)
    custom_category: Mapped[str | None] = mapped_column(String(255))
    youtube_join_date: Mapped[date | None] = mapped_column(Date)
    last_sync: Mapped[datetime | None] = mapped_column(
        TIMESTAMP, default=utcnow)

    is_my_channel: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False)
    is_hidden: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False)
    is_pinned: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False)
