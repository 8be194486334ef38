import datetime

from sqlalchemy import (
    String, TIMESTAMP, Integer, BigInteger, Date,
    ForeignKey, Index, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, utcnow


class Snapshot(Base):
    """One dated observation of a channel's public counters.

    Upserted per (channel_id, date): saving a second snapshot for the same
    day overwrites the counters instead of adding a row.
    """

    __tablename__ = "channel_snapshots"
    __table_args__ = (
        Index("idx_snapshots_channel_id", "channel_id"),
        UniqueConstraint("channel_id", "date", name="uq_snapshots_channel_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    channel_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("channels.id", ondelete="CASCADE"), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    subscribers: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    views: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    videos: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Display only, never used in growth math
    time_registered: Mapped[str | None] = mapped_column(String(8))
    created_at: Mapped[datetime.datetime] = mapped_column(
        TIMESTAMP, default=utcnow)
