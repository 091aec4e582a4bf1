from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Date, DateTime, Text, CheckConstraint, Index
from sqlalchemy.sql import func
import uuid
from datetime import datetime, date
from app.core.db import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


class WardrobeItem(Base):
    __tablename__ = "wardrobe_item"
    __table_args__ = (
        CheckConstraint("category IN ('top', 'bottom', 'shoes', 'accessory')", name="ck_wardrobe_item_category"),
        CheckConstraint("wear_count >= 0", name="ck_wardrobe_item_wear_count"),
        Index("ix_wardrobe_item_user_occasion", "user_id", "occasion"),
    )
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_str)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    sub_category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    color: Mapped[str | None] = mapped_column(String(64), nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    occasion: Mapped[str | None] = mapped_column(String(32), nullable=True)
    wear_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_worn_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class User(Base):
    __tablename__ = "user"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid_str)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    name_key: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
