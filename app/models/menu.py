import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MenuStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Menu(Base):
    __tablename__ = "menus"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    # Owner identity never leaves the admin side; public reads project it away.
    owner_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    name_en: Mapped[str | None] = mapped_column(String(200), nullable=True)
    name_pt: Mapped[str | None] = mapped_column(String(200), nullable=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[MenuStatus] = mapped_column(
        SAEnum(MenuStatus, name="menustatus"), default=MenuStatus.DRAFT, nullable=False
    )
    theme: Mapped[str] = mapped_column(String(40), default="editorial", nullable=False)
    cta_label: Mapped[str | None] = mapped_column(String(100), nullable=True)
    cta_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    pos_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivery_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    hide_branding: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    sections: Mapped[list["Section"]] = relationship(
        "Section", back_populates="menu", cascade="all, delete-orphan"
    )
    promotions: Mapped[list["Promotion"]] = relationship(
        "Promotion", back_populates="menu", cascade="all, delete-orphan"
    )
