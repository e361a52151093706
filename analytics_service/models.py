"""
Re-declares only the append-only analytics tables this service writes.
Table names must match those created by the API service (app/).
analytics_service never calls create_all; table ownership stays with app.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from analytics_service.database import Base


class MenuView(Base):
    __tablename__ = "menu_views"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    menu_id: Mapped[uuid.UUID] = mapped_column(nullable=False)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    viewed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class PromoClick(Base):
    __tablename__ = "promo_clicks"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    promotion_id: Mapped[uuid.UUID] = mapped_column(nullable=False)
    clicked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
