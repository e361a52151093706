# Import all models here so SQLAlchemy registers them with Base.metadata
from app.models.analytics import MenuView, PromoClick
from app.models.item import Item
from app.models.menu import Menu, MenuStatus
from app.models.promotion import Promotion
from app.models.section import Section

__all__ = [
    "Item",
    "Menu",
    "MenuStatus",
    "MenuView",
    "PromoClick",
    "Promotion",
    "Section",
]
