from dataclasses import dataclass
from enum import Enum


class MenuTheme(str, Enum):
    EDITORIAL = "editorial"
    MODERN = "modern"
    LIGHT = "light"
    BISTRO = "bistro"


@dataclass(frozen=True)
class ThemeConfig:
    id: MenuTheme
    name: str
    class_name: str
    description: str


MENU_THEMES: dict[MenuTheme, ThemeConfig] = {
    MenuTheme.EDITORIAL: ThemeConfig(
        MenuTheme.EDITORIAL,
        "Editorial",
        "theme-editorial",
        "Premium editorial style with warm ivory tones and classic typography",
    ),
    MenuTheme.MODERN: ThemeConfig(
        MenuTheme.MODERN,
        "Modern Dark",
        "theme-modern",
        "Sleek dark theme with teal accents, perfect for cocktail bars",
    ),
    MenuTheme.LIGHT: ThemeConfig(
        MenuTheme.LIGHT,
        "Minimal Light",
        "theme-light",
        "Clean and airy with warm copper accents for cafés and fine dining",
    ),
    MenuTheme.BISTRO: ThemeConfig(
        MenuTheme.BISTRO,
        "Bold Bistro",
        "theme-bistro",
        "Warm terracotta and olive tones with a rustic premium feel",
    ),
}

# Legacy names still stored on older menus
_THEME_ALIASES = {"elegant": MenuTheme.EDITORIAL}


def normalize_theme(value: str | None) -> MenuTheme:
    if not value:
        return MenuTheme.EDITORIAL
    key = value.strip().lower()
    if key in _THEME_ALIASES:
        return _THEME_ALIASES[key]
    try:
        return MenuTheme(key)
    except ValueError:
        return MenuTheme.EDITORIAL


def theme_config(value: str | None) -> ThemeConfig:
    return MENU_THEMES[normalize_theme(value)]
