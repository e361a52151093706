"""Deterministic presentation fallbacks for items without their own image or pairing."""

from decimal import ROUND_HALF_UP, Decimal

FALLBACK_IMAGES = (
    "https://images.unsplash.com/photo-1504674900247-0877df9cc836?q=80&w=1200&auto=format&fit=crop",
    "https://images.unsplash.com/photo-1544025162-d76694265947?q=80&w=1200&auto=format&fit=crop",
    "https://images.unsplash.com/photo-1473093295043-cdd812d0e601?q=80&w=1200&auto=format&fit=crop",
    "https://images.unsplash.com/photo-1476224203421-9ac39bcb3327?q=80&w=1200&auto=format&fit=crop",
    "https://images.unsplash.com/photo-1504754524776-8f4f37790ca0?q=80&w=1200&auto=format&fit=crop",
)

PAIRING_SUGGESTIONS = (
    "Chardonnay mineral y notas de manteca tostada.",
    "Malbec joven con taninos sedosos.",
    "Spritz cítrico con hierbas frescas.",
    "Pinot Noir ligero y elegante.",
    "Té blanco con cítricos y flor de azahar.",
    "Cóctel de autor con gin botánico.",
)


def fallback_image(name: str) -> str:
    return FALLBACK_IMAGES[len(name) % len(FALLBACK_IMAGES)]


def pairing_suggestion(name: str) -> str:
    return PAIRING_SUGGESTIONS[len(name) % len(PAIRING_SUGGESTIONS)]


def format_price(price: Decimal) -> str:
    """es-CL style: no decimals, dot as thousands separator (12500 -> "12.500")."""
    whole = int(price.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return f"{whole:,}".replace(",", ".")
