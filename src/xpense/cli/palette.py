"""Deterministic category colors for chart consumers of JSON output."""

import hashlib

CATEGORY_COLORS = {
    "transport": "hsl(200 100% 50%)",
    "food": "hsl(10 100% 60%)",
    "visit": "hsl(280 100% 60%)",
    "lending": "hsl(40 100% 50%)",
    "helped": "hsl(120 100% 50%)",
    "tour": "hsl(350 100% 50%)",
    "bills": "hsl(180 100% 40%)",
    "shopping": "hsl(300 100% 50%)",
    "others": "hsl(60 100% 50%)",
}

FALLBACK_COLORS = (
    "hsl(12 76% 61%)",
    "hsl(173 58% 39%)",
    "hsl(197 37% 24%)",
    "hsl(43 74% 66%)",
    "hsl(27 87% 67%)",
    "hsl(58 90% 50%)",
    "hsl(348 83% 47%)",
    "hsl(45 93% 51%)",
    "hsl(280 85% 55%)",
)


def category_color(key: str) -> str:
    """Return a stable color for a category key.

    Known categories use the fixed palette; others are seeded by a hash of
    the key so a category keeps its color across renders.
    """
    normalized = key.strip().lower()
    if normalized in CATEGORY_COLORS:
        return CATEGORY_COLORS[normalized]
    digest = hashlib.sha256(normalized.encode("utf-8")).digest()
    return FALLBACK_COLORS[digest[0] % len(FALLBACK_COLORS)]
