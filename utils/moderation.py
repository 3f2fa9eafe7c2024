"""Word filter applied to chirp bodies before they are stored."""
from __future__ import annotations

MASK = "****"

# Both spellings are listed on purpose: matching is exact, not case-folded.
BANNED_WORDS = frozenset({
    "kerfuffle", "Kerfuffle",
    "sharbert", "Sharbert",
    "fornax", "Fornax",
})


def clean(body: str) -> str:
    """Mask whole space-separated tokens that are banned.

    "kerfuffle!" stays as-is; only exact tokens are replaced.
    """
    words = body.split(" ")
    return " ".join(MASK if word in BANNED_WORDS else word for word in words)
