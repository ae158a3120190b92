"""
Data normalization utilities for unifying results from different pharmacies.
"""

import re
import unicodedata
from urllib.parse import quote

NOT_AVAILABLE = "N/A"

_RUPEE_TOKEN_RE = re.compile(r"\b(?:rs|inr)(?=[\s.\d]|$)\.?", re.IGNORECASE)
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_PLACEHOLDER_IMAGE = "https://placehold.co/150x150.png?text={text}"


def normalize_price(price_text: str | None) -> str:
    """
    Normalize a scraped price label to a display string.

    Strips currency symbols, "Rs"/"Rs."/"INR" tokens (also when glued to
    the digits) and thousands separators, and collapses whitespace. Does
    not check that the rest is numeric.

    Commas are always treated as thousands separators, as on Indian
    pharmacy sites; a comma-decimal price like "12,50" becomes "1250".

        "Rs. 1,234.50" -> "1234.50"
        "Rs199"        -> "199"
        "₹ 45"         -> "45"
        "" / "Rs."     -> "N/A"
    """
    if not price_text:
        return NOT_AVAILABLE

    cleaned = "".join(ch for ch in price_text if unicodedata.category(ch) != "Sc")
    cleaned = _RUPEE_TOKEN_RE.sub(" ", cleaned)
    cleaned = cleaned.replace(",", "")
    cleaned = " ".join(cleaned.split())
    return cleaned or NOT_AVAILABLE


def price_value(price: str | None) -> float | None:
    """
    Permissively pull a number out of a (normalized or raw) price string.
    Returns None when no digits are present.
    """
    if not price or price == NOT_AVAILABLE:
        return None
    match = _NUMBER_RE.search(price.replace(",", ""))
    if not match:
        return None
    return float(match.group(0))


def compute_discount(price: str | None, original_price: str | None) -> str | None:
    """Return e.g. "20% off" when the original price is above the selling price."""
    current = price_value(price)
    original = price_value(original_price)
    if current is None or original is None or original <= current or original == 0:
        return None
    percent = round((original - current) / original * 100)
    if percent <= 0:
        return None
    return f"{percent}% off"


def placeholder_image_url(drug_name: str) -> str:
    """Deterministic placeholder thumbnail for a product name."""
    return _PLACEHOLDER_IMAGE.format(text=quote(drug_name.strip()[:3]))


def normalize_query(query: str | None) -> str:
    """Trim and collapse internal whitespace."""
    if not query:
        return ""
    return " ".join(query.split())


def clean_text(text: str | None) -> str:
    """Collapse whitespace in scraped text (handles \\xa0 and newlines)."""
    if not text:
        return ""
    return " ".join(text.split())
