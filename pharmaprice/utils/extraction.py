"""
Pull raw (name, price, link context) candidates out of a search result page.

Pharmacy pages are inconsistent about where the price lives relative to the
product name: sometimes inside the same card, sometimes in a parallel list.
Each name is paired with a price by trying, in order:

1. the nearest enclosing element that holds a price match and no other
   product name (the product card)
2. the price at the same position among all price matches on the page,
   only when the name/price counts agree within a tolerance
3. nothing (the price is reported as "N/A" later)
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from itertools import chain, takewhile

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from pharmaprice.config import settings
from pharmaprice.schemas.search import SourceConfig
from pharmaprice.utils.normalization import clean_text

logger = logging.getLogger(__name__)


@dataclass
class RawCandidate:
    """One product name found on a page, before matching and normalization."""

    text: str
    price_text: str
    context: Tag = field(repr=False)
    original_price_text: str = ""
    availability_text: str = ""


def _card_scopes(name_elements: list[Tag]) -> list[list[Tag]]:
    """
    For each name, the name itself and its ancestors up to (not including)
    the first one that also encloses another name.
    """
    shared = Counter(id(node) for el in name_elements for node in chain([el], el.parents))
    return [
        list(takewhile(lambda node: shared[id(node)] == 1, chain([el], el.parents)))
        for el in name_elements
    ]


def _nearest_match(own: Tag, scopes: list[Tag], selector: str) -> Tag | None:
    """Closest match of selector within the name's own card, if any."""
    for scope in scopes:
        match = scope.select_one(selector)
        if match is not None and match is not own:
            return match
    return None


def _text_of(element: Tag | None) -> str:
    if element is None:
        return ""
    return clean_text(element.get_text(" ", strip=True))


def extract_candidates(html: str, config: SourceConfig) -> list[RawCandidate]:
    """
    Parse a result page into RawCandidates in document order.

    Names with empty text are dropped. An invalid selector is logged and
    yields no candidates.
    """
    soup = BeautifulSoup(html, "html.parser")

    try:
        name_elements = soup.select(config.name_selector)
        price_elements = soup.select(config.price_selector)
    except SelectorSyntaxError as e:
        logger.warning(f"{config.id}: invalid selector in catalog: {e}")
        return []

    if not name_elements:
        logger.info(f"{config.id}: no elements matched {config.name_selector!r}")
        return []

    count_gap = abs(len(name_elements) - len(price_elements))
    positional_ok = count_gap <= settings.price_pairing_tolerance
    if count_gap:
        logger.warning(
            f"{config.id}: {len(name_elements)} names vs {len(price_elements)} prices"
            + ("" if positional_ok else "; positional price pairing disabled")
        )

    candidates: list[RawCandidate] = []
    for index, (name_el, scopes) in enumerate(zip(name_elements, _card_scopes(name_elements))):
        text = _text_of(name_el)
        if not text:
            continue

        price_el = _nearest_match(name_el, scopes, config.price_selector)
        if price_el is None and positional_ok and index < len(price_elements):
            price_el = price_elements[index]

        original_price_text = ""
        if config.original_price_selector:
            original_price_text = _text_of(
                _nearest_match(name_el, scopes, config.original_price_selector)
            )

        availability_text = ""
        if config.availability_selector:
            availability_text = _text_of(
                _nearest_match(name_el, scopes, config.availability_selector)
            )

        candidates.append(
            RawCandidate(
                text=text,
                price_text=_text_of(price_el),
                context=name_el,
                original_price_text=original_price_text,
                availability_text=availability_text,
            )
        )

    return candidates
