"""
Product link resolution for scraped candidates.
"""

import logging
from itertools import chain
from urllib.parse import urljoin

from bs4 import Tag
from soupsieve import SelectorSyntaxError

from pharmaprice.schemas.search import SourceConfig
from pharmaprice.utils.extraction import RawCandidate

logger = logging.getLogger(__name__)


def _usable_href(element: Tag | None) -> str | None:
    if element is None:
        return None
    href = (element.get("href") or "").strip()
    if not href or href.startswith("#") or href.lower().startswith("javascript:"):
        return None
    return href


def _closest(element: Tag, selector: str) -> Tag | None:
    """The element itself or its nearest ancestor matching selector."""
    for node in chain([element], element.parents):
        if node.name == "[document]":
            break
        if node.css.match(selector):
            return node
    return None


def _from_link_selector(name_el: Tag, selector: str) -> str | None:
    try:
        href = _usable_href(_closest(name_el, selector))
        if href:
            return href
        return _usable_href(name_el.select_one(selector))
    except SelectorSyntaxError as e:
        logger.warning(f"Invalid link selector {selector!r}: {e}")
        return None


def _from_anchor_ancestor(name_el: Tag) -> str | None:
    anchor = name_el if name_el.name == "a" else name_el.find_parent("a")
    return _usable_href(anchor)


def _from_anchor_parent(name_el: Tag) -> str | None:
    parent = name_el.parent
    if parent is not None and parent.name == "a":
        return _usable_href(parent)
    return None


def resolve_link(
    candidate: RawCandidate,
    config: SourceConfig,
    page_url: str | None = None,
) -> str | None:
    """
    Find an absolute product URL for a candidate.

    Tries the source's link selector (around, then inside, the name
    element), then the nearest enclosing anchor, then an anchor parent.
    Relative hrefs are joined onto link_base_url, or the page URL when the
    source has no base. Returns None when nothing usable is found.
    """
    name_el = candidate.context
    href = None
    if config.link_selector:
        href = _from_link_selector(name_el, config.link_selector)
    if not href:
        href = _from_anchor_ancestor(name_el)
    if not href:
        href = _from_anchor_parent(name_el)
    if not href:
        return None

    if href.startswith(("http://", "https://")):
        return href

    base = config.link_base_url or page_url
    if not base:
        logger.debug(f"{config.id}: relative link {href!r} with no base URL")
        return None
    # Base URLs in the catalog are usually bare origins without a trailing slash
    if not base.endswith("/") and not href.startswith("/"):
        base = f"{base}/"
    return urljoin(base, href)
