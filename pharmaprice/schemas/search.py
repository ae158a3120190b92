"""
Pydantic schemas for the source catalog and search responses.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# A bare class token such as "product-name" (no CSS punctuation)
_BARE_CLASS_RE = re.compile(r"^[A-Za-z_][\w-]*$")


def as_class_selector(value: str | None) -> str | None:
    """Turn a bare class name into a class selector; leave real selectors alone."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if _BARE_CLASS_RE.match(value):
        return f".{value}"
    return value


class SourceConfig(BaseModel):
    """Static description of one pharmacy website. Loaded once, never mutated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    url_template: str = Field(alias="urlTemplate")
    name_selector: str = Field(alias="nameClass")
    price_selector: str = Field(alias="priceClass")
    link_selector: str | None = Field(default=None, alias="linkSelector")
    link_base_url: str | None = Field(default=None, alias="linkBaseUrl")
    original_price_selector: str | None = Field(default=None, alias="originalPriceClass")
    availability_selector: str | None = Field(default=None, alias="availabilityClass")
    enabled: bool = True

    @field_validator("name_selector", "price_selector")
    @classmethod
    def _required_selector(cls, v: str) -> str:
        selector = as_class_selector(v)
        if not selector:
            raise ValueError("selector must not be empty")
        return selector

    @field_validator("original_price_selector", "availability_selector")
    @classmethod
    def _optional_selector(cls, v: str | None) -> str | None:
        return as_class_selector(v)

    @field_validator("link_selector", "link_base_url")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        # linkSelector is a full CSS selector, never a bare class name
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("url_template")
    @classmethod
    def _has_placeholder(cls, v: str) -> str:
        if "{query}" not in v:
            raise ValueError("urlTemplate must contain a {query} placeholder")
        return v

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data):
        if isinstance(data, dict) and not data.get("name"):
            data = {**data, "name": data.get("id", "")}
        return data


class ResultRecord(BaseModel):
    """One normalized product offer returned to callers."""

    source_id: str
    pharmacy_name: str
    drug_name: str = Field(min_length=1)
    price: str = "N/A"
    link: str | None = None
    image_url: str
    original_price: str | None = None
    discount: str | None = None  # e.g. "12% off"
    availability: str | None = None


class SourceStatus(BaseModel):
    """Status of a source query."""

    source: str
    status: Literal["ok", "empty", "error", "cached", "timeout"]
    details: str | None = None
    result_count: int = 0
    attempts: int = 0


class SearchResponse(BaseModel):
    """Outcome of one aggregated search, as handed to the UI layer."""

    query: str
    results: list[ResultRecord] = Field(default_factory=list)
    sources_queried: list[SourceStatus] = Field(default_factory=list)
    message: str | None = None  # "no results" text, not an error
    error: str | None = None  # validation or configuration failure
