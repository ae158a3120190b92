"""
Shared fixtures for PharmaPrice tests.
"""
import os
import sys

import pytest

# Ensure the package is importable without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pharmaprice.data.source_catalog as source_catalog
from pharmaprice.ingestion import reset_registry
from pharmaprice.schemas.search import SourceConfig

# --- HTML fixture snippets ---

# Price nested in the same card as the name
CARD_HTML = """
<html><body>
<div class="product-card">
  <a href="/medicine/paracetamol-500"><span class="product-name">Paracetamol 500mg Tablet</span></a>
  <div class="price-box"><span class="price">₹ 25.50</span><span class="mrp">₹30.00</span></div>
  <span class="stock">In Stock</span>
</div>
<div class="product-card">
  <a href="/medicine/ibuprofen-200"><span class="product-name">Ibuprofen 200mg</span></a>
  <span class="price">Rs. 1,234.50</span>
</div>
<div class="product-card">
  <a href="https://other.example.com/p/dolo"><span class="product-name">Dolo 650 Paracetamol</span></a>
  <span class="price">₹31</span>
</div>
</body></html>
"""

# Names and prices in parallel lists, no shared card
FLAT_HTML = """
<html><body>
<ul class="names">
  <li class="product-name">Paracetamol 500mg</li>
  <li class="product-name">Crocin Advance</li>
</ul>
<ul class="prices">
  <li class="price">₹10</li>
  <li class="price">₹20</li>
</ul>
</body></html>
"""

# One price missing from the parallel list
FLAT_MISMATCH_HTML = """
<html><body>
<ul>
  <li class="product-name">Paracetamol 500mg</li>
  <li class="product-name">Crocin Advance</li>
</ul>
<ul>
  <li class="price">₹10</li>
</ul>
</body></html>
"""

EMPTY_RESULTS_HTML = """
<html><body><div class="no-results">No products found</div></body></html>
"""


def make_config(**overrides) -> SourceConfig:
    """Build a SourceConfig using catalog (camelCase) keys."""
    data = {
        "id": "testpharma",
        "name": "Test Pharma",
        "urlTemplate": "https://pharma.example.com/search?q={query}",
        "nameClass": "product-name",
        "priceClass": "price",
        "linkBaseUrl": "https://pharma.example.com",
        "enabled": True,
    }
    data.update(overrides)
    return SourceConfig(**data)


@pytest.fixture
def card_config():
    return make_config(originalPriceClass="mrp", availabilityClass="stock")


@pytest.fixture(autouse=True)
def reset_catalog():
    """Each test starts with no loaded catalog and no registered connectors."""
    source_catalog._catalog = None
    source_catalog._catalog_error = None
    reset_registry()
    yield
    source_catalog._catalog = None
    source_catalog._catalog_error = None
    reset_registry()
