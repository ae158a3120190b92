"""Tests for the catalog-driven pharmacy connector (full single-attempt pipeline)."""
import httpx
import pytest
import respx

from conftest import CARD_HTML, EMPTY_RESULTS_HTML, make_config

from pharmaprice.ingestion.pharmacy import PharmacyConnector
from pharmaprice.utils.scraping import FetchStatusError

SEARCH_URL = "https://pharma.example.com/search"


class TestBuildUrl:
    def test_substitutes_query(self):
        connector = PharmacyConnector(make_config())
        assert connector.build_url("dolo") == "https://pharma.example.com/search?q=dolo"

    def test_quotes_spaces_and_slashes(self):
        connector = PharmacyConnector(make_config(urlTemplate="https://pharma.example.com/search/{query}"))
        assert connector.build_url(" dolo 650/mg ") == "https://pharma.example.com/search/dolo%20650%2Fmg"


class TestPharmacyConnector:
    @respx.mock
    @pytest.mark.asyncio
    async def test_parses_matching_records(self, card_config):
        respx.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(200, text=CARD_HTML))
        connector = PharmacyConnector(card_config)
        records = await connector.search("paracetamol")

        assert [r.drug_name for r in records] == ["Paracetamol 500mg Tablet", "Dolo 650 Paracetamol"]
        first = records[0]
        assert first.source_id == "testpharma"
        assert first.pharmacy_name == "Test Pharma"
        assert first.price == "25.50"
        assert first.original_price == "30.00"
        assert first.discount == "15% off"
        assert first.availability == "In Stock"
        assert first.link == "https://pharma.example.com/medicine/paracetamol-500"
        assert first.image_url == "https://placehold.co/150x150.png?text=Par"

    @respx.mock
    @pytest.mark.asyncio
    async def test_absolute_links_and_missing_extras(self, card_config):
        respx.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(200, text=CARD_HTML))
        records = await PharmacyConnector(card_config).search("dolo")

        assert len(records) == 1
        assert records[0].link == "https://other.example.com/p/dolo"
        assert records[0].price == "31"
        assert records[0].original_price is None
        assert records[0].discount is None

    @respx.mock
    @pytest.mark.asyncio
    async def test_price_always_string(self):
        html = '<div><a href="/x"><span class="product-name">Crocin Advance</span></a></div>'
        respx.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(200, text=html))
        records = await PharmacyConnector(make_config()).search("crocin")
        assert records[0].price == "N/A"

    @respx.mock
    @pytest.mark.asyncio
    async def test_empty_page(self):
        respx.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(200, text=EMPTY_RESULTS_HTML))
        assert await PharmacyConnector(make_config()).search("paracetamol") == []

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self):
        respx.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(403))
        with pytest.raises(FetchStatusError):
            await PharmacyConnector(make_config()).search("paracetamol")

    @respx.mock
    @pytest.mark.asyncio
    async def test_caps_records(self):
        cards = "".join(
            f'<div><a href="/p/{i}"><span class="product-name">Crocin {i}</span></a><span class="price">₹{i}</span></div>'
            for i in range(9)
        )
        respx.get(url__startswith=SEARCH_URL).mock(return_value=httpx.Response(200, text=cards))
        records = await PharmacyConnector(make_config()).search("crocin")
        assert len(records) == 5
