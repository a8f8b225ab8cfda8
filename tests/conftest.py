"""Pytest fixtures and in-memory collaborators."""

from decimal import Decimal

import pytest

from product_indexer.config import IndexerSettings
from product_indexer.logging_config import batch_id_var, correlation_id_var
from product_indexer.models import ProductRecord
from product_indexer.pipeline import build_pipeline
from product_indexer.schema_registry import SchemaFieldRegistry

SIMPLE_FIELDS = [
    "productId",
    "internalName",
    "productTypeId",
    "smallImage",
    "mediumImage",
    "largeImage",
    "inStock",
    "isVirtual",
    "isVariant",
    "isDigital",
    "isPhysical",
    "listPrice",
    "defaultPrice",
]


class FakeHierarchy:
    def __init__(self, memberships=None, trails=None, fail=False):
        self._memberships = memberships or {}
        self._trails = trails or {}
        self.fail = fail

    def memberships(self, product_id):
        if self.fail:
            raise RuntimeError("entity engine unavailable")
        return self._memberships.get(product_id, [])

    def trails(self, category_id):
        return self._trails.get(category_id, [[category_id]])


class FakeCatalogs:
    def __init__(self, owners=None):
        self.owners = owners or {}
        self.calls = []

    def catalogs_of(self, category_id):
        self.calls.append(category_id)
        return self.owners.get(category_id, [])


class FakeFeatures:
    def __init__(self, features=None, fail=False):
        self._features = features or {}
        self.fail = fail

    def features(self, product_id):
        if self.fail:
            raise RuntimeError("feature service failed")
        return self._features.get(product_id)


class FakeInventory:
    def __init__(self, available=None, fail=False):
        self.available = available or {}
        self.fail = fail

    def available_to_promise(self, product_id):
        if self.fail:
            raise RuntimeError("inventory service failed")
        return self.available.get(product_id)


class FakeVariants:
    def __init__(self, virtual=(), variant=()):
        self.virtual = set(virtual)
        self.variant = set(variant)

    def is_virtual(self, product_id):
        return product_id in self.virtual

    def is_variant(self, product_id):
        return product_id in self.variant


class FakeConfigurator:
    def __init__(self, list_price, price, had_original=False, needs_defaults=True):
        self._list_price = list_price
        self._price = price
        self._had_original = had_original
        self.defaults_set = not needs_defaults

    def set_defaults(self):
        self.defaults_set = True

    def total_list_price(self):
        return self._list_price if self.defaults_set else Decimal("0")

    def total_price(self):
        return self._price if self.defaults_set else Decimal("0")

    def had_original_list_price(self):
        return self._had_original


class FakeAggregatedPrices:
    def __init__(self, configurator=None, fail=False):
        self.configurator = configurator or FakeConfigurator(Decimal("0"), Decimal("0"))
        self.fail = fail
        self.calls = []

    def configure(self, product, currency, locale, principal=None):
        self.calls.append((product.product_id, currency, locale, principal))
        if self.fail:
            raise RuntimeError("configuration failed")
        return self.configurator


class FakeSimplePrices:
    def __init__(self, prices=None, fail=False):
        self.prices = prices or {}
        self.fail = fail
        self.calls = []

    def calculate(self, product, currency, **passthrough):
        self.calls.append((product.product_id, currency, passthrough))
        if self.fail:
            raise RuntimeError("price service failed")
        return self.prices.get(product.product_id, {})


class FakeLocales:
    def __init__(self, locales=("en_US",), price_locale="en_US", fail=False):
        self.locales = list(locales)
        self.price_locale = price_locale
        self.fail = fail

    def active_locales(self, product_store_id=None):
        if self.fail:
            raise RuntimeError("locale configuration unavailable")
        return self.locales

    def default_price_locale(self, product_store_id=None):
        if self.fail:
            raise RuntimeError("locale configuration unavailable")
        return self.price_locale


class FakeLocalizer:
    def __init__(self, texts=None, fail=False):
        # (product_id, ContentKind, locale) -> text
        self.texts = texts or {}
        self.fail = fail

    def text(self, product, content_kind, locale):
        if self.fail:
            raise RuntimeError("content service failed")
        return self.texts.get((product.product_id, content_kind, locale))


class FakeDescriptorLookup:
    def __init__(self, fields=None, fail=False):
        self.fields = list(fields if fields is not None else SIMPLE_FIELDS)
        self.fail = fail
        self.calls = 0

    def declared_input_fields(self, interface_name, include_internal=False):
        self.calls += 1
        if self.fail:
            raise LookupError(f"service {interface_name} not found")
        return self.fields


@pytest.fixture
def simple_product():
    """Return a finished good with all text fields set."""
    return ProductRecord(
        product_id="PROD-1",
        product_type_id="FINISHED_GOOD",
        fields={
            "internalName": "Blue Widget",
            "productName": "Widget",
            "description": "A blue widget",
            "longDescription": "A very blue widget for everyday use",
            "smallImageUrl": "/images/widget-small.png",
            "mediumImageUrl": "/images/widget-medium.png",
        },
    )


@pytest.fixture
def aggregated_product():
    """Return a configurable aggregated product."""
    return ProductRecord(
        product_id="PC-1",
        product_type_id="AGGREGATED",
        fields={"internalName": "Custom PC", "productName": "PC"},
    )


@pytest.fixture
def collaborators():
    """Return a set of in-memory collaborators for PROD-1."""
    return {
        "hierarchy": FakeHierarchy(
            memberships={"PROD-1": ["catB"]},
            trails={"catB": [["catA", "catB"]]},
        ),
        "catalogs": FakeCatalogs({"catA": ["CATALOG-1"]}),
        "features": FakeFeatures({"PROD-1": {"COLOR_BLUE"}}),
        "inventory": FakeInventory({"PROD-1": Decimal("12.75")}),
        "variants": FakeVariants(),
        "aggregated_prices": FakeAggregatedPrices(),
        "simple_prices": FakeSimplePrices(
            {"PROD-1": {"listPrice": Decimal("10.005"), "defaultPrice": Decimal("8.00")}}
        ),
        "locales": FakeLocales(["fr_FR"]),
        "localizer": FakeLocalizer(),
        "descriptor_lookup": FakeDescriptorLookup(),
    }


@pytest.fixture
def pipeline(collaborators):
    """Return a pipeline wired to the in-memory collaborators."""
    return build_pipeline(**collaborators, settings=IndexerSettings())


@pytest.fixture
def registry():
    """Return a registry over the default simple field list."""
    return SchemaFieldRegistry(FakeDescriptorLookup())


@pytest.fixture(autouse=True)
def isolated_log_context():
    """Keep correlation and batch ids from leaking between tests."""
    cid_token = correlation_id_var.set("")
    bid_token = batch_id_var.set("")
    yield
    batch_id_var.reset(bid_token)
    correlation_id_var.reset(cid_token)
