"""
Interfaces of the external collaborators consumed by the pipeline.

Every call is synchronous and blocking. Implementations live with the
storage, pricing and localization services; the pipeline only depends on
these protocols.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol, Sequence

from product_indexer.models import ContentKind, ProductRecord


class CategoryHierarchy(Protocol):
    """Category memberships of products and ancestor trails of categories."""

    def memberships(self, product_id: str) -> Sequence[str]:
        """Return the ids of the categories the product is a member of."""

    def trails(self, category_id: str) -> Sequence[Sequence[str]]:
        """Return every root-to-leaf id sequence ending at the category."""


class CatalogMembership(Protocol):
    def catalogs_of(self, category_id: str) -> Sequence[str]:
        """Return the ids of the catalogs owning the category."""


class FeatureSetProvider(Protocol):
    def features(self, product_id: str) -> Optional[set[str]]:
        """Return the feature ids applied to the product."""


class InventoryProvider(Protocol):
    def available_to_promise(self, product_id: str) -> Optional[Decimal]:
        """Return the total available-to-promise quantity, None when unknown."""


class VariantRelations(Protocol):
    def is_virtual(self, product_id: str) -> bool:
        ...

    def is_variant(self, product_id: str) -> bool:
        ...


class PriceConfigurator(Protocol):
    """Stateful price builder of one aggregated product."""

    def set_defaults(self) -> None:
        """Select the default option of every configurable component."""

    def total_list_price(self) -> Optional[Decimal]:
        ...

    def total_price(self) -> Optional[Decimal]:
        ...

    def had_original_list_price(self) -> bool:
        """True when a list price existed before discounts were applied."""


class AggregatedPriceCollaborator(Protocol):
    def configure(
        self,
        product: ProductRecord,
        currency: Optional[str],
        locale: str,
        principal: Any = None,
    ) -> PriceConfigurator:
        ...


class SimplePriceCollaborator(Protocol):
    def calculate(
        self,
        product: ProductRecord,
        currency: Optional[str],
        **passthrough: Any,
    ) -> Mapping[str, Optional[Decimal]]:
        """Return a mapping holding optional 'listPrice' and 'defaultPrice'."""


class LocaleConfiguration(Protocol):
    def active_locales(self, product_store_id: Optional[str] = None) -> Sequence[str]:
        """Return the locales content is indexed in, in order."""

    def default_price_locale(self, product_store_id: Optional[str] = None) -> str:
        """Return the locale used when configuring aggregated prices."""


class ContentLocalizer(Protocol):
    def text(
        self,
        product: ProductRecord,
        content_kind: ContentKind,
        locale: str,
    ) -> Optional[str]:
        """Return the localized override of a content field, None when absent."""


class InterfaceDescriptorLookup(Protocol):
    def declared_input_fields(
        self,
        interface_name: str,
        include_internal: bool = False,
    ) -> Sequence[str]:
        """Return the declared input parameter names of a service interface."""


class DocumentSink(Protocol):
    def add_field(self, name: str, value: Any) -> None:
        """Add a value to a field; repeated calls make the field multi-valued."""
