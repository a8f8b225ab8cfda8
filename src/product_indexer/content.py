"""
Enrichment of a product record into the attribute context of its document.
Runs every lookup the document needs and isolates failures to one product.
"""

import logging
from typing import Optional

from product_indexer.category_trails import CategoryTrailResolver
from product_indexer.collaborators import (
    FeatureSetProvider,
    InventoryProvider,
    VariantRelations,
)
from product_indexer.exceptions import (
    CollaboratorError,
    ErrorContext,
    StorageError,
    as_indexing_error,
)
from product_indexer.localized_content import LocalizedContentResolver
from product_indexer.logging_config import get_batch_id, get_correlation_id, product_logger
from product_indexer.models import AttributeContext, ProductRecord, RequestContext
from product_indexer.pricing import PriceResolver

logger = logging.getLogger(__name__)

# Storage field -> attribute name of scalars copied straight from the record.
RECORD_ATTRIBUTES = (
    ("productId", "productId"),
    ("internalName", "internalName"),
    ("productTypeId", "productTypeId"),
    ("smallImageUrl", "smallImage"),
    ("mediumImageUrl", "mediumImage"),
    ("largeImageUrl", "largeImage"),
)


class ProductContentBuilder:
    """
    Builds the attribute context of one product.

    Storage and collaborator failures end enrichment of that product only:
    they are logged and recorded on the context, and whatever was collected
    before the failure is returned.
    """

    def __init__(
        self,
        trails: CategoryTrailResolver,
        prices: PriceResolver,
        content: LocalizedContentResolver,
        features: FeatureSetProvider,
        inventory: InventoryProvider,
        variants: VariantRelations,
        product_store_id: Optional[str] = None,
    ):
        self.trails = trails
        self.prices = prices
        self.content = content
        self.features = features
        self.inventory = inventory
        self.variants = variants
        self.product_store_id = product_store_id

    def build(
        self,
        product: ProductRecord,
        context: Optional[RequestContext] = None,
    ) -> AttributeContext:
        context = context or {}
        product_id = product.product_id
        log = product_logger(logger, product_id)
        attributes = AttributeContext(product_id=product_id)

        log.debug(f"Getting product content for product '{product_id}'")

        try:
            self._add_record_fields(product, attributes)
            self._add_categories(product_id, attributes)
            self._add_features(product_id, attributes, log)
            self._add_inventory(product_id, attributes)
            self._add_flags(product, attributes)
            self._add_localized_content(product, attributes)
            self._add_prices(product, context, attributes)
        except Exception as e:
            error = as_indexing_error(e, product_id=product_id)
            error.context.correlation_id = get_correlation_id() or None
            error.context.batch_id = get_batch_id() or None
            attributes.errors.append(error)
            log.error(
                f"Failed to get product content: {error.message}",
                extra={"error": error.to_dict()},
                exc_info=True,
            )

        return attributes

    def _add_record_fields(self, product: ProductRecord, attributes: AttributeContext) -> None:
        for storage_field, attribute_name in RECORD_ATTRIBUTES:
            value = product.get(storage_field)
            if value is not None:
                attributes.set(attribute_name, value)

    def _add_categories(self, product_id: str, attributes: AttributeContext) -> None:
        try:
            trails = self.trails.resolve_trails(product_id)
            attributes.set("category", trails)
            attributes.set("catalog", self.trails.resolve_catalogs(trails))
        except Exception as e:
            raise StorageError(
                message=f"Category lookup failed for product {product_id}: {e}",
                product_id=product_id,
                entity="ProductCategoryMember",
                context=ErrorContext(field_name="category"),
                original_exception=e,
            )

    def _add_features(self, product_id: str, attributes: AttributeContext, log) -> None:
        try:
            feature_set = self.features.features(product_id)
        except Exception as e:
            log.warning(
                f"Feature lookup failed, indexing without features: {e}",
                extra={"field_name": "features"},
            )
            return
        if feature_set is not None:
            attributes.set("features", list(feature_set))

    def _add_inventory(self, product_id: str, attributes: AttributeContext) -> None:
        try:
            available = self.inventory.available_to_promise(product_id)
        except Exception as e:
            raise CollaboratorError(
                message=f"Inventory lookup failed for product {product_id}: {e}",
                collaborator="inventory",
                operation="available_to_promise",
                product_id=product_id,
                original_exception=e,
            )
        in_stock = None
        if available is not None:
            # Whole units only, truncated toward zero.
            in_stock = str(int(available))
        attributes.set("inStock", in_stock)

    def _add_flags(self, product: ProductRecord, attributes: AttributeContext) -> None:
        product_id = product.product_id
        try:
            is_virtual = self.variants.is_virtual(product_id)
            is_variant = self.variants.is_variant(product_id)
        except Exception as e:
            raise StorageError(
                message=f"Variant relation lookup failed for product {product_id}: {e}",
                product_id=product_id,
                entity="ProductAssoc",
                original_exception=e,
            )
        for name, flag in (
            ("isVirtual", is_virtual),
            ("isVariant", is_variant),
            ("isDigital", product.is_digital),
            ("isPhysical", product.is_physical),
        ):
            if flag:
                attributes.set(name, True)

    def _add_localized_content(self, product: ProductRecord, attributes: AttributeContext) -> None:
        product_id = product.product_id
        try:
            locales = self.content.active_locales(self.product_store_id)
        except Exception as e:
            raise CollaboratorError(
                message=f"Active locale lookup failed for store {self.product_store_id}: {e}",
                collaborator="locale",
                operation="active_locales",
                product_id=product_id,
                original_exception=e,
            )
        try:
            content = self.content.resolve_all(product, locales)
        except Exception as e:
            raise CollaboratorError(
                message=f"Localized content lookup failed for product {product_id}: {e}",
                collaborator="localizer",
                operation="text",
                product_id=product_id,
                original_exception=e,
            )
        for kind, content_map in content.items():
            attributes.set(kind.attribute_name, content_map)

    def _add_prices(
        self,
        product: ProductRecord,
        context: RequestContext,
        attributes: AttributeContext,
    ) -> None:
        price = self.prices.resolve_price(product, context)
        if price.list_price is not None:
            attributes.set("listPrice", str(price.list_price))
        if price.default_price is not None:
            attributes.set("defaultPrice", str(price.default_price))
