"""
Product to search-document pipeline.
Wires the resolvers together and turns product records into documents.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from product_indexer.assembler import DocumentAssembler
from product_indexer.category_trails import CategoryTrailResolver
from product_indexer.collaborators import (
    AggregatedPriceCollaborator,
    CatalogMembership,
    CategoryHierarchy,
    ContentLocalizer,
    FeatureSetProvider,
    InterfaceDescriptorLookup,
    InventoryProvider,
    LocaleConfiguration,
    SimplePriceCollaborator,
    VariantRelations,
)
from product_indexer.config import IndexerSettings
from product_indexer.content import ProductContentBuilder
from product_indexer.field_names import FieldNameTranslator
from product_indexer.localized_content import LocalizedContentResolver
from product_indexer.logging_config import batch_context, log_execution_time
from product_indexer.models import Document, ProductRecord, RequestContext
from product_indexer.pricing import PriceResolver
from product_indexer.schema_registry import SchemaFieldRegistry

logger = logging.getLogger(__name__)


@dataclass
class IndexingResult:
    """Result of transforming a batch of products."""
    documents: list[Document] = field(default_factory=list)
    partial: list[dict] = field(default_factory=list)
    batch_id: Optional[str] = None

    @property
    def document_count(self) -> int:
        return len(self.documents)

    @property
    def partial_count(self) -> int:
        return len(self.partial)

    def to_dict(self) -> dict:
        return {
            "batch_id": self.batch_id,
            "document_count": self.document_count,
            "partial_count": self.partial_count,
            "partial_product_ids": [p.get("product_id") for p in self.partial],
        }


class ProductDocumentPipeline:
    """
    Transforms product records into search documents.

    One synchronous call per product. A failing lookup never raises to the
    caller: the document is built from whatever was collected before it.
    """

    def __init__(self, builder: ProductContentBuilder, assembler: DocumentAssembler):
        self.builder = builder
        self.assembler = assembler

    def transform(
        self,
        product: ProductRecord,
        context: Optional[RequestContext] = None,
    ) -> Document:
        attributes = self.builder.build(product, context)
        return self.assembler.assemble(attributes)

    def transform_batch(
        self,
        products: Iterable[ProductRecord],
        context: Optional[RequestContext] = None,
        batch_id: Optional[str] = None,
    ) -> IndexingResult:
        """
        Transform every product of a batch.

        Products whose enrichment was cut short still yield a document and
        are listed in ``partial`` with their errors. Log records and errors
        raised while the batch runs carry its batch and correlation ids; the
        caller's ids are restored afterwards.
        """
        with batch_context(batch_id) as bound_batch_id:
            return self._transform_all(products, context, bound_batch_id)

    @log_execution_time(logger)
    def _transform_all(
        self,
        products: Iterable[ProductRecord],
        context: Optional[RequestContext],
        batch_id: str,
    ) -> IndexingResult:
        result = IndexingResult(batch_id=batch_id)

        for product in products:
            attributes = self.builder.build(product, context)
            result.documents.append(self.assembler.assemble(attributes))
            if attributes.is_partial:
                result.partial.append({
                    "product_id": product.product_id,
                    "errors": [e.to_dict() for e in attributes.errors],
                })

        logger.info(
            "Batch transformation complete",
            extra={"metrics": result.to_dict()},
        )
        return result


def build_pipeline(
    *,
    hierarchy: CategoryHierarchy,
    catalogs: CatalogMembership,
    features: FeatureSetProvider,
    inventory: InventoryProvider,
    variants: VariantRelations,
    aggregated_prices: AggregatedPriceCollaborator,
    simple_prices: SimplePriceCollaborator,
    locales: LocaleConfiguration,
    localizer: ContentLocalizer,
    descriptor_lookup: InterfaceDescriptorLookup,
    settings: Optional[IndexerSettings] = None,
    registry: Optional[SchemaFieldRegistry] = None,
    translator: Optional[FieldNameTranslator] = None,
) -> ProductDocumentPipeline:
    """
    Build a pipeline from its collaborators.

    Pass a shared ``registry`` when several pipelines run in one process so
    the permitted field list is resolved once.
    """
    settings = settings or IndexerSettings()
    registry = registry or SchemaFieldRegistry(
        descriptor_lookup, settings.schema_interface_name
    )
    translator = translator or FieldNameTranslator()

    builder = ProductContentBuilder(
        trails=CategoryTrailResolver(hierarchy, catalogs),
        prices=PriceResolver(
            aggregated_prices,
            simple_prices,
            locales,
            currency_uom_id=settings.currency_uom_id,
            product_store_id=settings.product_store_id,
            aggregated_product_types=settings.aggregated_product_types,
        ),
        content=LocalizedContentResolver(localizer, locales),
        features=features,
        inventory=inventory,
        variants=variants,
        product_store_id=settings.product_store_id,
    )
    assembler = DocumentAssembler(
        registry, translator, settings.default_content_fields
    )
    return ProductDocumentPipeline(builder, assembler)
