"""
Product Indexer - product records to multi-locale search documents.

This package builds one search document per product from the product
record and its category, catalog, inventory, pricing and localized content
collaborators.
"""

from product_indexer.assembler import DocumentAssembler
from product_indexer.category_trails import CategoryTrailResolver
from product_indexer.config import IndexerSettings
from product_indexer.content import ProductContentBuilder
from product_indexer.exceptions import (
    CollaboratorError,
    ConfigurationError,
    IndexingError,
    StorageError,
)
from product_indexer.field_names import FieldNameTranslator
from product_indexer.localized_content import LocalizedContentResolver
from product_indexer.models import (
    AttributeContext,
    ContentKind,
    Document,
    PriceResult,
    ProductRecord,
)
from product_indexer.pipeline import IndexingResult, ProductDocumentPipeline, build_pipeline
from product_indexer.pricing import PriceResolver
from product_indexer.schema_registry import SchemaFieldRegistry

__all__ = [
    "AttributeContext",
    "CategoryTrailResolver",
    "CollaboratorError",
    "ConfigurationError",
    "ContentKind",
    "Document",
    "DocumentAssembler",
    "FieldNameTranslator",
    "IndexerSettings",
    "IndexingError",
    "IndexingResult",
    "LocalizedContentResolver",
    "PriceResolver",
    "PriceResult",
    "ProductContentBuilder",
    "ProductDocumentPipeline",
    "ProductRecord",
    "SchemaFieldRegistry",
    "StorageError",
    "build_pipeline",
]

__version__ = "1.0.0"
