"""
Assembly of a search document from an attribute context.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from product_indexer.collaborators import DocumentSink
from product_indexer.field_names import FieldNameTranslator
from product_indexer.models import (
    DEFAULT_CONTENT_KEY,
    AttributeContext,
    ContentKind,
    Document,
)
from product_indexer.schema_registry import SchemaFieldRegistry

logger = logging.getLogger(__name__)

# Attribute name -> document field for multi-valued attributes.
MULTI_VALUED_FIELDS = (
    ("catalog", "catalog"),
    ("category", "cat"),
    ("features", "features"),
    ("attributes", "attributes"),
)


def to_field_value(value: Any) -> str:
    """String form of a simple attribute value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class DocumentAssembler:
    """
    Combines an attribute context into one document.

    Simple fields are limited to those the schema registry permits;
    multi-valued and localized attributes are written under fixed names.
    """

    def __init__(
        self,
        registry: SchemaFieldRegistry,
        translator: FieldNameTranslator,
        default_content_fields: Optional[Mapping[ContentKind, str]] = None,
    ):
        self.registry = registry
        self.translator = translator
        self.default_content_fields = dict(default_content_fields or {})

    def assemble(self, attributes: AttributeContext) -> Document:
        doc = Document()
        self.write(attributes, doc)
        logger.debug(
            f"Assembled document with {len(doc)} fields",
            extra={"product_id": attributes.product_id},
        )
        return doc

    def write(self, attributes: AttributeContext, sink: DocumentSink) -> None:
        """
        Write the document fields of ``attributes`` into ``sink``.

        Lets a caller fill its search engine's own document type directly;
        ``assemble`` does the same into a fresh ``Document``.
        """
        for name in self.registry.list_permitted_fields():
            value = attributes.get(name)
            if value is not None:
                sink.add_field(name, to_field_value(value))

        for attribute_name, field_name in MULTI_VALUED_FIELDS:
            self._add_values(sink, field_name, attributes.get(attribute_name))

        for kind in ContentKind:
            self._add_localized(
                sink,
                self.translator.localized_prefix(kind),
                self.default_content_fields.get(kind),
                attributes.get(kind.attribute_name),
            )

    @staticmethod
    def _add_values(sink: DocumentSink, field_name: str, values: Optional[Iterable[Any]]) -> None:
        if not values:
            return
        for value in values:
            sink.add_field(field_name, str(value))

    @staticmethod
    def _add_localized(
        sink: DocumentSink,
        prefix: str,
        default_field: Optional[str],
        content: Optional[Mapping[str, Optional[str]]],
    ) -> None:
        if not content:
            return
        for key, value in content.items():
            if value is None:
                continue
            if key == DEFAULT_CONTENT_KEY:
                if default_field is not None:
                    sink.add_field(default_field, value)
            else:
                sink.add_field(prefix + key, value)
