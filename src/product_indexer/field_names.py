"""
Mapping between product storage field names and search document field names.
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from product_indexer.models import ContentKind

logger = logging.getLogger(__name__)

LIST_PRICE_TYPE = "LIST_PRICE"
DEFAULT_PRICE_TYPE = "DEFAULT_PRICE"

LIST_PRICE_FIELD = "listPrice"
DEFAULT_PRICE_FIELD = "defaultPrice"

NAME_SORT_FIELD = "alphaNameSort"
TITLE_SORT_PREFIX = "alphaTitleSort_"

LOCALIZED_PREFIXES = MappingProxyType({
    ContentKind.PRODUCT_NAME: "title_i18n_",
    ContentKind.DESCRIPTION: "description_i18n_",
    ContentKind.LONG_DESCRIPTION: "longdescription_i18n_",
})

# Storage field -> document field. Not every storage field has a document
# counterpart; prices are not storage fields at all.
DEFAULT_FIELD_TABLE: Mapping[str, str] = MappingProxyType({
    "productId": "productId",
    "internalName": "internalName",
    "smallImageUrl": "smallImageUrl",
    "mediumImage": "mediumImage",
    "largeImage": "largeImage",
    "inStock": "inStock",
    "isVirtual": "isVirtual",
    "isVariant": "isVariant",
})


class FieldNameTranslator:
    """
    Translates field names between the storage and document domains.

    The table is indexed both ways once, at construction. Storage values must
    be unique; for a duplicated value the reverse index keeps the last key.
    """

    def __init__(self, field_table: Mapping[str, str] = DEFAULT_FIELD_TABLE):
        self._to_document = MappingProxyType(dict(field_table))
        self._to_storage = MappingProxyType(
            {document: storage for storage, document in field_table.items()}
        )
        self._storage_to_kind = {kind.storage_field: kind for kind in ContentKind}

    @property
    def field_table(self) -> Mapping[str, str]:
        return self._to_document

    def to_document_field(
        self,
        storage_field: Optional[str],
        locale: Optional[str] = None,
    ) -> Optional[str]:
        """
        Document field for a storage field.

        Localized content fields need a locale and yield
        ``<prefix>_i18n_<locale>``; other fields come from the table.
        """
        if storage_field is None:
            return None
        kind = self._storage_to_kind.get(storage_field)
        if kind is not None:
            if locale is None:
                return None
            return LOCALIZED_PREFIXES[kind] + str(locale)
        return self._to_document.get(storage_field)

    def to_storage_field(self, document_field: Optional[str]) -> Optional[str]:
        """Storage field for a document field, ignoring any locale suffix."""
        if document_field is None:
            return None
        for kind, prefix in LOCALIZED_PREFIXES.items():
            if document_field.startswith(prefix):
                return kind.storage_field
        return self._to_storage.get(document_field)

    def to_sort_field(self, document_field: Optional[str]) -> Optional[str]:
        if document_field is None:
            return None
        if document_field == "internalName":
            return NAME_SORT_FIELD
        title_prefix = LOCALIZED_PREFIXES[ContentKind.PRODUCT_NAME]
        if document_field.startswith(title_prefix):
            return TITLE_SORT_PREFIX + document_field[len(title_prefix):]
        return document_field

    def to_price_field(self, price_type_id: Optional[str], log_prefix: str = "") -> str:
        """
        Document price field for a product price type.

        Only list and default prices are indexed; any other type degrades to
        the default price with a warning.
        """
        if price_type_id == LIST_PRICE_TYPE:
            return LIST_PRICE_FIELD
        if price_type_id != DEFAULT_PRICE_TYPE:
            logger.warning(
                f"{log_prefix}Requested sort price type '{price_type_id}' is not "
                f"supported in the product document schema; using "
                f"{DEFAULT_PRICE_FIELD} ({DEFAULT_PRICE_TYPE}) instead"
            )
        return DEFAULT_PRICE_FIELD

    def localized_prefix(self, content_kind: ContentKind) -> str:
        return LOCALIZED_PREFIXES[content_kind]

    def localized_field(self, content_kind: ContentKind, locale: str) -> str:
        return LOCALIZED_PREFIXES[content_kind] + str(locale)
