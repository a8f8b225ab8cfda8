"""
Per-locale text of product names and descriptions.
"""

from typing import Optional, Sequence

from product_indexer.collaborators import ContentLocalizer, LocaleConfiguration
from product_indexer.models import (
    DEFAULT_CONTENT_KEY,
    ContentKind,
    LocalizedContentMap,
    ProductRecord,
)


class LocalizedContentResolver:
    """Builds locale -> text maps for the textual content kinds."""

    def __init__(self, localizer: ContentLocalizer, locales: LocaleConfiguration):
        self.localizer = localizer
        self.locales = locales

    def active_locales(self, product_store_id: Optional[str] = None) -> list[str]:
        return [str(locale) for locale in self.locales.active_locales(product_store_id)]

    def resolve_localized_map(
        self,
        product: ProductRecord,
        content_kind: ContentKind,
        default_value: Optional[str],
        active_locales: Sequence[str],
    ) -> LocalizedContentMap:
        """
        Map every active locale to its text, plus the raw value under "default".

        A locale without a localized override gets the raw value too, so a
        missing translation is indistinguishable from one equal to the raw
        text.
        """
        content: LocalizedContentMap = {DEFAULT_CONTENT_KEY: default_value}
        for locale in active_locales:
            value = self.localizer.text(product, content_kind, locale)
            content[str(locale)] = value if value is not None else default_value
        return content

    def resolve_all(
        self,
        product: ProductRecord,
        active_locales: Sequence[str],
    ) -> dict[ContentKind, LocalizedContentMap]:
        return {
            kind: self.resolve_localized_map(
                product, kind, product.get(kind.storage_field), active_locales
            )
            for kind in ContentKind
        }
