"""
Data models for the product search-document pipeline.
Products and prices are pydantic models; the attribute context and the
output document are small mutable containers rebuilt for every product.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from product_indexer.exceptions import IndexingError

DEFAULT_CONTENT_KEY = "default"

LocalizedContentMap = dict[str, Optional[str]]
RequestContext = dict[str, Any]


class ContentKind(Enum):
    """Textual product content that is indexed once per locale."""
    PRODUCT_NAME = "PRODUCT_NAME"
    DESCRIPTION = "DESCRIPTION"
    LONG_DESCRIPTION = "LONG_DESCRIPTION"

    @property
    def storage_field(self) -> str:
        return _CONTENT_STORAGE_FIELDS[self]

    @property
    def attribute_name(self) -> str:
        return _CONTENT_ATTRIBUTE_NAMES[self]


_CONTENT_STORAGE_FIELDS = {
    ContentKind.PRODUCT_NAME: "productName",
    ContentKind.DESCRIPTION: "description",
    ContentKind.LONG_DESCRIPTION: "longDescription",
}

_CONTENT_ATTRIBUTE_NAMES = {
    ContentKind.PRODUCT_NAME: "title",
    ContentKind.DESCRIPTION: "description",
    ContentKind.LONG_DESCRIPTION: "longDescription",
}


class ProductTypes:
    """Product type tags the pipeline interprets."""
    AGGREGATED = "AGGREGATED"
    DIGITAL_GOOD = "DIGITAL_GOOD"
    FINDIG_GOOD = "FINDIG_GOOD"
    SERVICE = "SERVICE"

    DIGITAL = frozenset({DIGITAL_GOOD, FINDIG_GOOD})
    NON_PHYSICAL = frozenset({DIGITAL_GOOD, SERVICE})


class ProductRecord(BaseModel):
    """
    Normalized product as read from storage.
    Read-only to the pipeline.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: str = Field(..., alias="productId")
    product_type_id: Optional[str] = Field(None, alias="productTypeId")
    field_values: dict[str, Any] = Field(default_factory=dict, alias="fields")

    def get(self, name: str, default: Any = None) -> Any:
        """Return a named scalar field of the record."""
        if name == "productId":
            return self.product_id
        if name == "productTypeId":
            return self.product_type_id
        return self.field_values.get(name, default)

    @property
    def is_digital(self) -> bool:
        return self.product_type_id in ProductTypes.DIGITAL

    @property
    def is_physical(self) -> bool:
        return self.product_type_id not in ProductTypes.NON_PHYSICAL


class PriceResult(BaseModel):
    """List and default price of a product, already rounded."""
    list_price: Optional[Decimal] = None
    default_price: Optional[Decimal] = None


class AttributeContext:
    """
    Attribute name to value mapping handed from enrichment to assembly.

    Values are scalars, collections of scalars, or localized content maps.
    Errors that cut enrichment short are kept alongside so the caller can
    tell a partial context from a complete one.
    """

    def __init__(self, product_id: Optional[str] = None):
        self.product_id = product_id
        self._values: dict[str, Any] = {}
        self.errors: list[IndexingError] = []

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    @property
    def is_partial(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)


FieldValue = Union[str, list[str]]


class Document:
    """
    Search document with multi-valued fields.
    Adding a field that already exists appends another value.
    """

    def __init__(self):
        self._fields: dict[str, list[Any]] = {}

    def add_field(self, name: str, value: Any) -> None:
        self._fields.setdefault(name, []).append(value)

    def get_values(self, name: str) -> list[Any]:
        return list(self._fields.get(name, []))

    def get_first(self, name: str, default: Any = None) -> Any:
        values = self._fields.get(name)
        return values[0] if values else default

    @property
    def field_names(self) -> list[str]:
        return list(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def to_dict(self) -> dict[str, FieldValue]:
        """Single-valued fields as scalars, repeated fields as lists."""
        return {
            name: values[0] if len(values) == 1 else list(values)
            for name, values in self._fields.items()
        }

    def __repr__(self) -> str:
        return f"Document({self.to_dict()!r})"
