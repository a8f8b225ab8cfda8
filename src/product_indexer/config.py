"""
Configuration for the product indexer.
Values come from PRODUCT_INDEXER_* environment variables with safe defaults.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from product_indexer.exceptions import ConfigurationError
from product_indexer.models import ContentKind, ProductTypes

ENV_PREFIX = "PRODUCT_INDEXER_"

SCHEMA_INTERFACE_NAME = "solrProductAttributesSimple"


class IndexerSettings(BaseModel):
    """Settings shared by every component of the pipeline."""

    log_level: str = "INFO"
    log_format: str = "text"
    service_name: str = "product-indexer"

    schema_interface_name: str = SCHEMA_INTERFACE_NAME
    currency_uom_id: Optional[str] = None
    product_store_id: Optional[str] = None
    aggregated_product_types: frozenset[str] = frozenset({ProductTypes.AGGREGATED})

    # Document field receiving the non-localized value of a content kind.
    default_content_fields: dict[ContentKind, str] = Field(default_factory=dict)

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("text", "json"):
            raise ValueError(f"log_format must be 'text' or 'json', got {value!r}")
        return value

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "IndexerSettings":
        """
        Build settings from environment variables.

        Recognized variables (all prefixed with PRODUCT_INDEXER_):
            LOG_LEVEL, LOG_FORMAT, SERVICE_NAME, SCHEMA_INTERFACE,
            CURRENCY_UOM_ID, PRODUCT_STORE_ID, AGGREGATED_TYPES (comma separated),
            DEFAULT_TITLE_FIELD, DEFAULT_DESCRIPTION_FIELD,
            DEFAULT_LONG_DESCRIPTION_FIELD

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ

        def read(key: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + key)
            if value is None:
                return None
            return value.strip() or None

        values: dict = {}
        for key, attr in (
            ("LOG_LEVEL", "log_level"),
            ("LOG_FORMAT", "log_format"),
            ("SERVICE_NAME", "service_name"),
            ("SCHEMA_INTERFACE", "schema_interface_name"),
            ("CURRENCY_UOM_ID", "currency_uom_id"),
            ("PRODUCT_STORE_ID", "product_store_id"),
        ):
            value = read(key)
            if value is not None:
                values[attr] = value

        aggregated = read("AGGREGATED_TYPES")
        if aggregated:
            values["aggregated_product_types"] = frozenset(
                part.strip() for part in aggregated.split(",") if part.strip()
            )

        default_fields = {}
        for key, kind in (
            ("DEFAULT_TITLE_FIELD", ContentKind.PRODUCT_NAME),
            ("DEFAULT_DESCRIPTION_FIELD", ContentKind.DESCRIPTION),
            ("DEFAULT_LONG_DESCRIPTION_FIELD", ContentKind.LONG_DESCRIPTION),
        ):
            value = read(key)
            if value:
                default_fields[kind] = value
        if default_fields:
            values["default_content_fields"] = default_fields

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(
                message=f"Invalid indexer configuration: {e}",
                config_key=ENV_PREFIX + "*",
                original_exception=e,
            )
