"""
Registry of the simple fields permitted in a product document.

The field names are the declared input parameters of a service interface,
read once through the interface descriptor lookup and cached for the life of
the process.
"""

import logging
import threading
from typing import Optional

from product_indexer.collaborators import InterfaceDescriptorLookup
from product_indexer.config import SCHEMA_INTERFACE_NAME
from product_indexer.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class SchemaFieldRegistry:
    """
    Lazily computed, process-wide list of permitted simple document fields.

    Safe to share between indexing worker threads. The lock is held only
    while the list is first computed; afterwards reads take the cached tuple
    without locking.
    """

    def __init__(
        self,
        descriptor_lookup: InterfaceDescriptorLookup,
        interface_name: str = SCHEMA_INTERFACE_NAME,
    ):
        self.descriptor_lookup = descriptor_lookup
        self.interface_name = interface_name
        self._fields: Optional[tuple[str, ...]] = None
        self._lock = threading.Lock()
        self.last_error: Optional[ConfigurationError] = None

    def list_permitted_fields(self) -> tuple[str, ...]:
        fields = self._fields
        if fields is None:
            with self._lock:
                fields = self._fields
                if fields is None:
                    fields = self._compute()
                    self._fields = fields
        return fields

    def reset(self) -> None:
        """Drop the cached field list so the next call recomputes it."""
        with self._lock:
            self._fields = None
            self.last_error = None

    def _compute(self) -> tuple[str, ...]:
        try:
            declared = self.descriptor_lookup.declared_input_fields(
                self.interface_name, include_internal=False
            )
            fields = tuple(dict.fromkeys(declared))
        except Exception as e:
            self.last_error = ConfigurationError(
                message=f"Could not resolve the {self.interface_name} interface: {e}",
                config_key=self.interface_name,
                original_exception=e,
            )
            # Documents get no simple fields until the interface is fixed.
            logger.critical(
                f"Fatal: could not find the {self.interface_name} service interface; "
                f"product documents will have no simple fields: {e}",
                extra={"error": self.last_error.to_dict()},
            )
            return ()

        logger.debug(f"Permitted simple product fields: {list(fields)}")
        return fields
