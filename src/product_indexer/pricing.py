"""
Price resolution for product documents.

Aggregated products are priced by configuring their default components;
every other product goes through the generic price calculation. Both paths
round to two places with ROUND_HALF_DOWN, matching the stored prices that
search queries compare against.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_DOWN, Decimal
from typing import Any, Optional, Union

from product_indexer.collaborators import (
    AggregatedPriceCollaborator,
    LocaleConfiguration,
    SimplePriceCollaborator,
)
from product_indexer.exceptions import CollaboratorError
from product_indexer.models import PriceResult, ProductRecord, ProductTypes, RequestContext

PRICE_SCALE = Decimal("0.01")

# Request fields forwarded to the price calculation when present.
STANDARD_CONTEXT_FIELDS = ("userLogin", "locale", "timeZone")


def round_price(value: Union[Decimal, float, int, str, None]) -> Optional[Decimal]:
    """Round a price to 2 places, ties toward zero. None passes through."""
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(PRICE_SCALE, rounding=ROUND_HALF_DOWN)


@dataclass(frozen=True)
class AggregatedPricing:
    """Price from the default configuration of an aggregated product."""
    currency: Optional[str]
    locale: str
    principal: Any = None


@dataclass(frozen=True)
class SimplePricing:
    """Price from the generic price calculation."""
    currency: Optional[str]
    passthrough: tuple[tuple[str, Any], ...] = ()


PricingStrategy = Union[AggregatedPricing, SimplePricing]


class PriceResolver:
    """Computes list and default price of a product."""

    def __init__(
        self,
        aggregated: AggregatedPriceCollaborator,
        simple: SimplePriceCollaborator,
        locales: LocaleConfiguration,
        currency_uom_id: Optional[str] = None,
        product_store_id: Optional[str] = None,
        aggregated_product_types: frozenset[str] = frozenset({ProductTypes.AGGREGATED}),
    ):
        self.aggregated = aggregated
        self.simple = simple
        self.locales = locales
        self.currency_uom_id = currency_uom_id
        self.product_store_id = product_store_id
        self.aggregated_product_types = aggregated_product_types

    def pricing_strategy_for(
        self,
        product: ProductRecord,
        context: Optional[RequestContext] = None,
    ) -> PricingStrategy:
        context = context or {}
        if product.product_type_id in self.aggregated_product_types:
            try:
                locale = self.locales.default_price_locale(self.product_store_id)
            except Exception as e:
                raise CollaboratorError(
                    message=f"Price locale lookup failed for store {self.product_store_id}: {e}",
                    collaborator="locale",
                    operation="default_price_locale",
                    product_id=product.product_id,
                    original_exception=e,
                )
            return AggregatedPricing(
                currency=self.currency_uom_id,
                locale=locale,
                principal=context.get("userLogin"),
            )
        return SimplePricing(
            currency=self.currency_uom_id,
            passthrough=tuple(
                (name, context[name])
                for name in STANDARD_CONTEXT_FIELDS
                if context.get(name) is not None
            ),
        )

    def resolve_price(
        self,
        product: ProductRecord,
        context: Optional[RequestContext] = None,
    ) -> PriceResult:
        strategy = self.pricing_strategy_for(product, context)
        match strategy:
            case AggregatedPricing():
                return self._aggregated_price(product, strategy)
            case SimplePricing():
                return self._simple_price(product, strategy)
        raise TypeError(f"Unsupported pricing strategy: {strategy!r}")

    def _aggregated_price(
        self,
        product: ProductRecord,
        strategy: AggregatedPricing,
    ) -> PriceResult:
        try:
            configurator = self.aggregated.configure(
                product, strategy.currency, strategy.locale, strategy.principal
            )
            # Without default selections every component prices at zero.
            configurator.set_defaults()
            list_price = round_price(configurator.total_list_price())
            default_price = round_price(configurator.total_price())
            had_original = configurator.had_original_list_price()
        except Exception as e:
            raise CollaboratorError(
                message=f"Aggregated price configuration failed for {product.product_id}: {e}",
                collaborator="aggregated_price",
                operation="configure",
                product_id=product.product_id,
                original_exception=e,
            )

        # A zero total list price means "no list price" unless one existed
        # before discounts.
        if list_price is not None and list_price.is_zero() and not had_original:
            list_price = None
        return PriceResult(list_price=list_price, default_price=default_price)

    def _simple_price(self, product: ProductRecord, strategy: SimplePricing) -> PriceResult:
        try:
            prices = self.simple.calculate(
                product, strategy.currency, **dict(strategy.passthrough)
            ) or {}
            return PriceResult(
                list_price=round_price(prices.get("listPrice")),
                default_price=round_price(prices.get("defaultPrice")),
            )
        except Exception as e:
            raise CollaboratorError(
                message=f"Price calculation failed for {product.product_id}: {e}",
                collaborator="simple_price",
                operation="calculate",
                product_id=product.product_id,
                original_exception=e,
            )
