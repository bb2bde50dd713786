"""Order placement workflow.

One ``OrderPlacement`` drives one attempt through its stages:

    IDLE → VALIDATING → RESERVING_STOCK → PERSISTING_ORDER → COMPLETE
                                                            ↘ FAILED

Validation performs no writes, so every rejection it raises leaves the store
untouched. Stock is then taken variant by variant with a conditional
decrement, each success recording a restock compensation. The order header
and its items go to the store together as one aggregate. If anything fails
after the first write, the compensations run in reverse before the failure
is reported.
"""

import json
from dataclasses import dataclass, field
from enum import Enum

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.queries import resolve_variant
from storefront.catalogue.stock import restock_variant, withdraw_stock
from storefront.checkout.pricing import PriceQuote, line_total, quote, unit_price
from storefront.checkout.saga import Compensations
from storefront.errors import (
    EmptyOrder,
    InsufficientStock,
    NoDefaultAddress,
    NotAuthenticated,
    PersistenceFailure,
    StorefrontError,
)
from storefront.order.creation import PlaceOrder

logger = structlog.get_logger(__name__)

ADD_ADDRESS_NOTICE = "Please add a delivery address first"


class Stage(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    RESERVING_STOCK = "reserving_stock"
    PERSISTING_ORDER = "persisting_order"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    variant_id: str
    quantity: int = 1


@dataclass(frozen=True)
class PlaceOrderRequest:
    user_id: str | None
    lines: tuple[OrderLine, ...]
    shipping_address: dict | None
    payment_method: str
    notes: str | None = None


@dataclass(frozen=True)
class PlacedOrder:
    order_id: str
    order_number: str
    subtotal: float
    shipping_amount: float
    total_amount: float


@dataclass(frozen=True)
class _PricedLine:
    line: OrderLine
    product_name: str
    size: str
    color: str
    unit_price: float

    def as_dict(self) -> dict:
        return {
            "product_id": str(self.line.product_id),
            "variant_id": str(self.line.variant_id),
            "product_name": self.product_name,
            "size": self.size,
            "color": self.color,
            "quantity": self.line.quantity,
            "unit_price": self.unit_price,
        }


def address_snapshot(address) -> dict:
    """Copy the fields of an address-book entry an order ships to."""
    return {
        "name": address.full_name,
        "phone": address.phone,
        "address_line1": address.address_line1,
        "address_line2": address.address_line2,
        "city": address.city,
        "state": address.state,
        "postal_code": address.postal_code,
        "country": address.country or "India",
    }


@dataclass
class OrderPlacement:
    request: PlaceOrderRequest
    stage: Stage = Stage.IDLE
    compensations: Compensations = field(default_factory=Compensations)

    def run(self) -> PlacedOrder:
        log = logger.bind(user_id=self.request.user_id, line_count=len(self.request.lines))
        try:
            self._enter(Stage.VALIDATING)
            priced = self._validate()

            self._enter(Stage.RESERVING_STOCK)
            self._reserve_stock(priced)

            self._enter(Stage.PERSISTING_ORDER)
            placed = self._persist(priced)
        except StorefrontError as exc:
            self._fail(log, exc)
            raise
        except Exception as exc:
            failed_stage = self.stage
            self._fail(log, exc)
            if failed_stage is Stage.VALIDATING:
                raise
            raise PersistenceFailure(stage=failed_stage.value) from exc

        self.compensations.discard()
        self._enter(Stage.COMPLETE)
        log.info(
            "Order placed successfully!",
            order_id=placed.order_id,
            order_number=placed.order_number,
            total_amount=placed.total_amount,
        )
        return placed

    def _enter(self, stage: Stage) -> None:
        logger.debug("Order placement stage", stage=stage.value, previous=self.stage.value)
        self.stage = stage

    def _fail(self, log, exc) -> None:
        failed_stage = self.stage
        self.stage = Stage.FAILED
        run, failed = self.compensations.unwind()
        log.warning(
            "Order placement failed",
            stage=failed_stage.value,
            error=type(exc).__name__,
            detail=str(exc),
            compensations_run=run,
            compensations_failed=failed,
        )

    def _validate(self) -> list[_PricedLine]:
        request = self.request
        if not request.user_id:
            raise NotAuthenticated()
        if not request.lines:
            raise EmptyOrder()
        if not request.shipping_address:
            raise NoDefaultAddress(ADD_ADDRESS_NOTICE)

        priced = []
        for line in request.lines:
            if line.quantity < 1:
                raise ValidationError({"quantity": ["Quantity must be at least 1"]})

            product, variant = resolve_variant(line.product_id, line.variant_id)
            if variant.stock_quantity < line.quantity:
                raise InsufficientStock(
                    variant_id=str(line.variant_id),
                    available=variant.stock_quantity,
                    requested=line.quantity,
                )
            priced.append(
                _PricedLine(
                    line=line,
                    product_name=product.name,
                    size=variant.size,
                    color=variant.color,
                    unit_price=unit_price(product, variant),
                )
            )
        return priced

    def _reserve_stock(self, priced: list[_PricedLine]) -> None:
        for item in priced:
            line = item.line
            try:
                withdraw_stock(line.product_id, line.variant_id, line.quantity)
            except ValidationError as exc:
                # Another purchase took the stock between validation and now
                raise InsufficientStock(variant_id=str(line.variant_id), requested=line.quantity) from exc

            self.compensations.record(
                f"restock {line.variant_id} x{line.quantity}",
                lambda line=line: restock_variant(line.product_id, line.variant_id, line.quantity),
            )

    def _persist(self, priced: list[_PricedLine]) -> PlacedOrder:
        price_quote: PriceQuote = quote(line_total(p.unit_price, p.line.quantity) for p in priced)
        result = current_domain.process(
            PlaceOrder(
                user_id=self.request.user_id,
                items=json.dumps([p.as_dict() for p in priced]),
                shipping_address=json.dumps(self.request.shipping_address),
                payment_method=self.request.payment_method,
                notes=self.request.notes,
            ),
            asynchronous=False,
        )
        return PlacedOrder(
            order_id=result["order_id"],
            order_number=result["order_number"],
            subtotal=price_quote.subtotal,
            shipping_amount=price_quote.shipping_amount,
            total_amount=price_quote.total_amount,
        )
