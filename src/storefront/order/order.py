"""Order aggregate: an immutable record of what was bought, at what price.

Line items, amounts and the shipping address are captured when the order is
placed and never edited afterwards. Only ``status`` and ``payment_status``
move once the order exists.

Status flow:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED → RETURNED
    PENDING / CONFIRMED / PROCESSING → CANCELLED
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.checkout.pricing import line_total
from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderStatusChanged, PaymentStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.RETURNED: set(),  # Terminal
}

_VALID_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
}


@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, copied from the address book at checkout.

    Later edits to the customer's addresses do not reach placed orders.
    """

    name = String(required=True, max_length=100)
    phone = String(required=True, max_length=20)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    product_name = String(max_length=255)
    size = String(max_length=20)
    color = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)


@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    order_number = String(required=True, max_length=50, unique=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_method = String(required=True, max_length=20)
    payment_id = String(max_length=255)
    coupon_code = String(max_length=50)
    notes = Text()
    total_amount = Float(required=True, min_value=0.0)
    discount_amount = Float(default=0.0)
    shipping_amount = Float(default=0.0)
    shipping_address = ValueObject(ShippingAddress, required=True)
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

    @classmethod
    def place(cls, user_id, order_number, lines, quote, shipping_address, payment_method, notes=None):
        """Record a new order.

        ``lines`` are dicts carrying product/variant ids, quantity and the
        frozen ``unit_price``; ``quote`` is the ``PriceQuote`` for them.
        """
        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            order_number=order_number,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            payment_method=payment_method,
            notes=notes,
            total_amount=quote.total_amount,
            discount_amount=quote.discount_amount,
            shipping_amount=quote.shipping_amount,
            shipping_address=shipping_address,
            items=[
                OrderItem(
                    product_id=line["product_id"],
                    variant_id=line["variant_id"],
                    product_name=line.get("product_name"),
                    size=line.get("size"),
                    color=line.get("color"),
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                    total_price=line_total(line["unit_price"], line["quantity"]),
                )
                for line in lines
            ],
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                user_id=str(user_id),
                item_count=len(order.items),
                total_amount=order.total_amount,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    @property
    def subtotal(self) -> float:
        return round(sum(item.total_price for item in self.items), 2)

    def transition_to(self, new_status):
        target = OrderStatus(new_status)
        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def record_payment_status(self, new_status, payment_id=None):
        target = PaymentStatus(new_status)
        current = PaymentStatus(self.payment_status)
        if target not in _VALID_PAYMENT_TRANSITIONS.get(current, set()):
            raise ValidationError(
                {"payment_status": [f"Cannot move payment from {current.value} to {target.value}"]}
            )

        self.payment_status = target.value
        if payment_id:
            self.payment_id = payment_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                payment_id=payment_id,
            )
        )
