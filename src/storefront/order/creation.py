"""Order creation: command and handler.

The header and its line items are written as one aggregate, so an order can
never be stored without its items.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.checkout.pricing import line_total, quote
from storefront.domain import storefront
from storefront.order.numbers import unique_order_number
from storefront.order.order import Order, ShippingAddress
from storefront.order.queries import order_number_exists


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of priced line dicts
    shipping_address = Text(required=True)  # JSON: address snapshot dict
    payment_method = String(required=True, max_length=20)
    notes = Text()


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = json.loads(command.items)
        price_quote = quote(line_total(line["unit_price"], line["quantity"]) for line in lines)

        order = Order.place(
            user_id=command.user_id,
            order_number=unique_order_number(order_number_exists),
            lines=lines,
            quote=price_quote,
            shipping_address=ShippingAddress(**json.loads(command.shipping_address)),
            payment_method=command.payment_method,
            notes=command.notes,
        )
        current_domain.repository_for(Order).add(order)
        return {"order_id": str(order.id), "order_number": order.order_number}
