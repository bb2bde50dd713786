"""FastAPI routes for the storefront: catalogue, cart, checkout, addresses, admin."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.account.addresses import AddAddress, RemoveAddress, SetDefaultAddress, UpdateAddress
from storefront.account.queries import addresses_for
from storefront.admin.dashboard import dashboard_stats
from storefront.api.auth import current_session
from storefront.api.schemas import (
    AddressIdResponse,
    AddressRequest,
    AddressResponse,
    AddToCartRequest,
    CartLineResponse,
    CartResponse,
    CategoryResponse,
    CheckoutRequest,
    DashboardResponse,
    LowStockResponse,
    OrderItemResponse,
    OrderResponse,
    PlacedOrderResponse,
    ProductResponse,
    QuickPurchaseRequest,
    RecentOrderResponse,
    ShippingAddressResponse,
    StatusResponse,
    UpdateAddressRequest,
    UpdateCartQuantityRequest,
    VariantResponse,
)
from storefront.cart.service import CartService
from storefront.catalogue.queries import list_categories, list_products, product_by_slug
from storefront.checkout.pricing import unit_price
from storefront.checkout.service import CheckoutService
from storefront.errors import NotAuthenticated
from storefront.order.queries import orders_for


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------
def _product_response(product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        slug=product.slug,
        description=product.description,
        category_id=str(product.category_id) if product.category_id else None,
        brand=product.brand,
        material=product.material,
        base_price=product.base_price,
        discount_percentage=product.discount_percentage or 0.0,
        price=round(product.discounted_price, 2),
        images=product.image_list,
        is_featured=bool(product.is_featured),
        variants=[
            VariantResponse(
                id=str(v.id),
                size=v.size,
                color=v.color,
                color_hex=v.color_hex,
                stock_quantity=v.stock_quantity,
                additional_price=v.additional_price or 0.0,
                price=unit_price(product, v),
                is_active=bool(v.is_active),
            )
            for v in product.variants
        ],
    )


def _cart_response(view) -> CartResponse:
    return CartResponse(
        lines=[
            CartLineResponse(
                item_id=line.item_id,
                product_id=line.product_id,
                variant_id=line.variant_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
                product_name=line.product_name,
                product_slug=line.product_slug,
                image=line.image,
                size=line.size,
                color=line.color,
                available=line.available,
            )
            for line in view.lines
        ],
        total=view.total,
        count=view.count,
    )


def _order_response(order) -> OrderResponse:
    address = order.shipping_address
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        status=order.status,
        payment_status=order.payment_status,
        payment_method=order.payment_method,
        total_amount=order.total_amount,
        shipping_amount=order.shipping_amount or 0.0,
        discount_amount=order.discount_amount or 0.0,
        shipping_address=ShippingAddressResponse(
            name=address.name,
            phone=address.phone,
            address_line1=address.address_line1,
            address_line2=address.address_line2,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            country=address.country,
        ),
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                variant_id=str(item.variant_id),
                product_name=item.product_name,
                size=item.size,
                color=item.color,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in order.items
        ],
        created_at=order.created_at,
    )


def _address_response(address) -> AddressResponse:
    return AddressResponse(
        id=str(address.id),
        label=address.label,
        full_name=address.full_name,
        phone=address.phone,
        address_line1=address.address_line1,
        address_line2=address.address_line2,
        city=address.city,
        state=address.state,
        postal_code=address.postal_code,
        country=address.country,
        is_default=bool(address.is_default),
    )


def _require_user(session, notice: str) -> str:
    if session.identity is None:
        raise NotAuthenticated(notice)
    return session.identity.id


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


@product_router.get("", response_model=list[ProductResponse])
async def get_products(
    category: str | None = None,
    featured: bool | None = None,
    sort: str = Query(default="newest"),
) -> list[ProductResponse]:
    products = list_products(category_slug=category, featured=featured, sort=sort)
    return [_product_response(p) for p in products]


@product_router.get("/{slug}", response_model=ProductResponse)
async def get_product(slug: str) -> ProductResponse:
    return _product_response(product_by_slug(slug))


@category_router.get("", response_model=list[CategoryResponse])
async def get_categories() -> list[CategoryResponse]:
    return [
        CategoryResponse(
            id=str(c.id),
            name=c.name,
            slug=c.slug,
            description=c.description,
            image_url=c.image_url,
            parent_id=str(c.parent_id) if c.parent_id else None,
        )
        for c in list_categories()
    ]


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(session=Depends(current_session)) -> CartResponse:
    _require_user(session, "Please log in to view your cart")
    return _cart_response(CartService(session).refresh())


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddToCartRequest, session=Depends(current_session)) -> CartResponse:
    view = CartService(session).add_item(body.product_id, body.variant_id, body.quantity)
    return _cart_response(view)


@cart_router.put("/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: str, body: UpdateCartQuantityRequest, session=Depends(current_session)
) -> CartResponse:
    return _cart_response(CartService(session).update_quantity(item_id, body.quantity))


@cart_router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(item_id: str, session=Depends(current_session)) -> CartResponse:
    return _cart_response(CartService(session).remove_item(item_id))


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(session=Depends(current_session)) -> CartResponse:
    return _cart_response(CartService(session).clear())


# ---------------------------------------------------------------------------
# Checkout and orders
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _placed_response(placed) -> PlacedOrderResponse:
    return PlacedOrderResponse(
        order_id=placed.order_id,
        order_number=placed.order_number,
        subtotal=placed.subtotal,
        shipping_amount=placed.shipping_amount,
        total_amount=placed.total_amount,
    )


@checkout_router.post("", status_code=201, response_model=PlacedOrderResponse)
async def checkout(body: CheckoutRequest, session=Depends(current_session)) -> PlacedOrderResponse:
    placed = CheckoutService(session).checkout_cart(
        address_id=body.address_id,
        payment_method=body.payment_method,
        notes=body.notes,
    )
    return _placed_response(placed)


@checkout_router.post("/quick", status_code=201, response_model=PlacedOrderResponse)
async def quick_purchase(body: QuickPurchaseRequest, session=Depends(current_session)) -> PlacedOrderResponse:
    placed = CheckoutService(session).quick_purchase(body.product_id, body.variant_id, body.quantity)
    return _placed_response(placed)


@order_router.get("", response_model=list[OrderResponse])
async def get_orders(session=Depends(current_session)) -> list[OrderResponse]:
    user_id = _require_user(session, "Please log in to view your orders")
    return [_order_response(o) for o in orders_for(user_id)]


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------
address_router = APIRouter(prefix="/addresses", tags=["addresses"])

_LOGIN_FOR_ADDRESSES = "Please log in to manage addresses"


@address_router.get("", response_model=list[AddressResponse])
async def get_addresses(session=Depends(current_session)) -> list[AddressResponse]:
    user_id = _require_user(session, _LOGIN_FOR_ADDRESSES)
    return [_address_response(a) for a in addresses_for(user_id)]


@address_router.post("", status_code=201, response_model=AddressIdResponse)
async def add_address(body: AddressRequest, session=Depends(current_session)) -> AddressIdResponse:
    user_id = _require_user(session, _LOGIN_FOR_ADDRESSES)
    command = AddAddress(customer_id=user_id, **body.model_dump(exclude_none=True))
    address_id = current_domain.process(command, asynchronous=False)
    return AddressIdResponse(address_id=address_id)


@address_router.put("/{address_id}", response_model=StatusResponse)
async def update_address(
    address_id: str, body: UpdateAddressRequest, session=Depends(current_session)
) -> StatusResponse:
    user_id = _require_user(session, _LOGIN_FOR_ADDRESSES)
    command = UpdateAddress(customer_id=user_id, address_id=address_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@address_router.delete("/{address_id}", response_model=StatusResponse)
async def remove_address(address_id: str, session=Depends(current_session)) -> StatusResponse:
    user_id = _require_user(session, _LOGIN_FOR_ADDRESSES)
    current_domain.process(RemoveAddress(customer_id=user_id, address_id=address_id), asynchronous=False)
    return StatusResponse()


@address_router.post("/{address_id}/default", response_model=StatusResponse)
async def set_default_address(address_id: str, session=Depends(current_session)) -> StatusResponse:
    user_id = _require_user(session, _LOGIN_FOR_ADDRESSES)
    current_domain.process(SetDefaultAddress(customer_id=user_id, address_id=address_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(session=Depends(current_session)) -> DashboardResponse:
    stats = dashboard_stats(session)
    return DashboardResponse(
        total_revenue=stats.total_revenue,
        total_orders=stats.total_orders,
        total_customers=stats.total_customers,
        total_products=stats.total_products,
        recent_orders=[RecentOrderResponse(**vars(o)) for o in stats.recent_orders],
        low_stock=[LowStockResponse(**vars(i)) for i in stats.low_stock],
    )
