"""Pydantic request/response schemas for the storefront API.

These are the external contracts; commands and aggregates stay internal.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    error: str
    notice: str


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class VariantResponse(BaseModel):
    id: str
    size: str
    color: str
    color_hex: str | None = None
    stock_quantity: int
    additional_price: float
    price: float
    is_active: bool


class ProductResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    category_id: str | None = None
    brand: str | None = None
    material: str | None = None
    base_price: float
    discount_percentage: float
    price: float
    images: list[str] = []
    is_featured: bool
    variants: list[VariantResponse] = []


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    image_url: str | None = None
    parent_id: str | None = None


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "b0f3c0de-5d7e-4c1a-9a57-2f0c8e1d3a11",
                    "variant_id": "6a0d3f2e-1b2c-4d5e-8f90-a1b2c3d4e5f6",
                    "quantity": 2,
                }
            ]
        }
    }

    product_id: str
    variant_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    # Zero or less removes the line
    quantity: int


class CartLineResponse(BaseModel):
    item_id: str
    product_id: str
    variant_id: str
    quantity: int
    unit_price: float
    line_total: float
    product_name: str | None = None
    product_slug: str | None = None
    image: str | None = None
    size: str | None = None
    color: str | None = None
    available: bool


class CartResponse(BaseModel):
    lines: list[CartLineResponse] = []
    total: float = 0.0
    count: int = 0


# ---------------------------------------------------------------------------
# Checkout and orders
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    address_id: str | None = None
    payment_method: str = Field(default="cod", max_length=20)
    notes: str | None = None


class QuickPurchaseRequest(BaseModel):
    product_id: str
    variant_id: str
    quantity: int = Field(ge=1, default=1)


class PlacedOrderResponse(BaseModel):
    order_id: str
    order_number: str
    subtotal: float
    shipping_amount: float
    total_amount: float
    notice: str = "Order placed successfully!"


class OrderItemResponse(BaseModel):
    product_id: str
    variant_id: str
    product_name: str | None = None
    size: str | None = None
    color: str | None = None
    quantity: int
    unit_price: float
    total_price: float


class ShippingAddressResponse(BaseModel):
    name: str
    phone: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str


class OrderResponse(BaseModel):
    id: str
    order_number: str
    status: str
    payment_status: str
    payment_method: str
    total_amount: float
    shipping_amount: float
    discount_amount: float
    shipping_address: ShippingAddressResponse
    items: list[OrderItemResponse] = []
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Addresses
# ---------------------------------------------------------------------------
class AddressRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "label": "home",
                    "full_name": "Asha Rao",
                    "phone": "+919812345678",
                    "address_line1": "12 MG Road",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "postal_code": "560001",
                    "is_default": True,
                }
            ]
        }
    }

    label: str | None = Field(None, max_length=10)
    full_name: str = Field(..., max_length=100)
    phone: str = Field(..., max_length=20)
    address_line1: str = Field(..., max_length=255)
    address_line2: str | None = Field(None, max_length=255)
    city: str = Field(..., max_length=100)
    state: str = Field(..., max_length=100)
    postal_code: str = Field(..., max_length=20)
    country: str | None = Field(None, max_length=100)
    is_default: bool = False


class UpdateAddressRequest(BaseModel):
    label: str | None = Field(None, max_length=10)
    full_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=20)
    address_line1: str | None = Field(None, max_length=255)
    address_line2: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    is_default: bool | None = None


class AddressResponse(BaseModel):
    id: str
    label: str
    full_name: str
    phone: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool


class AddressIdResponse(BaseModel):
    address_id: str


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
class RecentOrderResponse(BaseModel):
    order_id: str
    order_number: str
    total_amount: float
    status: str
    payment_status: str
    created_at: datetime | None = None


class LowStockResponse(BaseModel):
    product_id: str
    variant_id: str
    name: str
    variant: str
    stock: int
    image: str | None = None


class DashboardResponse(BaseModel):
    total_revenue: float
    total_orders: int
    total_customers: int
    total_products: int
    recent_orders: list[RecentOrderResponse] = []
    low_stock: list[LowStockResponse] = []
