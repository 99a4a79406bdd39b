"""Pydantic request/response schemas for the Storefront API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Auth ---


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "jane@example.com",
                    "password": "Secret123!",
                    "first_name": "Jane",
                    "last_name": "Doe",
                }
            ]
        }
    }

    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    roles: list[str]


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., max_length=254)


class ResetPasswordRequest(BaseModel):
    email: str = Field(..., max_length=254)
    token: str = Field(..., max_length=128)
    new_password: str = Field(..., max_length=128)


class MessageResponse(BaseModel):
    message: str


# --- Users ---


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    roles: list[str]
    created_at: datetime | None = None


class UpdateProfileRequest(BaseModel):
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., max_length=128)
    new_password: str = Field(..., max_length=128)


class CreateUserRequest(RegisterRequest):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "ops@example.com",
                    "password": "Secret123!",
                    "first_name": "Olive",
                    "last_name": "Ops",
                    "roles": ["Admin", "Customer"],
                }
            ]
        }
    }

    roles: list[str] = Field(default_factory=lambda: ["Customer"])


class UserIdResponse(BaseModel):
    user_id: str


# --- Categories ---


class CategoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"name": "Laptops", "description": "Portable computers", "parent_id": None}]}
    }

    name: str = Field(..., max_length=100)
    description: str | None = None
    parent_id: str | None = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    parent_id: str | None = None


class CategoryIdResponse(BaseModel):
    category_id: str


# --- Products ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ultrabook 14",
                    "description": "14-inch laptop, 16 GB RAM",
                    "sku": "LAP-UB14",
                    "price": 999.0,
                    "currency": "USD",
                    "stock": 100,
                    "category_id": "c3d4e5f6-a7b8-9012-cdef-123456789012",
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    description: str | None = None
    sku: str = Field(..., max_length=255)
    price: float
    currency: str = Field("USD", max_length=3)
    stock: int = 0
    category_id: str
    image_url: str | None = Field(None, max_length=500)


class UpdateProductRequest(BaseModel):
    name: str = Field(..., max_length=255)
    description: str | None = None
    price: float
    currency: str | None = Field(None, max_length=3)
    category_id: str
    image_url: str | None = Field(None, max_length=500)


class AdjustStockRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"delta": 25}, {"delta": -3}]}}

    delta: int


class StockResponse(BaseModel):
    product_id: str
    stock: int


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    sku: str
    price: float
    currency: str
    stock: int
    category_id: str
    category_name: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None


class ProductPageResponse(BaseModel):
    items: list[ProductResponse]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class ProductIdResponse(BaseModel):
    product_id: str


# --- Cart ---


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    quantity: int


class CartLineResponse(BaseModel):
    product_id: str
    product_name: str
    unit_price: float
    quantity: int
    subtotal: float
    image_url: str | None = None


class CartResponse(BaseModel):
    cart_id: str | None = None
    items: list[CartLineResponse]
    total: float
    item_count: int
    currency: str
    updated_at: datetime | None = None


# --- Orders ---


class CheckoutRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"payment_provider": "stripe"}]}}

    payment_provider: str = "stripe"


class CheckoutResponse(BaseModel):
    order_id: str
    status: str
    total: float
    currency: str
    message: str = "Order placed successfully."


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float


class OrderResponse(BaseModel):
    id: str
    user_id: str
    user_email: str | None = None
    placed_at: datetime
    total: float
    currency: str
    status: str
    payment_provider: str | None = None
    payment_reference: str | None = None
    cancellation_reason: str | None = None
    items: list[OrderItemResponse]


class OrderPageResponse(BaseModel):
    items: list[OrderResponse]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class ChangeOrderStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "Shipped"}]}}

    status: str | None = None


# --- Admin dashboard ---


class LowStockProductResponse(BaseModel):
    id: str
    name: str
    stock: int


class RecentOrderResponse(BaseModel):
    id: str
    user_email: str
    total: float
    placed_at: datetime
    status: str


class DashboardResponse(BaseModel):
    total_revenue: float
    total_orders: int
    total_products: int
    total_users: int
    low_stock_products: list[LowStockProductResponse]
    recent_orders: list[RecentOrderResponse]


# --- Images ---


class ImageUploadResponse(BaseModel):
    url: str
    content_type: str
    size: int


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
