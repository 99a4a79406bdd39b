"""FastAPI endpoints for the Storefront."""

from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile
from protean.utils.globals import current_domain

from storefront.api.rate_limit import limit_auth_requests
from storefront.api.schemas import (
    AddToCartRequest,
    AdjustStockRequest,
    CartResponse,
    CategoryIdResponse,
    CategoryRequest,
    CategoryResponse,
    ChangeOrderStatusRequest,
    ChangePasswordRequest,
    CheckoutRequest,
    CheckoutResponse,
    CreateProductRequest,
    CreateUserRequest,
    DashboardResponse,
    ForgotPasswordRequest,
    ImageUploadResponse,
    LoginRequest,
    MessageResponse,
    OrderPageResponse,
    OrderResponse,
    ProductIdResponse,
    ProductPageResponse,
    ProductResponse,
    RegisterRequest,
    ResetPasswordRequest,
    StatusResponse,
    StockResponse,
    TokenResponse,
    UpdateCartItemRequest,
    UpdateProductRequest,
    UpdateProfileRequest,
    UserIdResponse,
    UserResponse,
)
from storefront.api.security import get_current_user, issue_token, require_admin
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.cart.queries import get_cart
from storefront.category.management import CreateCategory, DeleteCategory, UpdateCategory
from storefront.category.queries import get_category, list_categories
from storefront.checkout.service import CheckoutService
from storefront.dashboard.stats import dashboard_stats
from storefront.identity.authentication import authenticate
from storefront.identity.profile import ChangePassword, UpdateProfile
from storefront.identity.recovery import ForgotPassword, ResetPassword
from storefront.identity.registration import CreateUser, RegisterUser
from storefront.identity.user import User
from storefront.order.queries import all_orders, my_orders, order_detail
from storefront.order.status import ChangeOrderStatus
from storefront.product.creation import CreateProduct
from storefront.product.details import UpdateProduct
from storefront.product.queries import get_product, list_products
from storefront.product.removal import DeleteProduct
from storefront.product.stock import AdjustStock
from storefront.storage.images import store_image

auth_router = APIRouter(prefix="/auth", tags=["auth"], dependencies=[Depends(limit_auth_requests)])
user_router = APIRouter(prefix="/users", tags=["users"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
product_router = APIRouter(prefix="/products", tags=["products"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])
image_router = APIRouter(prefix="/images", tags=["images"])


def _token_response(user) -> TokenResponse:
    return TokenResponse(
        access_token=issue_token(user),
        user_id=str(user.id),
        email=user.email,
        roles=list(user.roles or []),
    )


def _user_response(user) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        roles=list(user.roles or []),
        created_at=user.created_at,
    )


# --- Auth endpoints ---


@auth_router.post("/register", status_code=201, response_model=TokenResponse)
def register(body: RegisterRequest) -> TokenResponse:
    command = RegisterUser(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return _token_response(current_domain.repository_for(User).get(user_id))


@auth_router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest) -> TokenResponse:
    return _token_response(authenticate(body.email, body.password))


@auth_router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(body: ForgotPasswordRequest) -> MessageResponse:
    current_domain.process(ForgotPassword(email=body.email), asynchronous=False)
    return MessageResponse(message="If the email exists, a reset link has been sent.")


@auth_router.post("/reset-password", response_model=MessageResponse)
def reset_password(body: ResetPasswordRequest) -> MessageResponse:
    command = ResetPassword(email=body.email, token=body.token, new_password=body.new_password)
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Password has been reset.")


# --- User endpoints ---


@user_router.get("/me", response_model=UserResponse)
def get_profile(user: User = Depends(get_current_user)) -> UserResponse:
    return _user_response(user)


@user_router.put("/me", response_model=UserResponse)
def update_profile(body: UpdateProfileRequest, user: User = Depends(get_current_user)) -> UserResponse:
    command = UpdateProfile(user_id=str(user.id), first_name=body.first_name, last_name=body.last_name)
    current_domain.process(command, asynchronous=False)
    return _user_response(current_domain.repository_for(User).get(user.id))


@user_router.put("/me/password", response_model=StatusResponse)
def change_password(body: ChangePasswordRequest, user: User = Depends(get_current_user)) -> StatusResponse:
    command = ChangePassword(
        user_id=str(user.id),
        current_password=body.current_password,
        new_password=body.new_password,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@user_router.post("", status_code=201, response_model=UserIdResponse, dependencies=[Depends(require_admin)])
def create_user(body: CreateUserRequest) -> UserIdResponse:
    command = CreateUser(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        roles=body.roles,
    )
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


# --- Category endpoints ---


@category_router.get("", response_model=list[CategoryResponse])
def get_categories() -> list[CategoryResponse]:
    return [CategoryResponse(**view) for view in list_categories()]


@category_router.get("/{category_id}", response_model=CategoryResponse)
def get_category_by_id(category_id: str) -> CategoryResponse:
    return CategoryResponse(**get_category(category_id))


@category_router.post(
    "", status_code=201, response_model=CategoryIdResponse, dependencies=[Depends(require_admin)]
)
def create_category(body: CategoryRequest) -> CategoryIdResponse:
    command = CreateCategory(name=body.name, description=body.description, parent_id=body.parent_id)
    result = current_domain.process(command, asynchronous=False)
    return CategoryIdResponse(category_id=result)


@category_router.put("/{category_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
def update_category(category_id: str, body: CategoryRequest) -> StatusResponse:
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        parent_id=body.parent_id,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@category_router.delete("/{category_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
def delete_category(category_id: str) -> StatusResponse:
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return StatusResponse()


# --- Product endpoints ---


@product_router.get("", response_model=ProductPageResponse)
def get_products(
    page_number: int = 1,
    page_size: int = 10,
    category_id: str | None = None,
    search: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    sort: str = "name",
) -> ProductPageResponse:
    page = list_products(
        page_number=page_number,
        page_size=page_size,
        category_id=category_id,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
    )
    return ProductPageResponse(**page.to_dict())


@product_router.get("/{product_id}", response_model=ProductResponse)
def get_product_by_id(product_id: str) -> ProductResponse:
    return ProductResponse(**get_product(product_id))


@product_router.post("", status_code=201, response_model=ProductIdResponse, dependencies=[Depends(require_admin)])
def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        sku=body.sku,
        price=body.price,
        currency=body.currency,
        stock=body.stock,
        category_id=body.category_id,
        image_url=body.image_url,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        currency=body.currency,
        category_id=body.category_id,
        image_url=body.image_url,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/stock", response_model=StockResponse, dependencies=[Depends(require_admin)])
def adjust_stock(product_id: str, body: AdjustStockRequest) -> StockResponse:
    stock = current_domain.process(AdjustStock(product_id=product_id, delta=body.delta), asynchronous=False)
    return StockResponse(product_id=product_id, stock=stock)


@product_router.delete("/{product_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


# --- Cart endpoints ---


@cart_router.get("", response_model=CartResponse)
def view_cart(user: User = Depends(get_current_user)) -> CartResponse:
    return CartResponse(**get_cart(user.id))


@cart_router.post("/items", response_model=CartResponse)
def add_to_cart(body: AddToCartRequest, user: User = Depends(get_current_user)) -> CartResponse:
    command = AddToCart(user_id=str(user.id), product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return CartResponse(**get_cart(user.id))


@cart_router.put("/items/{product_id}", response_model=CartResponse)
def update_cart_item(
    product_id: str, body: UpdateCartItemRequest, user: User = Depends(get_current_user)
) -> CartResponse:
    command = UpdateCartItem(user_id=str(user.id), product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return CartResponse(**get_cart(user.id))


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
def remove_from_cart(product_id: str, user: User = Depends(get_current_user)) -> CartResponse:
    current_domain.process(RemoveFromCart(user_id=str(user.id), product_id=product_id), asynchronous=False)
    return CartResponse(**get_cart(user.id))


@cart_router.delete("", response_model=CartResponse)
def clear_cart(user: User = Depends(get_current_user)) -> CartResponse:
    current_domain.process(ClearCart(user_id=str(user.id)), asynchronous=False)
    return CartResponse(**get_cart(user.id))


# --- Order endpoints ---


@order_router.post("/checkout", status_code=201, response_model=CheckoutResponse)
def checkout(
    background_tasks: BackgroundTasks,
    body: CheckoutRequest | None = None,
    user: User = Depends(get_current_user),
) -> CheckoutResponse:
    provider = body.payment_provider if body else CheckoutRequest().payment_provider
    order = CheckoutService().place_order(
        str(user.id), payment_provider=provider, schedule=background_tasks.add_task
    )
    return CheckoutResponse(
        order_id=str(order.id),
        status=order.status,
        total=order.total.amount,
        currency=order.total.currency,
    )


@order_router.get("/mine", response_model=list[OrderResponse])
def get_my_orders(user: User = Depends(get_current_user)) -> list[OrderResponse]:
    return [OrderResponse(**view) for view in my_orders(user.id)]


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, user: User = Depends(get_current_user)) -> OrderResponse:
    return OrderResponse(**order_detail(order_id, user.id, is_admin=user.is_admin))


# --- Admin endpoints ---


@admin_router.get("/orders", response_model=OrderPageResponse)
def get_all_orders(page_number: int = 1, page_size: int = 10, status: str | None = None) -> OrderPageResponse:
    page = all_orders(page_number=page_number, page_size=page_size, status=status)
    return OrderPageResponse(**page.to_dict())


@admin_router.put("/orders/{order_id}/status", response_model=StatusResponse)
def change_order_status(order_id: str, body: ChangeOrderStatusRequest) -> StatusResponse:
    current_domain.process(ChangeOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return StatusResponse()


@admin_router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard() -> DashboardResponse:
    return DashboardResponse(**dashboard_stats())


# --- Image endpoints ---


@image_router.post("", status_code=201, response_model=ImageUploadResponse, dependencies=[Depends(require_admin)])
def upload_image(file: UploadFile | None = File(None)) -> ImageUploadResponse:
    content = file.file.read() if file is not None else b""
    filename = file.filename if file is not None else ""
    return ImageUploadResponse(**store_image(content, filename))
