"""Business failure catalogue.

Every expected failure is a (code, description) pair. Raising one produces a
``ValidationError`` keyed by the code, so the API layer renders it as
``{"error": {"Order.EmptyCart": ["Cannot place an order with an empty cart."]}}``.
Codes ending in ``.NotFound`` map to ``ObjectNotFoundError`` instead, which
the API turns into a 404.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError, ValidationError


@dataclass(frozen=True)
class Error:
    code: str
    description: str

    def to_exception(self) -> Exception:
        if self.code.endswith(".NotFound"):
            return ObjectNotFoundError(self.description)
        return ValidationError({self.code: [self.description]})


class MoneyErrors:
    NEGATIVE_AMOUNT = Error("Money.NegativeAmount", "Amount cannot be negative.")
    EMPTY_CURRENCY = Error("Money.EmptyCurrency", "Currency is required.")
    INVALID_CURRENCY = Error("Money.InvalidCurrency", "Currency must be a 3-letter ISO 4217 code.")


class SkuErrors:
    EMPTY = Error("Sku.Empty", "SKU cannot be empty.")
    TOO_LONG = Error("Sku.TooLong", "SKU cannot exceed 50 characters.")
    INVALID_CHARACTERS = Error("Sku.InvalidCharacters", "SKU can only contain letters, numbers, and hyphens.")


class EmailErrors:
    EMPTY = Error("Email.Empty", "Email is required.")
    INVALID = Error("Email.Invalid", "Email format is invalid.")


class PaginationErrors:
    INVALID_PAGE_NUMBER = Error("Pagination.InvalidPageNumber", "Page number must be greater than 0.")
    INVALID_PAGE_SIZE = Error("Pagination.InvalidPageSize", "Page size must be between 1 and 100.")


class UserErrors:
    NOT_FOUND = Error("User.NotFound", "User not found.")
    DUPLICATE_EMAIL = Error("User.DuplicateEmail", "A user with this email already exists.")
    EMPTY_FIRST_NAME = Error("User.EmptyFirstName", "First name is required.")
    EMPTY_LAST_NAME = Error("User.EmptyLastName", "Last name is required.")
    WEAK_PASSWORD = Error("User.WeakPassword", "Password must be at least 8 characters long.")

    @staticmethod
    def invalid_role(role: str) -> Error:
        return Error("User.InvalidRole", f"Role '{role}' does not exist.")


class AuthErrors:
    INVALID_CREDENTIALS = Error("Auth.InvalidCredentials", "Invalid email or password.")
    INVALID_REQUEST = Error("Auth.InvalidRequest", "Invalid request.")
    INVALID_TOKEN = Error("Auth.InvalidToken", "Invalid or expired token.")


class CategoryErrors:
    NOT_FOUND = Error("Category.NotFound", "Category not found.")
    EMPTY_NAME = Error("Category.EmptyName", "Category name cannot be empty.")
    INVALID_PARENT = Error("Category.InvalidParent", "Parent category is invalid.")
    IN_USE = Error("Category.InUse", "Category cannot be deleted while products or subcategories reference it.")


class ProductErrors:
    NOT_FOUND = Error("Product.NotFound", "Product not found.")
    EMPTY_NAME = Error("Product.EmptyName", "Product name cannot be empty.")
    NAME_TOO_LONG = Error("Product.NameTooLong", "Product name cannot exceed 100 characters.")
    INVALID_PRICE = Error("Product.InvalidPrice", "Price must be greater than zero.")
    INVALID_STOCK_CHANGE = Error("Product.InvalidStockChange", "Stock cannot be negative after change.")
    DUPLICATE_SKU = Error("Product.DuplicateSku", "A product with this SKU already exists.")
    INVALID_CATEGORY = Error("Product.InvalidCategory", "Category does not exist.")
    CANNOT_DELETE_IN_USE = Error("Product.CannotDeleteInUse", "Cannot delete a product that is part of an order.")


class CartErrors:
    NOT_FOUND = Error("Cart.NotFound", "Cart not found.")
    INVALID_PRODUCT = Error("Cart.InvalidProduct", "Product does not exist.")
    INVALID_QUANTITY = Error("Cart.InvalidQuantity", "Quantity must be at least 1.")
    ITEM_NOT_FOUND = Error("Cart.ItemNotFound", "Item is not in the cart.")


class OrderErrors:
    NOT_FOUND = Error("Order.NotFound", "Order not found.")
    EMPTY_CART = Error("Order.EmptyCart", "Cannot place an order with an empty cart.")
    EMPTY_USER_ID = Error("Order.EmptyUserId", "User is required.")
    NO_ITEMS = Error("Order.NoItems", "Order must contain at least one item.")
    MIXED_CURRENCIES = Error("Order.MixedCurrencies", "All items in an order must share one currency.")
    EMPTY_STATUS = Error("Order.EmptyStatus", "Status is required.")
    TOTAL_MISMATCH = Error("Order.TotalMismatch", "Order total must equal the sum of its items.")
    ITEM_IMMUTABLE = Error("Order.ItemImmutable", "Order items cannot be changed once placed.")

    @staticmethod
    def product_not_found(product_id: str) -> Error:
        return Error("Order.ProductNotFound", f"Product '{product_id}' no longer exists.")

    @staticmethod
    def out_of_stock(name: str, available: int, requested: int) -> Error:
        return Error(
            "Order.OutOfStock",
            f"Not enough stock for product '{name}'. Available: {available}, Requested: {requested}",
        )

    @staticmethod
    def invalid_status(status: str) -> Error:
        return Error(
            "Order.InvalidStatus",
            f"Invalid status '{status}'. Valid values: Pending, Processing, Shipped, Delivered, Cancelled.",
        )

    @staticmethod
    def invalid_status_transition(current: str, target: str) -> Error:
        return Error("Order.InvalidStatusTransition", f"Cannot move an order from {current} to {target}.")

    @staticmethod
    def payment_failed(reason: str | None) -> Error:
        return Error("Order.PaymentFailed", f"Payment failed: {reason or 'unknown reason'}")


class PaymentErrors:
    @staticmethod
    def invalid_provider(provider: str) -> Error:
        return Error("Payment.InvalidProvider", f"Payment provider '{provider}' is not supported.")


class ImageErrors:
    EMPTY = Error("Image.Empty", "No file was uploaded.")
    INVALID_TYPE = Error("Image.InvalidType", "Only PNG, JPEG, GIF and WEBP images are allowed.")

    @staticmethod
    def too_large(limit: int) -> Error:
        return Error("Image.TooLarge", f"File exceeds the {limit // (1024 * 1024)} MB limit.")
