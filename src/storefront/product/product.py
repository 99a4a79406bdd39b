"""Product aggregate: a sellable item with a price and a stock count."""

from datetime import UTC, datetime

from protean import invariant
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.errors import ProductErrors
from storefront.shared.money import DEFAULT_CURRENCY, Money
from storefront.shared.sku import SKU

MAX_NAME_LENGTH = 100
LOW_STOCK_THRESHOLD = 10


def _clean_name(name):
    if not name or not name.strip():
        raise ProductErrors.EMPTY_NAME.to_exception()
    if len(name.strip()) > MAX_NAME_LENGTH:
        raise ProductErrors.NAME_TOO_LONG.to_exception()
    return name.strip()


def _clean_price(price, currency):
    if price is None or price <= 0:
        raise ProductErrors.INVALID_PRICE.to_exception()
    # Money validates the currency code
    return Money.of(price, currency or DEFAULT_CURRENCY)


@storefront.aggregate
class Product:
    """A catalogue item.

    Stock only moves through ``change_stock``, which refuses any delta that
    would take it below zero. Prices are stored as a plain amount/currency pair
    and exposed as ``Money`` through ``unit_price``.
    """

    name: String(required=True, max_length=255)
    description: Text()
    sku: String(required=True, max_length=50, unique=True)
    price: Float(required=True)
    currency: String(max_length=3, default=DEFAULT_CURRENCY)
    stock: Integer(default=0)
    category_id: Identifier(required=True)
    image_url: String(max_length=500)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ProductErrors.INVALID_STOCK_CHANGE.to_exception()

    @invariant.post
    def price_must_be_positive(self):
        if self.price is not None and self.price <= 0:
            raise ProductErrors.INVALID_PRICE.to_exception()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        sku,
        price,
        category_id,
        stock=0,
        currency=DEFAULT_CURRENCY,
        description=None,
        image_url=None,
    ):
        from storefront.product.events import ProductCreated

        money = _clean_price(price, currency)
        code = SKU(code=(sku or "").strip()).code
        if stock is None or stock < 0:
            raise ProductErrors.INVALID_STOCK_CHANGE.to_exception()

        now = datetime.now(UTC)
        product = cls(
            name=_clean_name(name),
            description=description,
            sku=code,
            price=money.amount,
            currency=money.currency,
            stock=stock,
            category_id=category_id,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                sku=product.sku,
                name=product.name,
                price=product.price,
                currency=product.currency,
                stock=product.stock,
                category_id=str(category_id),
            )
        )
        return product

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    @property
    def unit_price(self):
        return Money.of(self.price, self.currency)

    def update_details(self, name, price, category_id, currency=None, description=None, image_url=None):
        from storefront.product.events import ProductUpdated

        money = _clean_price(price, currency or self.currency)

        self.name = _clean_name(name)
        self.price = money.amount
        self.currency = money.currency
        self.category_id = category_id
        self.description = description
        if image_url is not None:
            self.image_url = image_url
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductUpdated(
                product_id=str(self.id),
                name=self.name,
                price=self.price,
                currency=self.currency,
            )
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def has_stock(self, quantity):
        return (self.stock or 0) >= quantity

    def change_stock(self, delta):
        """Move stock by ``delta`` (negative to deduct, positive to restock)."""
        from storefront.product.events import StockChanged

        previous = self.stock or 0
        if previous + delta < 0:
            raise ProductErrors.INVALID_STOCK_CHANGE.to_exception()

        self.stock = previous + delta
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockChanged(
                product_id=str(self.id),
                delta=delta,
                previous_stock=previous,
                new_stock=self.stock,
            )
        )


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_by_sku(self, sku):
        return self.query.filter(sku=(sku or "").strip()).all().first

    def find_many(self, product_ids):
        """Batch-load products keyed by id; missing ids are simply absent."""
        ids = [str(product_id) for product_id in product_ids]
        if not ids:
            return {}
        return {str(product.id): product for product in self.query.filter(id__in=ids).limit(None).all().items}

    def count_in_category(self, category_id):
        return self.query.filter(category_id=str(category_id)).all().total

    def low_stock(self, threshold=LOW_STOCK_THRESHOLD, limit=5):
        return self.query.filter(stock__lt=threshold).order_by("stock").limit(limit).all().items

    def remove(self, product):
        self._dao.delete(product)
