"""Product browsing: paged, filtered listings and product detail."""

from protean import Q
from protean.utils.globals import current_domain

from storefront.category.category import Category
from storefront.category.queries import list_categories
from storefront.product.product import Product
from storefront.shared.errors import ProductErrors
from storefront.shared.paging import paginate

PRODUCT_SORTS = {
    "name": "name",
    "price": "price",
    "price_desc": "-price",
    "newest": "-created_at",
}


def product_view(product, category_name=None):
    return {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "sku": product.sku,
        "price": product.price,
        "currency": product.currency,
        "stock": product.stock,
        "category_id": str(product.category_id),
        "category_name": category_name,
        "image_url": product.image_url,
        "created_at": product.created_at,
    }


def list_products(
    page_number=1,
    page_size=10,
    category_id=None,
    search=None,
    min_price=None,
    max_price=None,
    sort="name",
):
    """One page of products matching every filter that was supplied.

    Unknown sort keys fall back to sorting by name.
    """
    query = current_domain.repository_for(Product).query

    if category_id:
        query = query.filter(category_id=str(category_id))
    if search and search.strip():
        term = search.strip()
        query = query.filter(Q(name__icontains=term) | Q(description__icontains=term))
    if min_price is not None:
        query = query.filter(price__gte=min_price)
    if max_price is not None:
        query = query.filter(price__lte=max_price)

    query = query.order_by(PRODUCT_SORTS.get(sort, "name"))

    names = {view["id"]: view["name"] for view in list_categories()}
    return paginate(
        query,
        page_number,
        page_size,
        lambda product: product_view(product, names.get(str(product.category_id))),
    )


def get_product(product_id):
    product = current_domain.repository_for(Product).get_or_none(product_id)
    if product is None:
        raise ProductErrors.NOT_FOUND.to_exception()

    category = current_domain.repository_for(Category).get_or_none(product.category_id)
    return product_view(product, category.name if category else None)
