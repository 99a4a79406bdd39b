"""Category listings for the public catalogue."""

from protean.utils.globals import current_domain

from storefront.category.category import Category
from storefront.shared.errors import CategoryErrors


def category_view(category):
    return {
        "id": str(category.id),
        "name": category.name,
        "description": category.description,
        "parent_id": str(category.parent_id) if category.parent_id else None,
    }


def list_categories():
    return [category_view(category) for category in current_domain.repository_for(Category).all_by_name()]


def get_category(category_id):
    category = current_domain.repository_for(Category).get_or_none(category_id)
    if category is None:
        raise CategoryErrors.NOT_FOUND.to_exception()
    return category_view(category)
