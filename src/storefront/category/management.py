"""Category management: commands and handlers."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.category.category import Category
from storefront.domain import storefront
from storefront.shared.errors import CategoryErrors


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()
    parent_id: Identifier()


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    description: Text()
    parent_id: Identifier()


@storefront.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


def _load(repo, category_id):
    category = repo.get_or_none(category_id)
    if category is None:
        raise CategoryErrors.NOT_FOUND.to_exception()
    return category


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        if command.parent_id and repo.get_or_none(command.parent_id) is None:
            raise CategoryErrors.INVALID_PARENT.to_exception()

        category = Category.create(
            name=command.name,
            description=command.description,
            parent_id=command.parent_id,
        )
        repo.add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = _load(repo, command.category_id)

        if command.parent_id:
            # The new parent must exist and must not sit below this category
            ancestors = repo.ancestor_ids(command.parent_id)
            if not ancestors or str(category.id) in ancestors:
                raise CategoryErrors.INVALID_PARENT.to_exception()

        category.update_details(
            name=command.name,
            description=command.description,
            parent_id=command.parent_id,
        )
        repo.add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        from storefront.product.product import Product

        repo = current_domain.repository_for(Category)
        category = _load(repo, command.category_id)

        in_use = repo.children_of(category.id) or current_domain.repository_for(Product).count_in_category(category.id)
        if in_use:
            raise CategoryErrors.IN_USE.to_exception()

        repo.remove(category)
