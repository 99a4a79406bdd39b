"""Category aggregate root for product categorization."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String, Text

from storefront.domain import storefront
from storefront.shared.errors import CategoryErrors

MAX_NAME_LENGTH = 100


def _clean_name(name):
    if not name or not name.strip():
        raise CategoryErrors.EMPTY_NAME.to_exception()
    return name.strip()


@storefront.aggregate
class Category:
    """A grouping of products. Categories may nest under a parent category."""

    name: String(required=True, max_length=MAX_NAME_LENGTH)
    description: Text()
    parent_id: Identifier()
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, description=None, parent_id=None):
        from storefront.category.events import CategoryCreated

        now = datetime.now(UTC)
        category = cls(
            name=_clean_name(name),
            description=description,
            parent_id=parent_id or None,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=str(category.id),
                name=category.name,
                parent_id=category.parent_id,
            )
        )
        return category

    def update_details(self, name, description=None, parent_id=None):
        from storefront.category.events import CategoryUpdated

        if parent_id and str(parent_id) == str(self.id):
            raise CategoryErrors.INVALID_PARENT.to_exception()

        self.name = _clean_name(name)
        self.description = description
        self.parent_id = parent_id or None
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CategoryUpdated(
                category_id=str(self.id),
                name=self.name,
                parent_id=self.parent_id,
            )
        )


@storefront.repository(part_of=Category)
class CategoryRepository:
    def children_of(self, category_id):
        return self.query.filter(parent_id=str(category_id)).limit(None).all().items

    def ancestor_ids(self, category_id):
        """Ids from ``category_id`` up to the root, stopping on a broken or cyclic chain."""
        seen = []
        current = self.get_or_none(category_id) if category_id else None
        while current is not None and str(current.id) not in seen:
            seen.append(str(current.id))
            current = self.get_or_none(current.parent_id) if current.parent_id else None
        return seen

    def all_by_name(self):
        return self.query.order_by("name").limit(None).all().items

    def remove(self, category):
        self._dao.delete(category)
