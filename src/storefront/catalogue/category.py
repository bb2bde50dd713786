"""Category aggregate and its creation command."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront


@storefront.aggregate
class Category:
    name = String(required=True, max_length=100)
    slug = String(required=True, max_length=100, unique=True)
    description = Text()
    image_url = String(max_length=500)
    parent_id = Identifier()
    is_active = Boolean(default=True)
    sort_order = Integer(default=0)


@storefront.command(part_of="Category")
class CreateCategory:
    name = String(required=True, max_length=100)
    slug = String(required=True, max_length=100)
    description = Text()
    image_url = String(max_length=500)
    parent_id = Identifier()
    sort_order = Integer(default=0)


@storefront.command_handler(part_of=Category)
class CategoryCommandHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        category = Category(
            name=command.name,
            slug=command.slug,
            description=command.description,
            image_url=command.image_url,
            parent_id=command.parent_id,
            sort_order=command.sort_order or 0,
        )
        current_domain.repository_for(Category).add(category)
        return str(category.id)
