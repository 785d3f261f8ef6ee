"""
Configuration Editing

Immutable update helpers for project configurations. Each function returns
a new ProjectConfiguration and leaves its argument untouched, so callers
can keep earlier versions for history.
"""

from typing import Any, List, Sequence, TypeVar

from pydantic import BaseModel

from bizplan.schemas import BOMItem, Position, Product, ProjectConfiguration

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

COLLECTIONS = (
    "investment_items",
    "depreciable_assets",
    "recurring_revenues",
    "recurring_expenses",
    "loans",
)


def next_id(items: Sequence[Any]) -> int:
    """Next free id in a collection."""
    return max((item.id for item in items), default=0) + 1


def _check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")


def _check_editable(item: Any) -> None:
    if getattr(item, "is_calculated", False):
        raise ValueError(f"Calculated entry {item.id} cannot be edited")


def _replace(items: Sequence[T], updated: Any) -> List[T]:
    if not any(item.id == updated.id for item in items):
        raise ValueError(f"No entry with id {updated.id}")
    return [updated if item.id == updated.id else item for item in items]


def _remove(items: Sequence[T], item_id: int) -> List[T]:
    if not any(item.id == item_id for item in items):
        raise ValueError(f"No entry with id {item_id}")
    return [item for item in items if item.id != item_id]


def _rebuild(model: M, **changes: Any) -> M:
    """Copy ``model`` with ``changes`` applied, validating the result."""
    return type(model).model_validate({**model.model_dump(), **changes})


# --- Top-level collections ---


def add_item(config: ProjectConfiguration, collection: str, item: Any) -> ProjectConfiguration:
    """
    Append an item to a configuration collection.

    The item receives the next free id in that collection.

    Args:
        config: Current configuration
        collection: One of COLLECTIONS
        item: Model instance for the collection

    Returns:
        New configuration
    """
    _check_collection(collection)
    items = getattr(config, collection)
    new_item = item.model_copy(update={"id": next_id(items)})
    return _rebuild(config, **{collection: list(items) + [new_item]})


def update_item(config: ProjectConfiguration, collection: str, item: Any) -> ProjectConfiguration:
    """Replace the item with the same id."""
    _check_collection(collection)
    items = getattr(config, collection)
    for existing in items:
        if existing.id == item.id:
            _check_editable(existing)
    return _rebuild(config, **{collection: _replace(items, item)})


def remove_item(config: ProjectConfiguration, collection: str, item_id: int) -> ProjectConfiguration:
    """Remove the item with ``item_id``."""
    _check_collection(collection)
    items = getattr(config, collection)
    for existing in items:
        if existing.id == item_id:
            _check_editable(existing)
    return _rebuild(config, **{collection: _remove(items, item_id)})


def set_parameters(config: ProjectConfiguration, **changes: Any) -> ProjectConfiguration:
    """Change scalar project parameters (duration, rates, notes), validated."""
    return _rebuild(config, **changes)


# --- Payroll and working capital ---


def update_payroll(config: ProjectConfiguration, **changes: Any) -> ProjectConfiguration:
    payroll = _rebuild(config.payroll_config, **changes)
    return _rebuild(config, payroll_config=payroll)


def update_working_capital(config: ProjectConfiguration, **changes: Any) -> ProjectConfiguration:
    working_capital = _rebuild(config.working_capital_config, **changes)
    return _rebuild(config, working_capital_config=working_capital)


def add_position(config: ProjectConfiguration, position: Position) -> ProjectConfiguration:
    positions = config.payroll_config.positions
    new_position = position.model_copy(update={"id": next_id(positions)})
    return update_payroll(config, positions=list(positions) + [new_position])


def remove_position(config: ProjectConfiguration, position_id: int) -> ProjectConfiguration:
    return update_payroll(
        config, positions=_remove(config.payroll_config.positions, position_id)
    )


# --- Products and bills of materials ---


def _set_products(config: ProjectConfiguration, products: List[Product]) -> ProjectConfiguration:
    advanced = _rebuild(config.advanced_config, products=products)
    return _rebuild(config, advanced_config=advanced)


def _get_product(config: ProjectConfiguration, product_id: int) -> Product:
    for product in config.advanced_config.products:
        if product.id == product_id:
            return product
    raise ValueError(f"No product with id {product_id}")


def add_product(config: ProjectConfiguration, product: Product) -> ProjectConfiguration:
    """Append a product with an empty bill of materials."""
    products = config.advanced_config.products
    new_product = product.model_copy(update={"id": next_id(products), "bom_items": []})
    return _set_products(config, list(products) + [new_product])


def update_product(config: ProjectConfiguration, product: Product) -> ProjectConfiguration:
    return _set_products(config, _replace(config.advanced_config.products, product))


def remove_product(config: ProjectConfiguration, product_id: int) -> ProjectConfiguration:
    return _set_products(config, _remove(config.advanced_config.products, product_id))


def add_bom_item(config: ProjectConfiguration, product_id: int, item: BOMItem) -> ProjectConfiguration:
    product = _get_product(config, product_id)
    new_item = item.model_copy(update={"id": next_id(product.bom_items)})
    updated = _rebuild(product, bom_items=list(product.bom_items) + [new_item])
    return update_product(config, updated)


def update_bom_item(config: ProjectConfiguration, product_id: int, item: BOMItem) -> ProjectConfiguration:
    product = _get_product(config, product_id)
    updated = _rebuild(product, bom_items=_replace(product.bom_items, item))
    return update_product(config, updated)


def remove_bom_item(config: ProjectConfiguration, product_id: int, item_id: int) -> ProjectConfiguration:
    product = _get_product(config, product_id)
    updated = _rebuild(product, bom_items=_remove(product.bom_items, item_id))
    return update_product(config, updated)
