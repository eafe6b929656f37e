"""Cart - ordered collection of line items for one cart identity."""

from cart_saga.cart.errors import InvalidArgument
from cart_saga.cart.line_item import LineItem


__all__ = (
    'Cart',
)


class Cart:
    """In-memory state of a single shopping cart.

    Items keep the order in which they were added. The cart does no I/O;
    it only tracks whether it changed since it was last persisted.
    """

    def __init__(self, id_: int, items: list[LineItem] | None = None):
        """Initialize cart.

        Args:
            id_: Cart identity.
            items: Optional initial items (copied).
        """
        self._id: int = id_
        self._items: list[LineItem] = list(items) if items else []
        self._dirty: bool = False

    @property
    def id(self) -> int:
        return self._id

    @property
    def is_empty(self) -> bool:
        """True if the cart holds no items."""
        return len(self._items) == 0

    @property
    def is_dirty(self) -> bool:
        """True if the cart was mutated since the last mark_clean()."""
        return self._dirty

    def mark_clean(self) -> None:
        self._dirty = False

    def add_item(self, item: LineItem) -> None:
        """Append an item to the cart.

        Args:
            item: The item to add.

        Raises:
            InvalidArgument: If the item is missing or has no name.
        """
        if item is None or not isinstance(item, LineItem):
            raise InvalidArgument("Line item is required")
        if not isinstance(item.name, str) or not item.name.strip():
            raise InvalidArgument("Line item must have a name")
        self._items.append(item)
        self._dirty = True

    def remove_item(self, item: LineItem) -> bool:
        """Remove the first item with the same name.

        Args:
            item: The item to remove.

        Returns:
            True if an item was removed, False if none matched.
        """
        for i, existing in enumerate(self._items):
            if existing.name == item.name:
                del self._items[i]
                self._dirty = True
                return True
        return False

    def snapshot(self) -> list[LineItem]:
        """Copy of the current items; later mutations do not affect it."""
        return list(self._items)

    def clear(self) -> None:
        if self._items:
            self._items.clear()
            self._dirty = True

    def export(self) -> dict:
        return {'items': [item.export() for item in self._items]}

    @classmethod
    def restore(cls, id_: int, state: dict | None) -> 'Cart':
        """Rebuild a cart from its persisted record.

        A missing record yields an empty cart.
        """
        if not state:
            return cls(id_)
        return cls(id_, [LineItem.restore(i) for i in state.get('items', ())])

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return "Cart(id=%r, items=%r)" % (self._id, self._items)
