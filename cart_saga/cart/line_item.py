"""Line item - a single product entry in the cart."""

import dataclasses


__all__ = (
    'LineItem',
)


@dataclasses.dataclass(frozen=True)
class LineItem:
    """Immutable product entry, compared by name.

    There is no quantity: the same product added twice occupies two entries.
    """
    name: str

    def export(self) -> dict:
        return {'name': self.name}

    @classmethod
    def restore(cls, state: dict) -> 'LineItem':
        return cls(state['name'])
