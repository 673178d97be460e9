"""Mod content items and the append-only collection that holds them."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING, overload

from packages.modhelper_shared.errors import LifecycleError

if TYPE_CHECKING:
    from .mod import Mod


class ModContent:
    """A registrable unit owned by exactly one mod.

    Subclasses implement :meth:`register` to make the item live in the host.
    :meth:`load` may be overridden to expand one discovered class into several
    instances; by default it yields ``self``.
    """

    #: Set when the item is added to a mod; never reassigned by the core.
    mod: Mod | None = None
    _registered: bool = False

    @property
    def name(self) -> str:
        """Stable lookup name; defaults to the class name."""
        return type(self).__name__

    @property
    def id(self) -> str:
        """Globally unique id: the owning mod's id prefix plus :attr:`name`."""
        if self.mod is None:
            raise LifecycleError(f"{self.name} has not been added to a mod")
        return f"{self.mod.id_prefix}{self.name}"

    @property
    def registered(self) -> bool:
        return self._registered

    def load(self) -> Iterable[ModContent]:
        """Produce the instances this item stands for."""
        yield self

    def register(self) -> None:
        """Make this item known to the host; runs once in the registration phase."""

    def run_registration(self) -> None:
        """Call :meth:`register` once; a second call raises ``LifecycleError``.

        Content added to a mod after its registration task has finished is
        not picked up by the host; the code that adds it calls this instead.
        """
        if self._registered:
            raise LifecycleError(f"{self.name} has already been registered")
        self.register()
        self._registered = True

    def __repr__(self) -> str:
        owner = self.mod.info.name if self.mod is not None else None
        return f"{type(self).__name__}(name={self.name!r}, mod={owner!r})"


class ContentCollection(Sequence[ModContent]):
    """Ordered, append-only content of one mod with a name index.

    The collection object is created once per mod and only grows. Positional
    access always reads the live list, so a cursor held by a load task sees
    items appended after the cursor was created.
    """

    def __init__(self) -> None:
        self._items: list[ModContent] = []
        self._by_name: dict[str, ModContent] = {}

    def append(self, item: ModContent) -> None:
        self._items.append(item)
        self._by_name.setdefault(item.name, item)

    def extend(self, items: Iterable[ModContent]) -> None:
        for item in items:
            self.append(item)

    def get(self, name: str) -> ModContent | None:
        """Return the first item added under ``name``."""
        return self._by_name.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(item.name for item in self._items)

    @overload
    def __getitem__(self, index: int) -> ModContent: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[ModContent]: ...

    def __getitem__(self, index: int | slice) -> ModContent | Sequence[ModContent]:
        if isinstance(index, slice):
            return tuple(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ModContent]:
        return iter(tuple(self._items))

    def __contains__(self, item: object) -> bool:
        return any(existing is item for existing in self._items)
