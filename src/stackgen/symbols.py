"""
Symbol Tables for Code Generation
=================================

Two small tables back name resolution in the generator:

- SymbolTable interns keys (variable names or literal values) to dense
  integer ids, assigned in order of first appearance and never reused.
  One table holds variable names, another holds constants, so their id
  spaces are independent.

- ParameterScope maps the parameters of the function currently being
  generated to local slots. While active it shadows the variable table:
  reads of a parameter become LOAD_FAST instead of LOAD_NAME.

Literal Keys
------------
Python treats ``True == 1`` as equal dictionary keys. Constant tables
therefore tag booleans apart from numbers, so ``true`` and ``1`` get
distinct ids while ``1`` and ``1.0``, the same number, share one.
"""

from typing import Generic, Hashable, Iterator, TypeVar


K = TypeVar("K", bound=Hashable)


class SymbolTable(Generic[K]):
    """
    Interning table mapping keys to dense ids.

    Example:
        >>> names = SymbolTable()
        >>> names.intern("x"), names.intern("y"), names.intern("x")
        (0, 1, 0)
    """

    def __init__(self, literal_keys: bool = False):
        """
        Args:
            literal_keys: Keep boolean keys apart from numeric ones. Used
                          for literal constants so that True and 1 differ.
        """
        self._literal_keys = literal_keys
        self._ids: dict[Hashable, int] = {}
        self._keys: list[K] = []

    def _slot_key(self, key: K) -> Hashable:
        if self._literal_keys:
            return ("bool", key) if isinstance(key, bool) else ("value", key)
        return key

    def intern(self, key: K) -> int:
        """Return the id of key, assigning the next free id on first sight."""
        slot_key = self._slot_key(key)
        ident = self._ids.get(slot_key)
        if ident is None:
            ident = len(self._keys)
            self._ids[slot_key] = ident
            self._keys.append(key)
        return ident

    def __contains__(self, key: K) -> bool:
        return self._slot_key(key) in self._ids

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[K]:
        return iter(self._keys)

    def keys(self) -> list[K]:
        """Keys in id order: keys()[i] was interned with id i."""
        return list(self._keys)


class ParameterScope:
    """
    Parameter-to-slot table for the function body being generated.

    Functions do not nest, so there is only ever one active scope.
    """

    def __init__(self):
        self._slots: dict[str, int] = {}

    def enter(self, param_names: list[str]) -> None:
        """Register parameters in declaration order as slots 0, 1, 2, ..."""
        self._slots.clear()
        for name in param_names:
            if name not in self._slots:
                self._slots[name] = len(self._slots)

    def exit(self) -> None:
        """Drop every parameter; subsequent reads resolve as globals."""
        self._slots.clear()

    def is_param(self, name: str) -> bool:
        return name in self._slots

    def slot_of(self, name: str) -> int:
        return self._slots[name]

    def __len__(self) -> int:
        return len(self._slots)
