"""
Runtime symbol table for shapeguard.

``Symbol`` is the atom type of the type system. Symbols are interned, so
two symbols with the same name are the same object. Coercion from a string
only ever looks a symbol up with ``Symbol.existing`` and never creates one,
which keeps untrusted input from growing the table.
"""

import threading
from typing import Dict, Optional


class Symbol:
    """
    An interned, immutable name.

    Example:
        >>> Symbol("ready") is Symbol("ready")
        True
        >>> Symbol.existing("never-created") is None
        True
    """

    __slots__ = ("name",)

    _table: Dict[str, "Symbol"] = {}
    _lock = threading.Lock()

    def __new__(cls, name: str) -> "Symbol":
        if not isinstance(name, str) or not name:
            raise ValueError("Symbol name must be a non-empty string")

        with cls._lock:
            existing = cls._table.get(name)
            if existing is not None:
                return existing
            symbol = super().__new__(cls)
            object.__setattr__(symbol, "name", name)
            cls._table[name] = symbol
            return symbol

    def __setattr__(self, key: str, value: object) -> None:
        raise AttributeError("Symbol is immutable")

    def __reduce__(self):
        return (Symbol, (self.name,))

    def __repr__(self) -> str:
        return f"Symbol({self.name!r})"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def existing(cls, name: str) -> Optional["Symbol"]:
        """Return the symbol called ``name`` if it was already interned."""
        with cls._lock:
            return cls._table.get(name)
