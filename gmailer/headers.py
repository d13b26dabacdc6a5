from typing import Dict, Iterator, List, Optional, Tuple


class Header:
    """Multi-valued MIME header mapping with case-insensitive keys.

    Each name is stored once, spelled the way it was first inserted, and
    may carry several values. ``set`` replaces every value of a name while
    keeping its original spelling; ``add`` appends one more value.

    Example:
        h = Header()
        h.set("Content-Type", "text/plain")
        h.get("content-type")  # "text/plain"
    """

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self._fields: Dict[str, Tuple[str, List[str]]] = {}
        for key, value in (items or {}).items():
            self.set(key, value)

    def set(self, key: str, value: str) -> None:
        existing = self._fields.get(key.lower())
        name = existing[0] if existing else key
        self._fields[key.lower()] = (name, [value])

    def add(self, key: str, value: str) -> None:
        existing = self._fields.get(key.lower())
        if existing:
            existing[1].append(value)
        else:
            self._fields[key.lower()] = (key, [value])

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Returns the first value stored under ``key``."""
        field = self._fields.get(key.lower())
        return field[1][0] if field else default

    def values(self, key: str) -> List[str]:
        field = self._fields.get(key.lower())
        return list(field[1]) if field else []

    def remove(self, key: str) -> None:
        self._fields.pop(key.lower(), None)

    def update(self, other: "Header") -> None:
        """Replaces the values of every name present in ``other``."""
        for key, values in other.items():
            self.set(key, values[0])
            for value in values[1:]:
                self.add(key, value)

    def copy(self) -> "Header":
        clone = Header()
        clone.update(self)
        return clone

    def items(self) -> List[Tuple[str, List[str]]]:
        return [(name, list(values)) for name, values in self._fields.values()]

    def sorted_items(self) -> Iterator[Tuple[str, str]]:
        """Yields ``(name, value)`` pairs with names in lexicographic order."""
        for name, values in sorted(self._fields.values(), key=lambda f: f[0]):
            for value in values:
                yield name, value

    def lines(self) -> Iterator[str]:
        """Yields ``Key: Value`` lines with keys in lexicographic order."""
        for name, value in self.sorted_items():
            yield f"{name}: {value}"

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Header({dict((k, v) for k, v in self.items())!r})"
