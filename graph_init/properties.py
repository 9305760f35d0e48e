"""Property key bookkeeping shared by the ontology and index planners."""

import itertools
from dataclasses import dataclass

from graph_init.exceptions import InconsistentPropertyError


@dataclass
class PropertyKey:
    """A property key and whether it has been declared yet.

    ``cardinality`` is upper case; an empty string means the declaration
    leaves cardinality to the backend default.
    """

    name: str
    data_type: str
    cardinality: str = ""
    declared: bool = False

    def __post_init__(self) -> None:
        self.name = self.name.strip()
        self.data_type = self.data_type.strip()
        self.cardinality = self.cardinality.strip().upper()

    def describe(self) -> str:
        if self.cardinality:
            return f"{self.data_type}/{self.cardinality}"
        return self.data_type


class PropertyRegistry:
    """Records property keys by name, rejecting conflicting redeclarations."""

    def __init__(self) -> None:
        self._keys: dict[str, PropertyKey] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self):
        return iter(self._keys.values())

    def get(self, name: str) -> PropertyKey | None:
        return self._keys.get(name)

    def record(self, key: PropertyKey) -> PropertyKey:
        """Record a property, or check it against an existing record.

        Returns:
            The registered PropertyKey (the existing one if already known).

        Raises:
            InconsistentPropertyError: If the name is known with a different
                type or cardinality.
        """
        existing = self._keys.get(key.name)
        if existing is None:
            self._keys[key.name] = key
            return key

        if (existing.data_type, existing.cardinality) != (key.data_type, key.cardinality):
            raise InconsistentPropertyError(key.name, existing.describe(), key.describe())
        return existing

    def pending(self) -> list[PropertyKey]:
        """Properties not declared yet, in first-recorded order."""
        return [key for key in self._keys.values() if not key.declared]


class IndexNamer:
    """Generates index names index0, index1, ..."""

    def __init__(self, prefix: str = "index") -> None:
        self._prefix = prefix
        self._counter = itertools.count()

    def next_name(self) -> str:
        return f"{self._prefix}{next(self._counter)}"
