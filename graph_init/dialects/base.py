"""Common interface for the statement dialects."""

from abc import ABC, abstractmethod

from graph_init.properties import IndexNamer, PropertyKey

# OrientDB index types, which the index specification uses for every backend
INDEX_TYPES = frozenset(
    {
        "UNIQUE",
        "NOTUNIQUE",
        "FULLTEXT",
        "DICTIONARY",
        "UNIQUE_HASH_INDEX",
        "NOTUNIQUE_HASH_INDEX",
        "FULLTEXT_HASH_INDEX",
        "DICTIONARY_HASH_INDEX",
    }
)


def is_unique(index_type: str) -> bool:
    return index_type in ("UNIQUE", "UNIQUE_HASH_INDEX")


def is_fulltext(index_type: str) -> bool:
    return index_type.startswith("FULLTEXT")


class IndexDialect(ABC):
    """Formats the statements for one entry of the index specification."""

    #: Short name used on the command line (--dialect)
    name: str = ""

    @abstractmethod
    def index_statements(
        self,
        index_type: str,
        keys: list[PropertyKey],
        new_keys: list[PropertyKey],
        namer: IndexNamer,
    ) -> list[str]:
        """Build the statements declaring an index and its properties.

        Args:
            index_type: Upper-case index type (e.g. NOTUNIQUE, FULLTEXT).
            keys: Every property key the index covers, in file order.
            new_keys: The subset of ``keys`` not declared by an earlier index.
            namer: Source of generated index names.

        Returns:
            Statements in execution order; properties come first.
        """
        ...
