"""Gremlin management-system scripts (JanusGraph/Titan).

Every script runs in its own management transaction::

    m = graph.openManagement();m.makeVertexLabel('Host').make();m.commit();

A property key has to be created in the same transaction as the index that
uses it, so index scripts carry their property key declarations.
"""

from graph_init.dialects.base import IndexDialect, is_fulltext, is_unique
from graph_init.properties import IndexNamer, PropertyKey


class GremlinDialect(IndexDialect):
    """Builds Gremlin management scripts."""

    name = "gremlin"

    def __init__(
        self,
        graph: str = "graph",
        mixed_index_backend: str = "search",
        enforce_unique: bool = False,
    ):
        self.graph = graph
        self.mixed_index_backend = mixed_index_backend
        self.enforce_unique = enforce_unique

    def transaction(self, *declarations: str) -> str:
        """Wrap declarations in a management transaction."""
        return f"m = {self.graph}.openManagement();" + "".join(declarations) + "m.commit();"

    def vertex_label(self, label: str) -> str:
        return self.transaction(f"m.makeVertexLabel('{label}').make();")

    def edge_label(self, label: str, multiplicity: str = "") -> str:
        multiplicity = multiplicity.strip().upper()
        declaration = f"m.makeEdgeLabel('{label}')"
        if multiplicity:
            declaration += f".multiplicity(Multiplicity.{multiplicity})"
        return self.transaction(declaration + ".make();")

    def property_key(self, key: PropertyKey) -> str:
        """Property key declaration, without the transaction wrapper."""
        declaration = f"m.makePropertyKey('{key.name}').dataType({key.data_type}.class)"
        if key.cardinality:
            declaration += f".cardinality(Cardinality.{key.cardinality})"
        return declaration + ".make();"

    def build_index(
        self,
        index_name: str,
        key_names: list[str],
        mixed: bool = False,
        unique: bool = False,
    ) -> str:
        """Index builder chain, without the transaction wrapper."""
        declaration = f"m.buildIndex('{index_name}', Vertex.class)"
        for key_name in key_names:
            declaration += f".addKey(m.getPropertyKey('{key_name}'))"

        if mixed:
            return declaration + f".buildMixedIndex('{self.mixed_index_backend}');"
        if unique:
            declaration += ".unique()"
        return declaration + ".buildCompositeIndex();"

    def property_declaration(self, key: PropertyKey) -> str:
        """A stand-alone property key declaration."""
        return self.transaction(self.property_key(key))

    def index_declaration(
        self,
        index_name: str,
        keys: list[PropertyKey],
        mixed: bool = False,
        unique: bool = False,
    ) -> str:
        """Declare the given keys and an index over them in one transaction."""
        declarations = [self.property_key(key) for key in keys]
        declarations.append(
            self.build_index(index_name, [key.name for key in keys], mixed=mixed, unique=unique)
        )
        return self.transaction(*declarations)

    def index_statements(
        self,
        index_type: str,
        keys: list[PropertyKey],
        new_keys: list[PropertyKey],
        namer: IndexNamer,
    ) -> list[str]:
        index_name = namer.next_name()
        declarations = [self.property_key(key) for key in new_keys]
        declarations.append(
            self.build_index(
                index_name,
                [key.name for key in keys],
                mixed=is_fulltext(index_type),
                unique=is_unique(index_type),
            )
        )
        return [self.transaction(*declarations)]
