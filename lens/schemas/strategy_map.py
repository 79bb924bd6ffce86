"""Pydantic schemas for strategy map nodes and edges."""

from enum import StrEnum

from pydantic import Field, model_validator

from lens.schemas.base import LensModel


class NodeCategory(StrEnum):
    MARKET = "Market"
    PRODUCT = "Product"
    OPERATION = "Operation"
    FINANCE = "Finance"
    RISK = "Risk"


class StrategyNode(LensModel):
    """A component of the business system map; x/y are synthesised, never model-supplied."""

    id: str
    label: str
    category: NodeCategory
    x: float
    y: float


class StrategyEdge(LensModel):
    """A directed, optionally labelled edge between two node ids.

    Python callers may use from_id/to_id; the wire format uses "from"/"to".
    """

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    label: str | None = None


class StrategyMapData(LensModel):
    nodes: list[StrategyNode] = Field(default_factory=list)
    edges: list[StrategyEdge] = Field(default_factory=list)

    @model_validator(mode="after")
    def edges_reference_nodes(self) -> "StrategyMapData":
        ids = [n.id for n in self.nodes]
        if len(ids) != len(set(ids)):
            raise ValueError("strategy map node ids must be unique")
        known = set(ids)
        for edge in self.edges:
            if edge.from_id not in known or edge.to_id not in known:
                raise ValueError(f"edge {edge.from_id!r} -> {edge.to_id!r} references an unknown node")
        return self

    def with_edge(self, edge: StrategyEdge) -> "StrategyMapData":
        """Return a new map with edge appended.

        Raises:
            ValueError: if either endpoint is not a node of this map
        """
        return StrategyMapData(nodes=self.nodes, edges=[*self.edges, edge])
