"""StrategyMapService: business system map with synthesised layout.

The model supplies node identity (id, label, category) and edges; positions
always come from lens.domain.layout. Normalisation before validation:
- nodes with an unknown category or a blank id are dropped
- duplicate ids keep the first node
- at most MAX_NODES nodes are kept
- edges whose endpoints are not kept nodes are dropped
"""

from typing import Any

import structlog

from lens.domain.layout import RandomSource, layout_nodes
from lens.gateway import schema as s
from lens.gateway.payloads import coerce_str
from lens.gateway.protocol import Gateway
from lens.schemas.configuration import BusinessStage
from lens.schemas.strategy_map import NodeCategory, StrategyMapData

logger = structlog.get_logger(__name__)

MIN_NODES: int = 6
MAX_NODES: int = 10

STRATEGY_MAP_SCHEMA = s.obj(
    {
        "nodes": s.array(
            s.obj(
                {
                    "id": s.string(),
                    "label": s.string(),
                    "category": s.string(enum=[c.value for c in NodeCategory]),
                }
            )
        ),
        "edges": s.array(
            s.obj(
                {
                    "from": s.string(),
                    "to": s.string(),
                    "label": s.string(),
                }
            )
        ),
    },
    required=["nodes", "edges"],
)


def build_strategy_map_prompt(topic: str, stage: BusinessStage) -> str:
    return f"""Analyze the business topic: "{topic}" (Stage: {stage}).
Deconstruct this business into a System Map of {MIN_NODES} to {MAX_NODES} key interconnected components.

Categorize each node into:
- 'Operation' (Internal processes, logistics)
- 'Product' (The offering, features)
- 'Market' (Customers, channels, competitors)
- 'Finance' (Revenue, costs, funding)
- 'Risk' (Regulations, dependencies)

Define directional edges between nodes (by id) to show value flow or dependency.
Example: "Product" -> "Market" (Label: "Distribution")."""


def normalize_nodes(raw: Any) -> list[tuple[str, str, NodeCategory]]:
    nodes: list[tuple[str, str, NodeCategory]] = []
    seen: set[str] = set()
    for entry in raw if isinstance(raw, list) else []:
        if not isinstance(entry, dict):
            continue
        node_id = coerce_str(entry.get("id"))
        try:
            category = NodeCategory(coerce_str(entry.get("category")).capitalize())
        except ValueError:
            logger.info("strategy_map_node_dropped", node_id=node_id, reason="unknown_category")
            continue
        if not node_id or node_id in seen:
            logger.info("strategy_map_node_dropped", node_id=node_id, reason="missing_or_duplicate_id")
            continue
        seen.add(node_id)
        nodes.append((node_id, coerce_str(entry.get("label"), node_id), category))

    if len(nodes) > MAX_NODES:
        logger.info("strategy_map_nodes_truncated", received=len(nodes))
    return nodes[:MAX_NODES]


def normalize_edges(raw: Any, node_ids: set[str]) -> list[dict[str, Any]]:
    edges = []
    for entry in raw if isinstance(raw, list) else []:
        if not isinstance(entry, dict):
            continue
        source = coerce_str(entry.get("from"))
        target = coerce_str(entry.get("to"))
        if source not in node_ids or target not in node_ids:
            logger.info("strategy_map_dangling_edge_dropped", source=source, target=target)
            continue
        edges.append({"from": source, "to": target, "label": coerce_str(entry.get("label")) or None})
    return edges


class StrategyMapService:
    """Strategy map orchestrator.

    Public API:
        generate(topic, stage) -> StrategyMapData
    """

    def __init__(self, gateway: Gateway, rng: RandomSource | None = None):
        """Initialize with an optional jitter source (random.Random(seed) in tests)."""
        self._gateway = gateway
        self._rng = rng

    async def generate(self, topic: str, stage: BusinessStage) -> StrategyMapData:
        reply = await self._gateway.generate_structured(
            build_strategy_map_prompt(topic, stage),
            STRATEGY_MAP_SCHEMA,
        )
        raw_nodes = normalize_nodes(reply.data.get("nodes"))
        if len(raw_nodes) < MIN_NODES:
            logger.info("strategy_map_sparse", topic=topic, nodes=len(raw_nodes))

        nodes = layout_nodes(raw_nodes, self._rng)
        edges = normalize_edges(reply.data.get("edges"), {node_id for node_id, _, _ in raw_nodes})
        return StrategyMapData.decode(
            {"nodes": [n.model_dump(by_alias=True) for n in nodes], "edges": edges},
            feature="strategy map",
        )
