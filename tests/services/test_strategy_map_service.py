"""Tests for StrategyMapService."""

import random

import pytest

from lens.domain.layout import CANVAS_HEIGHT, CANVAS_WIDTH
from lens.schemas.strategy_map import NodeCategory
from lens.services.strategy_map_service import (
    MAX_NODES,
    StrategyMapService,
    normalize_edges,
    normalize_nodes,
)

pytestmark = pytest.mark.unit


class TestGenerate:
    @pytest.mark.asyncio
    async def test_happy_path(self, gateway):
        data = await StrategyMapService(gateway, rng=random.Random(1)).generate("plant app", "Ideation")

        ids = {n.id for n in data.nodes}
        assert len(data.nodes) == 6
        assert len(data.edges) == 4
        assert all(e.from_id in ids and e.to_id in ids for e in data.edges)
        assert all(0 <= n.x <= CANVAS_WIDTH and 0 <= n.y <= CANVAS_HEIGHT for n in data.nodes)

    @pytest.mark.asyncio
    async def test_same_seed_same_layout(self, gateway):
        first = await StrategyMapService(gateway, rng=random.Random(3)).generate("plant app", "Ideation")
        second = await StrategyMapService(gateway, rng=random.Random(3)).generate("plant app", "Ideation")
        assert first == second

    @pytest.mark.asyncio
    async def test_dangling_edges_and_bad_nodes_dropped(self, gateway):
        gateway.set_structured(
            "nodes",
            {
                "nodes": [
                    {"id": "a", "label": "A", "category": "product"},
                    {"id": "b", "label": "B", "category": "Legal"},
                    {"id": "a", "label": "A again", "category": "Market"},
                    {"id": "c", "category": "Finance"},
                ],
                "edges": [
                    {"from": "a", "to": "c", "label": "Revenue"},
                    {"from": "a", "to": "b"},
                    {"from": "ghost", "to": "a"},
                ],
            },
        )

        data = await StrategyMapService(gateway, rng=random.Random(0)).generate("plant app", "Ideation")

        assert [(n.id, n.label, n.category) for n in data.nodes] == [
            ("a", "A", NodeCategory.PRODUCT),
            ("c", "c", NodeCategory.FINANCE),
        ]
        assert [(e.from_id, e.to_id) for e in data.edges] == [("a", "c")]

    @pytest.mark.asyncio
    async def test_empty_reply_is_empty_map(self, gateway):
        gateway.set_structured("nodes", {})
        data = await StrategyMapService(gateway).generate("plant app", "Ideation")
        assert data.nodes == []
        assert data.edges == []


def test_nodes_capped():
    raw = [{"id": f"n{i}", "label": f"N{i}", "category": "Market"} for i in range(MAX_NODES + 3)]
    assert len(normalize_nodes(raw)) == MAX_NODES


def test_blank_edge_label_is_none():
    edges = normalize_edges([{"from": "a", "to": "b", "label": "  "}], {"a", "b"})
    assert edges == [{"from": "a", "to": "b", "label": None}]
