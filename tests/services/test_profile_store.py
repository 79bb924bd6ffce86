"""Tests for ProfileStore over fakeredis (keys are per owner)."""

import json

import fakeredis.aioredis
import pytest

from lens.schemas.configuration import BusinessStage, Profile, VisualStyle
from lens.schemas.strategy_map import NodeCategory, StrategyEdge, StrategyMapData, StrategyNode
from lens.services.profile_store import ProfileStore, profile_key, strategy_map_key

pytestmark = pytest.mark.unit


@pytest.fixture
def redis_client():
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
def store(redis_client):
    return ProfileStore(redis_client)


LAYOUT = StrategyMapData(
    nodes=[
        StrategyNode(id="app", label="App", category=NodeCategory.PRODUCT, x=410.5, y=290),
        StrategyNode(id="owners", label="Owners", category=NodeCategory.MARKET, x=640, y=210),
    ],
    edges=[StrategyEdge(from_id="app", to_id="owners", label="Distribution")],
)


class TestProfile:
    @pytest.mark.asyncio
    async def test_round_trip(self, store):
        profile = Profile(stage=BusinessStage.GROWTH, style=VisualStyle.TECH_DARK)
        await store.save_profile("s1", profile)
        assert await store.load_profile("s1") == profile

    @pytest.mark.asyncio
    async def test_stored_as_camel_case_json(self, store, redis_client):
        await store.save_profile("s1", Profile())
        stored = json.loads(await redis_client.get("solopreneur_profile:s1"))
        assert stored == {"stage": "Ideation", "style": "Modern SaaS", "focus": "Strategy"}

    @pytest.mark.asyncio
    async def test_missing_is_none(self, store):
        assert await store.load_profile("nobody") is None

    @pytest.mark.asyncio
    async def test_invalid_value_is_none(self, store, redis_client):
        await redis_client.set(profile_key("s1"), '{"stage": "Pre-Seed"}')
        assert await store.load_profile("s1") is None

    @pytest.mark.asyncio
    async def test_owners_are_isolated(self, store):
        await store.save_profile("s1", Profile(stage=BusinessStage.SCALE))
        assert await store.load_profile("s2") is None


class TestStrategyMapLayout:
    @pytest.mark.asyncio
    async def test_round_trip_keeps_positions_and_edges(self, store):
        await store.save_strategy_map("s1", LAYOUT)
        assert await store.load_strategy_map("s1") == LAYOUT

    @pytest.mark.asyncio
    async def test_wire_format(self, store, redis_client):
        await store.save_strategy_map("s1", LAYOUT)
        stored = json.loads(await redis_client.get(strategy_map_key("s1")))
        assert stored["edges"] == [{"from": "app", "to": "owners", "label": "Distribution"}]

    @pytest.mark.asyncio
    async def test_dangling_stored_edge_is_none(self, store, redis_client):
        payload = LAYOUT.model_dump(by_alias=True)
        payload["edges"].append({"from": "app", "to": "ghost", "label": None})
        await redis_client.set(strategy_map_key("s1"), json.dumps(payload))

        assert await store.load_strategy_map("s1") is None
