"""Tests for record contracts: strategy map invariant, trend shape, board seats, configuration."""

import pytest
from pydantic import ValidationError

from lens.core.exceptions import MalformedResponse
from lens.schemas.board import Advisor, AdvisorRole, BoardMeeting, Verdict
from lens.schemas.configuration import BusinessStage, Profile, RequestConfiguration, VisualStyle
from lens.schemas.research import DEFAULT_TREND, TrendData
from lens.schemas.strategy_map import NodeCategory, StrategyEdge, StrategyMapData, StrategyNode

pytestmark = pytest.mark.unit


def _node(node_id: str, category: NodeCategory = NodeCategory.PRODUCT) -> StrategyNode:
    return StrategyNode(id=node_id, label=node_id.title(), category=category, x=400, y=300)


# ---------------------------------------------------------------------------
# Strategy map
# ---------------------------------------------------------------------------


class TestStrategyMap:
    def test_edges_between_known_nodes_are_accepted(self):
        data = StrategyMapData(nodes=[_node("a"), _node("b")], edges=[StrategyEdge(from_id="a", to_id="b")])
        assert data.edges[0].from_id == "a"

    def test_dangling_edge_is_rejected(self):
        with pytest.raises(ValidationError):
            StrategyMapData(nodes=[_node("a")], edges=[StrategyEdge(from_id="a", to_id="ghost")])

    def test_duplicate_node_ids_are_rejected(self):
        with pytest.raises(ValidationError):
            StrategyMapData(nodes=[_node("a"), _node("a")])

    def test_wire_format_uses_from_and_to(self):
        data = StrategyMapData(nodes=[_node("a"), _node("b")], edges=[StrategyEdge(from_id="a", to_id="b")])
        dumped = data.model_dump(by_alias=True)
        assert dumped["edges"][0] == {"from": "a", "to": "b", "label": None}

    def test_parses_wire_format(self):
        data = StrategyMapData.model_validate(
            {
                "nodes": [
                    {"id": "a", "label": "A", "category": "Market", "x": 1, "y": 2},
                    {"id": "b", "label": "B", "category": "Risk", "x": 3, "y": 4},
                ],
                "edges": [{"from": "a", "to": "b", "label": "Flow"}],
            }
        )
        assert data.edges[0].label == "Flow"

    def test_with_edge_returns_new_map(self):
        original = StrategyMapData(nodes=[_node("a"), _node("b")])
        updated = original.with_edge(StrategyEdge(from_id="b", to_id="a", label="Feedback"))

        assert original.edges == []
        assert len(updated.edges) == 1
        assert updated.nodes == original.nodes

    def test_with_edge_rejects_unknown_endpoint(self):
        original = StrategyMapData(nodes=[_node("a")])
        with pytest.raises(ValueError):
            original.with_edge(StrategyEdge(from_id="a", to_id="nowhere"))


# ---------------------------------------------------------------------------
# Trend
# ---------------------------------------------------------------------------


class TestTrend:
    def test_default_trend_shape(self):
        assert DEFAULT_TREND.model_dump(by_alias=True, mode="json") == {
            "label": "Market Activity",
            "value": "Stable",
            "data": [40, 45, 50, 55, 50, 45, 40],
            "direction": "neutral",
        }

    @pytest.mark.parametrize("data", [[1, 2, 3], [10] * 8, [10, 20, 30, 40, 50, 60, 101], [-1] * 7])
    def test_invalid_series_rejected(self, data):
        with pytest.raises(ValidationError):
            TrendData(label="x", value="y", data=data, direction="up")


# ---------------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------------


def _advisor(role: AdvisorRole) -> Advisor:
    return Advisor(role=role, name=role.value, avatar_color="#123456", verdict=Verdict.APPROVE)


class TestBoardMeeting:
    def test_seats_each_role_once_in_order(self):
        meeting = BoardMeeting(advisors=[_advisor(r) for r in (AdvisorRole.CFO, AdvisorRole.CMO, AdvisorRole.CTO)])
        assert meeting.advisor(AdvisorRole.CMO).name == "CMO"
        assert meeting.chat_history == []

    @pytest.mark.parametrize(
        "roles",
        [
            (AdvisorRole.CFO, AdvisorRole.CMO),
            (AdvisorRole.CFO, AdvisorRole.CFO, AdvisorRole.CTO),
            (AdvisorRole.CTO, AdvisorRole.CMO, AdvisorRole.CFO),
        ],
    )
    def test_rejects_wrong_roster(self, roles):
        with pytest.raises(ValidationError):
            BoardMeeting(advisors=[_advisor(r) for r in roles])

    def test_rejects_non_hex_avatar_color(self):
        with pytest.raises(ValidationError):
            Advisor(role=AdvisorRole.CFO, name="Marcus", avatar_color="green", verdict=Verdict.PIVOT)


# ---------------------------------------------------------------------------
# Configuration and decoding
# ---------------------------------------------------------------------------


class TestConfiguration:
    def test_profile_defaults(self):
        profile = Profile()
        assert profile.stage == BusinessStage.IDEATION
        assert profile.style == VisualStyle.MODERN_SAAS
        assert profile.focus == "Strategy"

    def test_topic_is_stripped(self):
        config = RequestConfiguration(topic="  plant care  ")
        assert config.topic == "plant care"
        assert config.profile == Profile()

    @pytest.mark.parametrize("topic", ["", "   "])
    def test_blank_topic_rejected(self, topic):
        with pytest.raises(ValidationError, match="Please enter a business topic"):
            RequestConfiguration(topic=topic)

    def test_unknown_stage_rejected(self):
        with pytest.raises(ValidationError):
            Profile(stage="Pre-Seed")

    def test_camel_case_wire_names(self):
        profile = Profile.model_validate({"stage": "MVP", "style": "Tech Dark", "focus": "Sales"})
        assert profile.model_dump(by_alias=True, mode="json") == {
            "stage": "MVP",
            "style": "Tech Dark",
            "focus": "Sales",
        }


def test_decode_wraps_validation_errors():
    with pytest.raises(MalformedResponse) as exc_info:
        TrendData.decode({"label": "x"}, feature="research")
    assert exc_info.value.feature == "research"
    assert "Malformed research response" in str(exc_info.value)
