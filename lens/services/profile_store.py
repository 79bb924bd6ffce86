"""ProfileStore: persisted founder preferences and strategy-map layout.

Two records per owner, each stored as camelCase JSON under a fixed key:
- solopreneur_profile:{owner_id}       -> {stage, style, focus}
- solopreneur_strategy_map:{owner_id}  -> {nodes, edges}

Loading a missing key returns None. A stored value that no longer validates
is logged and treated as missing.
"""

import redis.asyncio as redis
import structlog
from pydantic import ValidationError

from lens.schemas.configuration import Profile
from lens.schemas.strategy_map import StrategyMapData

logger = structlog.get_logger(__name__)

PROFILE_KEY = "solopreneur_profile"
STRATEGY_MAP_KEY = "solopreneur_strategy_map"


def profile_key(owner_id: str) -> str:
    return f"{PROFILE_KEY}:{owner_id}"


def strategy_map_key(owner_id: str) -> str:
    return f"{STRATEGY_MAP_KEY}:{owner_id}"


class ProfileStore:
    """Redis-backed persistence for profiles and strategy-map layouts.

    Public API:
        save_profile(owner_id, profile) / load_profile(owner_id)
        save_strategy_map(owner_id, layout) / load_strategy_map(owner_id)
    """

    def __init__(self, redis_client: redis.Redis):
        self._redis = redis_client

    async def save_profile(self, owner_id: str, profile: Profile) -> None:
        await self._redis.set(profile_key(owner_id), profile.model_dump_json(by_alias=True))
        logger.info("profile_saved", owner_id=owner_id)

    async def load_profile(self, owner_id: str) -> Profile | None:
        raw = await self._redis.get(profile_key(owner_id))
        if raw is None:
            return None
        try:
            return Profile.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("profile_invalid", owner_id=owner_id, error=str(e))
            return None

    async def save_strategy_map(self, owner_id: str, layout: StrategyMapData) -> None:
        await self._redis.set(strategy_map_key(owner_id), layout.model_dump_json(by_alias=True))
        logger.info("strategy_map_saved", owner_id=owner_id, nodes=len(layout.nodes), edges=len(layout.edges))

    async def load_strategy_map(self, owner_id: str) -> StrategyMapData | None:
        raw = await self._redis.get(strategy_map_key(owner_id))
        if raw is None:
            return None
        try:
            return StrategyMapData.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("strategy_map_invalid", owner_id=owner_id, error=str(e))
            return None
