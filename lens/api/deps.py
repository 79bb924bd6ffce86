"""FastAPI dependencies: studio registry, gateway and profile store."""

from fastapi import Depends, HTTPException

from lens.db.redis import get_redis
from lens.gateway.gemini import GeminiGateway
from lens.gateway.protocol import Gateway
from lens.services.profile_store import ProfileStore
from lens.services.studio import DEFAULT_OWNER, Studio


class StudioRegistry:
    """In-process table of live studios, keyed by id."""

    def __init__(self):
        self._studios: dict[str, Studio] = {}

    def create(self, gateway: Gateway, owner_id: str = DEFAULT_OWNER) -> Studio:
        studio = Studio(gateway, owner_id=owner_id)
        self._studios[studio.id] = studio
        return studio

    def get(self, studio_id: str) -> Studio | None:
        return self._studios.get(studio_id)


_registry = StudioRegistry()


def get_registry() -> StudioRegistry:
    return _registry


def get_gateway() -> Gateway:
    return GeminiGateway()


def get_studio(studio_id: str, registry: StudioRegistry = Depends(get_registry)) -> Studio:
    studio = registry.get(studio_id)
    if studio is None:
        raise HTTPException(status_code=404, detail="Studio not found")
    return studio


def get_profile_store() -> ProfileStore:
    try:
        return ProfileStore(get_redis())
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail="Preference storage is unavailable") from e


def skipped(studio: Studio, feature: str, epoch: int, missing: str) -> HTTPException:
    """409 for a Studio call that returned None: in flight, stale, or nothing to work from."""
    if studio.guard.is_busy(feature):
        detail = f"{feature} is already in progress"
    elif studio.epoch != epoch:
        detail = "Result discarded: the studio moved on to a newer topic"
    else:
        detail = missing
    return HTTPException(status_code=409, detail=detail)
