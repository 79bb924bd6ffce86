"""Saved preferences: the founder profile and the strategy-map layout."""

from fastapi import APIRouter, Depends, HTTPException

from lens.api.deps import get_profile_store, get_studio
from lens.schemas.configuration import Profile
from lens.schemas.strategy_map import StrategyMapData
from lens.services.profile_store import ProfileStore
from lens.services.studio import Studio

router = APIRouter()


@router.get("/{studio_id}/profile", response_model=Profile)
async def load_profile(
    studio: Studio = Depends(get_studio),
    store: ProfileStore = Depends(get_profile_store),
) -> Profile:
    """Load the saved profile and apply it to the studio."""
    profile = await store.load_profile(studio.owner_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="No saved profile")
    return studio.configure(profile)


@router.put("/{studio_id}/profile", response_model=Profile)
async def save_profile(
    profile: Profile,
    studio: Studio = Depends(get_studio),
    store: ProfileStore = Depends(get_profile_store),
) -> Profile:
    await store.save_profile(studio.owner_id, profile)
    return studio.configure(profile)


@router.get("/{studio_id}/strategy-map/layout", response_model=StrategyMapData)
async def load_strategy_map(
    studio: Studio = Depends(get_studio),
    store: ProfileStore = Depends(get_profile_store),
) -> StrategyMapData:
    """Load the saved layout and make it the studio's current map."""
    layout = await store.load_strategy_map(studio.owner_id)
    if layout is None:
        raise HTTPException(status_code=404, detail="No saved strategy map")
    return studio.load_strategy_map(layout)


@router.put("/{studio_id}/strategy-map/layout", response_model=StrategyMapData)
async def save_strategy_map(
    studio: Studio = Depends(get_studio),
    store: ProfileStore = Depends(get_profile_store),
) -> StrategyMapData:
    """Save the studio's current map, including edges added by hand."""
    if studio.strategy_map is None:
        raise HTTPException(status_code=409, detail="Generate a strategy map first")
    await store.save_strategy_map(studio.owner_id, studio.strategy_map)
    return studio.strategy_map
