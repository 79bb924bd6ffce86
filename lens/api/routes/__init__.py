from fastapi import APIRouter

from lens.api.routes import features, health, profile, studios

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(studios.router, prefix="/studios", tags=["studios"])
api_router.include_router(features.router, prefix="/studios", tags=["features"])
api_router.include_router(profile.router, prefix="/studios", tags=["profile"])
