"""Studio lifecycle, configuration, infographic and history routes."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from lens.api.deps import StudioRegistry, get_gateway, get_registry, get_studio, skipped
from lens.api.schemas import (
    CreateStudioRequest,
    ImageView,
    InstructionRequest,
    OptimizeResponse,
    StudioSnapshot,
    TopicRequest,
)
from lens.gateway.protocol import Gateway
from lens.schemas.configuration import Profile
from lens.services.studio import Feature, Studio

router = APIRouter()


@router.post("", response_model=StudioSnapshot, status_code=201)
async def create_studio(
    request: CreateStudioRequest | None = None,
    registry: StudioRegistry = Depends(get_registry),
    gateway: Gateway = Depends(get_gateway),
) -> StudioSnapshot:
    """Open a session. Saved preferences are shared by every session of the same owner."""
    request = request or CreateStudioRequest()
    return StudioSnapshot.of(registry.create(gateway, owner_id=request.owner_id))


@router.get("/{studio_id}", response_model=StudioSnapshot)
async def get_snapshot(studio: Studio = Depends(get_studio)) -> StudioSnapshot:
    return StudioSnapshot.of(studio)


@router.put("/{studio_id}/configuration", response_model=Profile)
async def configure(profile: Profile, studio: Studio = Depends(get_studio)) -> Profile:
    return studio.configure(profile)


@router.post("/{studio_id}/optimize", response_model=OptimizeResponse)
async def optimize_topic(request: TopicRequest, studio: Studio = Depends(get_studio)) -> OptimizeResponse:
    """Rewrite a rough idea into a two-sentence description."""
    topic = await studio.optimize_topic(request.topic)
    if topic is None:
        raise skipped(studio, Feature.OPTIMIZE, studio.epoch, "Nothing to optimize")
    return OptimizeResponse(topic=topic)


@router.post("/{studio_id}/generate", response_model=ImageView)
async def generate(request: TopicRequest, studio: Studio = Depends(get_studio)) -> ImageView:
    """Research the topic and render its infographic.

    Clears every derived artifact of the previous topic.
    """
    epoch = studio.epoch
    try:
        image = await studio.generate(request.topic)
    except ValueError as e:
        raise HTTPException(status_code=422, detail="Please enter a business topic to visualize.") from e
    if image is None:
        raise skipped(studio, Feature.VISUAL, epoch + 1, "Generation was skipped")
    return ImageView.of(image)


@router.post("/{studio_id}/edit", response_model=ImageView)
async def edit(request: InstructionRequest, studio: Studio = Depends(get_studio)) -> ImageView:
    epoch = studio.epoch
    try:
        image = await studio.edit(request.instruction)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    if image is None:
        raise skipped(studio, Feature.VISUAL, epoch, "Generate an infographic before editing it")
    return ImageView.of(image)


@router.post("/{studio_id}/history/{image_id}/restore", response_model=StudioSnapshot)
async def restore(image_id: str, studio: Studio = Depends(get_studio)) -> StudioSnapshot:
    if studio.restore(image_id) is None:
        raise HTTPException(status_code=404, detail="Image not found in history")
    return StudioSnapshot.of(studio)


@router.delete("/{studio_id}/history", response_model=StudioSnapshot)
async def clear_history(studio: Studio = Depends(get_studio)) -> StudioSnapshot:
    studio.clear_history()
    return StudioSnapshot.of(studio)


@router.get("/{studio_id}/report", response_class=PlainTextResponse)
async def report(studio: Studio = Depends(get_studio)) -> PlainTextResponse:
    markdown = studio.report()
    if markdown is None:
        raise HTTPException(status_code=409, detail="Generate an infographic before exporting a report")
    return PlainTextResponse(markdown, media_type="text/markdown")
