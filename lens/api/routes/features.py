"""Derived-artifact routes.

Each route runs one Studio feature. A None result (feature already in flight,
nothing to work from yet, or a stale result) is answered with 409.
"""

from fastapi import APIRouter, Depends, HTTPException

from lens.api.deps import get_studio, skipped
from lens.api.schemas import AudioResponse, ChatResponse, MockupRequest, MockupView, QuestionRequest, encode_audio
from lens.schemas.artifacts import CompetitorAnalysis, FinancialModel, PitchKit, RiskAnalysis
from lens.schemas.board import BoardMeeting
from lens.schemas.strategy_map import StrategyEdge, StrategyMapData
from lens.services.studio import Feature, Studio

router = APIRouter()

NEEDS_IMAGE = "Generate an infographic first"


@router.post("/{studio_id}/risk", response_model=RiskAnalysis)
async def analyze_risk(studio: Studio = Depends(get_studio)) -> RiskAnalysis:
    epoch = studio.epoch
    risk = await studio.analyze_risk()
    if risk is None:
        raise skipped(studio, Feature.RISK, epoch, NEEDS_IMAGE)
    return risk


@router.post("/{studio_id}/board", response_model=BoardMeeting)
async def call_board_meeting(studio: Studio = Depends(get_studio)) -> BoardMeeting:
    epoch = studio.epoch
    meeting = await studio.call_board_meeting()
    if meeting is None:
        raise skipped(studio, Feature.BOARD, epoch, NEEDS_IMAGE)
    return meeting


@router.post("/{studio_id}/board/chat", response_model=ChatResponse)
async def ask_board(request: QuestionRequest, studio: Studio = Depends(get_studio)) -> ChatResponse:
    """Ask the board a follow-up; returns the new replies and the updated meeting."""
    epoch = studio.epoch
    try:
        replies = await studio.ask_board(request.question)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    if replies is None or studio.board is None:
        raise skipped(studio, Feature.BOARD_CHAT, epoch, "Call a board meeting first")
    return ChatResponse(replies=replies, meeting=studio.board)


@router.post("/{studio_id}/strategy-map", response_model=StrategyMapData)
async def generate_strategy_map(studio: Studio = Depends(get_studio)) -> StrategyMapData:
    epoch = studio.epoch
    strategy_map = await studio.generate_strategy_map()
    if strategy_map is None:
        raise skipped(studio, Feature.STRATEGY_MAP, epoch, NEEDS_IMAGE)
    return strategy_map


@router.post("/{studio_id}/strategy-map/edges", response_model=StrategyMapData)
async def add_strategy_edge(edge: StrategyEdge, studio: Studio = Depends(get_studio)) -> StrategyMapData:
    try:
        strategy_map = studio.add_strategy_edge(edge)
    except ValueError as e:
        raise HTTPException(status_code=422, detail="Both ends of an edge must be nodes of the map") from e
    if strategy_map is None:
        raise HTTPException(status_code=409, detail="Generate a strategy map first")
    return strategy_map


@router.post("/{studio_id}/pitch", response_model=PitchKit)
async def generate_pitch(studio: Studio = Depends(get_studio)) -> PitchKit:
    epoch = studio.epoch
    pitch = await studio.generate_pitch()
    if pitch is None:
        raise skipped(studio, Feature.PITCH, epoch, NEEDS_IMAGE)
    return pitch


@router.post("/{studio_id}/competitors", response_model=CompetitorAnalysis)
async def analyze_competitors(studio: Studio = Depends(get_studio)) -> CompetitorAnalysis:
    epoch = studio.epoch
    competitors = await studio.analyze_competitors()
    if competitors is None:
        raise skipped(studio, Feature.COMPETITORS, epoch, NEEDS_IMAGE)
    return competitors


@router.post("/{studio_id}/financials", response_model=FinancialModel)
async def generate_financials(studio: Studio = Depends(get_studio)) -> FinancialModel:
    epoch = studio.epoch
    financials = await studio.generate_financials()
    if financials is None:
        raise skipped(studio, Feature.FINANCIALS, epoch, NEEDS_IMAGE)
    return financials


@router.post("/{studio_id}/mockup", response_model=MockupView)
async def generate_mockup(request: MockupRequest, studio: Studio = Depends(get_studio)) -> MockupView:
    epoch = studio.epoch
    mockup = await studio.generate_mockup(request.type)
    if mockup is None:
        raise skipped(studio, Feature.MOCKUP, epoch, NEEDS_IMAGE)
    return MockupView.of(mockup)


@router.post("/{studio_id}/audio", response_model=AudioResponse)
async def toggle_audio_brief(studio: Studio = Depends(get_studio)) -> AudioResponse:
    """Start the audio brief, or stop it if one is playing."""
    epoch = studio.epoch
    was_playing = studio.audio.is_playing
    brief = await studio.toggle_audio_brief()
    if brief is None:
        if was_playing:
            return AudioResponse(playing=False)
        raise skipped(studio, Feature.AUDIO, epoch, NEEDS_IMAGE)
    return AudioResponse(playing=True, audio=encode_audio(brief.data), mime_type=brief.mime_type)


@router.delete("/{studio_id}/audio", response_model=AudioResponse)
async def stop_audio(studio: Studio = Depends(get_studio)) -> AudioResponse:
    studio.stop_audio()
    return AudioResponse(playing=False)
