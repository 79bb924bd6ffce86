"""Studio: one founder's working session over the feature orchestrators.

Architecture:
- Holds the session state: profile, image history (most recent first), the
  research behind the current image, every derived artifact and the audio slot
- Every feature runs inside its own FeatureGuard slot: a second call while the
  first is in flight is skipped (returns None) rather than queued
- Derived features work from the current image's topic; without an image they
  return None without calling the backend
- A generation epoch moves on every new topic generation, history restore and
  history clear; a result whose call started under an older epoch is dropped
  (stale_result_discarded) instead of overwriting newer state
- Board chat replies belong to the meeting they were asked in; replies that
  arrive after the board was reconvened or cleared are dropped
- Errors from the orchestrators propagate unchanged; the optimistic founder
  message of a failed board chat stays in the history
"""

import uuid
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import TypeVar

import structlog

from lens.artifacts.markdown_exporter import MarkdownExporter
from lens.core.audio import AudioSlot, BufferedAudio
from lens.core.locking import FeatureGuard
from lens.core.logging import feature_context
from lens.domain.conversation import QuestionAsked, RepliesReceived, apply_event, now_ms
from lens.domain.layout import RandomSource
from lens.gateway.protocol import Gateway
from lens.schemas.artifacts import (
    AudioBrief,
    CompetitorAnalysis,
    FinancialModel,
    GeneratedImage,
    PitchKit,
    ProductMockup,
    RiskAnalysis,
)
from lens.schemas.board import BoardMeeting, BoardMessage
from lens.schemas.configuration import MockupType, Profile, RequestConfiguration
from lens.schemas.research import ResearchResult
from lens.schemas.strategy_map import StrategyEdge, StrategyMapData
from lens.services.audio_service import AudioService
from lens.services.board_service import BoardService
from lens.services.competitor_service import CompetitorService
from lens.services.financial_service import FinancialService
from lens.services.image_service import ImageService
from lens.services.pitch_service import PitchService
from lens.services.research_service import ResearchService
from lens.services.risk_service import RiskService
from lens.services.strategy_map_service import StrategyMapService

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Feature(StrEnum):
    VISUAL = "visual"  # research + infographic, and infographic edits
    OPTIMIZE = "optimize"
    RISK = "risk"
    BOARD = "board"
    BOARD_CHAT = "board_chat"
    STRATEGY_MAP = "strategy_map"
    PITCH = "pitch"
    COMPETITORS = "competitors"
    FINANCIALS = "financials"
    MOCKUP = "mockup"
    AUDIO = "audio"


DEFAULT_OWNER = "local"


def _new_image_id() -> str:
    return uuid.uuid4().hex


class Studio:
    """Session coordinator for one founder.

    Saved preferences belong to owner_id, which outlives the session; id
    only names the in-process studio.

    Public API:
        configure(profile) / optimize_topic(topic)
        generate(topic) / edit(instruction) / restore(image_id) / clear_history()
        analyze_risk() / call_board_meeting() / ask_board(question)
        generate_strategy_map() / add_strategy_edge(edge)
        generate_pitch() / analyze_competitors() / generate_financials()
        generate_mockup(mockup_type) / toggle_audio_brief() / stop_audio()
        report() -> str | None
    """

    def __init__(
        self,
        gateway: Gateway,
        *,
        studio_id: str | None = None,
        owner_id: str = DEFAULT_OWNER,
        rng: RandomSource | None = None,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = _new_image_id,
        exporter: MarkdownExporter | None = None,
    ):
        self.id = studio_id or uuid.uuid4().hex
        self.owner_id = owner_id
        self.guard = FeatureGuard()
        self.audio = AudioSlot()
        self.profile = Profile()

        self.history: list[GeneratedImage] = []
        self.research: ResearchResult | None = None
        self.risk: RiskAnalysis | None = None
        self.board: BoardMeeting | None = None
        self.strategy_map: StrategyMapData | None = None
        self.pitch: PitchKit | None = None
        self.competitors: CompetitorAnalysis | None = None
        self.financials: FinancialModel | None = None
        self.mockup: ProductMockup | None = None
        self.audio_brief: AudioBrief | None = None

        self._epoch = 0
        self._board_session = 0
        self._clock = clock
        self._id_factory = id_factory
        self._exporter = exporter or MarkdownExporter()

        self._research = ResearchService(gateway)
        self._images = ImageService(gateway)
        self._risk = RiskService(gateway)
        self._board = BoardService(gateway, clock=clock)
        self._strategy_map = StrategyMapService(gateway, rng=rng)
        self._pitch = PitchService(gateway)
        self._competitors = CompetitorService(gateway)
        self._financials = FinancialService(gateway)
        self._audio = AudioService(gateway)

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def current_image(self) -> GeneratedImage | None:
        return self.history[0] if self.history else None

    @property
    def current_topic(self) -> str | None:
        image = self.current_image
        return image.topic if image else None

    def _clear_derived(self) -> None:
        self.research = None
        self.risk = None
        self.board = None
        self._board_session += 1
        self.strategy_map = None
        self.pitch = None
        self.competitors = None
        self.financials = None
        self.mockup = None
        self.audio_brief = None
        self.stop_audio()

    def _advance_epoch(self) -> int:
        self._epoch += 1
        return self._epoch

    def _is_stale(self, epoch: int, feature: Feature) -> bool:
        if epoch == self._epoch:
            return False
        logger.info("stale_result_discarded", studio_id=self.id, feature=feature.value)
        return True

    async def _run_derived(
        self,
        feature: Feature,
        call: Callable[[str], Awaitable[T]],
        store: Callable[[T], None],
    ) -> T | None:
        """Run one derived-artifact call for the current topic.

        Returns None (without calling the backend) when there is no topic yet
        or the feature is already in flight, and None when the result went
        stale before it arrived.
        """
        topic = self.current_topic
        if topic is None:
            logger.info("feature_precondition_unmet", studio_id=self.id, feature=feature.value, missing="image")
            return None

        async with self.guard.slot(feature) as acquired:
            if not acquired:
                return None
            epoch = self._epoch
            with feature_context(self.id, feature.value):
                result = await call(topic)
            if self._is_stale(epoch, feature):
                return None
            store(result)
            logger.info("feature_completed", studio_id=self.id, feature=feature.value)
            return result

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(self, profile: Profile) -> Profile:
        self.profile = profile
        return profile

    async def optimize_topic(self, topic: str) -> str | None:
        async with self.guard.slot(Feature.OPTIMIZE) as acquired:
            if not acquired:
                return None
            return await self._research.optimize_topic(topic, self.profile.stage)

    # ------------------------------------------------------------------
    # Infographic
    # ------------------------------------------------------------------

    async def generate(self, topic: str) -> GeneratedImage | None:
        """Research a topic and render its infographic.

        Starting a generation clears the research and every derived artifact,
        stops the audio brief and moves the epoch.

        Raises:
            ValueError: if topic is blank (state is left untouched)
        """
        async with self.guard.slot(Feature.VISUAL) as acquired:
            if not acquired:
                return None
            config = RequestConfiguration(topic=topic, **self.profile.model_dump())

            self._clear_derived()
            epoch = self._advance_epoch()
            logger.info("generation_started", studio_id=self.id, topic=config.topic, epoch=epoch)

            research = await self._research.research(config)
            if self._is_stale(epoch, Feature.VISUAL):
                return None
            self.research = research

            payload = await self._images.generate_infographic(research.image_prompt)
            if self._is_stale(epoch, Feature.VISUAL):
                return None

            image = GeneratedImage(
                id=self._id_factory(),
                data=payload.data,
                mime_type=payload.mime_type,
                prompt=config.topic,
                topic=config.topic,
                timestamp=self._clock(),
                stage=config.stage,
                style=config.style,
                focus=config.focus,
            )
            self.history.insert(0, image)
            return image

    async def edit(self, instruction: str) -> GeneratedImage | None:
        """Refine the current infographic; the edit inherits its topic and configuration."""
        source = self.current_image
        if source is None:
            logger.info(
                "feature_precondition_unmet", studio_id=self.id, feature=Feature.VISUAL.value, missing="image"
            )
            return None

        async with self.guard.slot(Feature.VISUAL) as acquired:
            if not acquired:
                return None
            epoch = self._epoch
            payload = await self._images.edit_infographic(source.data, instruction, source.mime_type)
            if self._is_stale(epoch, Feature.VISUAL):
                return None

            image = GeneratedImage(
                id=self._id_factory(),
                data=payload.data,
                mime_type=payload.mime_type,
                prompt=instruction.strip(),
                topic=source.topic,
                timestamp=self._clock(),
                stage=source.stage,
                style=source.style,
                focus=source.focus,
            )
            self.history.insert(0, image)
            return image

    def restore(self, image_id: str) -> GeneratedImage | None:
        """Move a history entry to the front; research and derived artifacts are cleared."""
        image = next((i for i in self.history if i.id == image_id), None)
        if image is None:
            return None
        self.history = [image, *(i for i in self.history if i.id != image_id)]
        self._clear_derived()
        self._advance_epoch()
        logger.info("history_restored", studio_id=self.id, image_id=image_id)
        return image

    def clear_history(self) -> None:
        self.history = []
        self._clear_derived()
        self._advance_epoch()
        logger.info("history_cleared", studio_id=self.id)

    # ------------------------------------------------------------------
    # Derived artifacts
    # ------------------------------------------------------------------

    async def analyze_risk(self) -> RiskAnalysis | None:
        stage, focus = self.profile.stage, self.profile.focus
        return await self._run_derived(
            Feature.RISK,
            lambda topic: self._risk.analyze(topic, stage, focus),
            lambda result: setattr(self, "risk", result),
        )

    def _seat_board(self, meeting: BoardMeeting) -> None:
        self.board = meeting
        self._board_session += 1

    async def call_board_meeting(self) -> BoardMeeting | None:
        stage = self.profile.stage
        return await self._run_derived(
            Feature.BOARD,
            lambda topic: self._board.convene(topic, stage),
            self._seat_board,
        )

    async def ask_board(self, question: str) -> list[BoardMessage] | None:
        """Ask the board a follow-up question.

        The founder's message is appended before the call; the advisors'
        replies are appended when they arrive. Returns only the new replies.

        Raises:
            ValueError: if question is blank
        """
        if self.board is None:
            logger.info(
                "feature_precondition_unmet", studio_id=self.id, feature=Feature.BOARD_CHAT.value, missing="board"
            )
            return None
        question = question.strip()
        if not question:
            raise ValueError("Please enter a question for the board.")

        async with self.guard.slot(Feature.BOARD_CHAT) as acquired:
            if not acquired:
                return None
            epoch, session = self._epoch, self._board_session
            self.board = apply_event(self.board, QuestionAsked(text=question, timestamp=self._clock()))

            with feature_context(self.id, Feature.BOARD_CHAT.value):
                replies = await self._board.ask(self.board, question)
            if self._is_stale(epoch, Feature.BOARD_CHAT):
                return None
            if session != self._board_session or self.board is None:
                logger.info("stale_result_discarded", studio_id=self.id, feature=Feature.BOARD_CHAT.value)
                return None
            self.board = apply_event(self.board, RepliesReceived(messages=tuple(replies)))
            return replies

    async def generate_strategy_map(self) -> StrategyMapData | None:
        stage = self.profile.stage
        return await self._run_derived(
            Feature.STRATEGY_MAP,
            lambda topic: self._strategy_map.generate(topic, stage),
            lambda result: setattr(self, "strategy_map", result),
        )

    def add_strategy_edge(self, edge: StrategyEdge) -> StrategyMapData | None:
        """Connect two existing nodes of the current map.

        Raises:
            ValueError: if either endpoint is not a node id of the map
        """
        if self.strategy_map is None:
            return None
        self.strategy_map = self.strategy_map.with_edge(edge)
        return self.strategy_map

    def load_strategy_map(self, layout: StrategyMapData) -> StrategyMapData:
        self.strategy_map = layout
        return layout

    async def generate_pitch(self) -> PitchKit | None:
        stage, focus = self.profile.stage, self.profile.focus
        return await self._run_derived(
            Feature.PITCH,
            lambda topic: self._pitch.generate(topic, stage, focus),
            lambda result: setattr(self, "pitch", result),
        )

    async def analyze_competitors(self) -> CompetitorAnalysis | None:
        return await self._run_derived(
            Feature.COMPETITORS,
            self._competitors.analyze,
            lambda result: setattr(self, "competitors", result),
        )

    async def generate_financials(self) -> FinancialModel | None:
        stage = self.profile.stage
        return await self._run_derived(
            Feature.FINANCIALS,
            lambda topic: self._financials.estimate(topic, stage),
            lambda result: setattr(self, "financials", result),
        )

    async def generate_mockup(self, mockup_type: MockupType) -> ProductMockup | None:
        style = self.profile.style
        return await self._run_derived(
            Feature.MOCKUP,
            lambda topic: self._images.generate_mockup(topic, mockup_type, style),
            lambda result: setattr(self, "mockup", result),
        )

    # ------------------------------------------------------------------
    # Audio brief
    # ------------------------------------------------------------------

    async def toggle_audio_brief(self) -> AudioBrief | None:
        """Stop the brief if it is playing, otherwise generate and start a new one."""
        if self.audio.is_playing:
            self.stop_audio()
            return None
        if self.research is None:
            logger.info(
                "feature_precondition_unmet", studio_id=self.id, feature=Feature.AUDIO.value, missing="research"
            )
            return None

        research = self.research
        brief = await self._run_derived(
            Feature.AUDIO,
            lambda topic: self._audio.generate(topic, research.insights, research.facts),
            lambda result: setattr(self, "audio_brief", result),
        )
        if brief is not None:
            self.audio.start(BufferedAudio(brief.data, brief.mime_type))
        return brief

    def stop_audio(self) -> None:
        self.audio.stop()

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------

    def report(self) -> str | None:
        image = self.current_image
        if image is None or self.research is None:
            return None
        return self._exporter.export_report(image, self.research, risk=self.risk, financials=self.financials)
