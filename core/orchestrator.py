"""
core/orchestrator.py

Session orchestrator: the command cycle state machine of one session.

This module contains the coordination logic that:
1. Ingests and evicts named data sources and records each action in the transcript
2. Accepts user commands, one at a time, and drives IDLE -> ANALYZING -> {IDLE, ERROR}
3. Calls the external analysis engine with the current state and data context
4. Writes the engine's result back to the session state and the transcript
5. Emits a fire-and-forget celebration notice for strong financial insights

All state transitions run to completion on the event loop; the analysis engine
call is the only suspension point. While a command is in flight, further
commands are rejected so system responses can never interleave out of
submission order. Ingestion and eviction stay available during that time.
"""

import asyncio
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from analysis_api.base import AnalysisEngine
from analysis_api.errors import AnalysisEngineError, AnalysisEngineTimeoutError
from config.logging_config import get_logger
from monitoring.metrics import (
    ANALYSIS_LATENCY,
    COMMAND_COUNT,
    DATA_SOURCE_EVENTS,
    track_errors,
    track_latency,
)
from services.data_context import DataContextStore
from services.transcript import Transcript, generate_interaction_id
from shared.listeners import ListenerRegistry
from shared.models import (
    Celebration,
    CommandOutcome,
    CommandReceipt,
    Identity,
    InsightType,
    Sender,
    SessionState,
    SessionStatus,
    SessionView,
    TranscriptMessage,
)


DEFAULT_COMPLETION_MESSAGE = "Analysis complete."
DEFAULT_ERROR_MESSAGE = "ERROR: Business logic core unreachable."
DEFAULT_INITIAL_STATUS_MESSAGE = "System ready. Awaiting data."
DEFAULT_CELEBRATION_THRESHOLD = 80


class SessionOrchestrator:
    """
    Owner of one session's state, transcript and data context.

    Responsibilities:
    - Data source ingestion and eviction with transcript notices
    - Command cycle with a single in-flight command
    - Result application and celebration dispatch
    - A read-only view for the presentation layer

    Args:
        engine (AnalysisEngine): Analysis engine client used for every command.
        config (Dict[str, Any]): Global configuration dictionary. The
            `session`, `celebration` and `analysis.timeout_s` entries are read.
        identity (Optional[Identity]): Identity the session belongs to.
        session_id (Optional[str]): Identifier used in logs; generated if omitted.
    """

    def __init__(
        self,
        engine: AnalysisEngine,
        config: Dict[str, Any],
        identity: Optional[Identity] = None,
        session_id: Optional[str] = None,
    ):
        self._engine = engine
        self.identity = identity
        self.session_id = session_id or str(uuid.uuid4())

        session_cfg = (config.get('session', {}) or {})
        self._completion_message = session_cfg.get('completion_message', DEFAULT_COMPLETION_MESSAGE)
        self._error_message = session_cfg.get('error_message', DEFAULT_ERROR_MESSAGE)

        celebration_cfg = (config.get('celebration', {}) or {})
        self._celebration_type = InsightType(celebration_cfg.get('insight_type', InsightType.FINANCIAL.value))
        self._celebration_threshold = float(celebration_cfg.get('min_confidence', DEFAULT_CELEBRATION_THRESHOLD))
        self._celebration_effect = {
            key: (tuple(value) if key == 'colors' else value)
            for key, value in celebration_cfg.items()
            if key in ('particle_count', 'spread', 'origin_y', 'colors')
        }

        timeout_s = (config.get('analysis', {}) or {}).get('timeout_s')
        self._timeout_s = float(timeout_s) if timeout_s else None

        self._store = DataContextStore()
        self._transcript = Transcript()
        self._state = SessionState(
            message=session_cfg.get('initial_status_message', DEFAULT_INITIAL_STATUS_MESSAGE)
        )
        self._in_flight = False
        self._celebrations: ListenerRegistry[Celebration] = ListenerRegistry(f"celebration:{self.session_id}")

        welcome = session_cfg.get('welcome_message')
        if welcome:
            self._append(Sender.SYSTEM, welcome)

        self._log().info(
            "Session started for %s with analysis engine %s",
            identity.id if identity else "anonymous", self._engine.name,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """A copy of the current session state."""
        return self._state.model_copy(deep=True)

    @property
    def is_analyzing(self) -> bool:
        """True while a command is in flight."""
        return self._in_flight

    @property
    def transcript(self) -> Tuple[TranscriptMessage, ...]:
        """Read-only snapshot of the transcript."""
        return self._transcript.all()

    def list_sources(self) -> List[str]:
        """Names of the loaded data sources, in insertion order."""
        return self._store.list_names()

    def get_source(self, name: str) -> str:
        """
        Raw content of a loaded data source.

        Raises:
            DataSourceNotFoundError: If `name` is not loaded.
        """
        return self._store.get(name)

    def view(self) -> SessionView:
        """Snapshot of everything the presentation layer renders."""
        return SessionView(
            transcript=self._transcript.all(),
            state=self.state,
            is_analyzing=self._in_flight,
            active_sources=self._store.list_names(),
        )

    def on_celebration(self, callback: Callable[[Celebration], None]) -> Callable[[], None]:
        """
        Register a presentation-layer callback for celebration notices.

        Returns:
            Callable[[], None]: Function that removes the registration.
        """
        return self._celebrations.add(callback)

    # ------------------------------------------------------------------
    # Data context
    # ------------------------------------------------------------------

    def ingest(self, name: str, raw_content: str, record_count: int) -> TranscriptMessage:
        """
        Add or replace a data source and record the action in the transcript.

        The record count is added to `records_loaded` even when `name` was
        already loaded.

        Returns:
            TranscriptMessage: The system notice that was appended.

        Raises:
            ValueError: If `name` is empty or `record_count` is negative.
        """
        replaced = self._store.ingest(name, raw_content, record_count)
        DATA_SOURCE_EVENTS.labels(action='replace' if replaced else 'ingest').inc()

        self._state = self._state.model_copy(update={
            'records_loaded': self._store.records_ingested,
            'message': f"Loaded {name} successfully.",
        })
        return self._append(Sender.SYSTEM, f"Data Loaded: {name} \nAdded to context.")

    def evict(self, name: str) -> TranscriptMessage:
        """
        Remove a data source if present and record the action in the transcript.

        Evicting a name that is not loaded is not an error. `records_loaded`
        is never decremented.

        Returns:
            TranscriptMessage: The system notice that was appended.
        """
        if self._store.evict(name):
            DATA_SOURCE_EVENTS.labels(action='evict').inc()
        return self._append(Sender.SYSTEM, f"File removed from context: {name}")

    # ------------------------------------------------------------------
    # Command cycle
    # ------------------------------------------------------------------

    async def submit_command(self, text: str) -> CommandReceipt:
        """
        Run one command cycle. Never raises on engine failure.

        Args:
            text (str): The user's natural-language command.

        Returns:
            CommandReceipt: BUSY if another command is in flight, BLANK for an
            empty command, otherwise ACCEPTED once the cycle has completed,
            successfully or not, with the celebration it dispatched (if any).
        """
        if self._in_flight:
            COMMAND_COUNT.labels(outcome='rejected').inc()
            self._log().warning("Command rejected: another command is in flight")
            return CommandReceipt(CommandOutcome.BUSY)
        if not text or not text.strip():
            self._log().debug("Blank command ignored")
            return CommandReceipt(CommandOutcome.BLANK)

        interaction_id = generate_interaction_id()
        log = self._log(interaction_id)

        self._append(Sender.USER, text, interaction_id)
        self._in_flight = True
        self._state = self._state.model_copy(update={'status': SessionStatus.ANALYZING})
        log.info("Processing command: '%s'", text[:50])

        celebration = None
        try:
            result = await self._run_analysis(text)
            celebration = self._apply_result(result, interaction_id)
        except Exception as e:
            log.error("Analysis engine unreachable (%s)", type(e).__name__, exc_info=True)
            COMMAND_COUNT.labels(outcome='failed').inc()
            self._state = self._state.model_copy(update={'status': SessionStatus.ERROR})
            self._append(Sender.SYSTEM, self._error_message, interaction_id)
        finally:
            self._in_flight = False
            if self._state.status == SessionStatus.ANALYZING:
                # Cycle interrupted before a result or error was recorded
                self._state = self._state.model_copy(update={'status': SessionStatus.IDLE})

        return CommandReceipt(CommandOutcome.ACCEPTED, interaction_id, celebration)

    @track_latency(ANALYSIS_LATENCY, lambda self: {'engine': self._engine.name})
    @track_errors('analysis', 'orchestrator')
    async def _run_analysis(self, text: str) -> SessionState:
        """
        Call the analysis engine with the state and data context as they are now.

        Raises:
            AnalysisEngineTimeoutError: When the engine does not answer within `analysis.timeout_s`.
            AnalysisEngineError: When the engine returns something other than a session state.
        """
        call = self._engine.analyze(text, self.state, self._store.snapshot())
        try:
            if self._timeout_s:
                result = await asyncio.wait_for(call, timeout=self._timeout_s)
            else:
                result = await call
        except asyncio.TimeoutError as exc:
            raise AnalysisEngineTimeoutError(f"No answer within {self._timeout_s}s") from exc

        if isinstance(result, dict):
            result = SessionState.model_validate(result)
        if not isinstance(result, SessionState):
            raise AnalysisEngineError(f"Engine returned {type(result).__name__}, expected SessionState")
        return result

    def _apply_result(self, result: SessionState, interaction_id: str) -> Optional[Celebration]:
        status = result.status
        if status == SessionStatus.ANALYZING:
            self._log(interaction_id).warning("Engine returned ANALYZING status; recording IDLE")
            status = SessionStatus.IDLE

        # records_loaded is owned by ingestion, not by the engine
        self._state = result.model_copy(update={
            'status': status,
            'records_loaded': self._store.records_ingested,
        })
        self._append(
            Sender.SYSTEM,
            result.message or self._completion_message,
            interaction_id,
            chart_data=result.chart_data,
            table_data=result.table_data,
        )
        COMMAND_COUNT.labels(outcome='completed').inc()

        if self.should_celebrate(result):
            return self._dispatch_celebration(result)
        return None

    def should_celebrate(self, result: SessionState) -> bool:
        """True when the result is a celebration-worthy insight (strictly above the threshold)."""
        return (
            result.insight_type == self._celebration_type
            and result.confidence_score > self._celebration_threshold
        )

    def _dispatch_celebration(self, result: SessionState) -> Celebration:
        celebration = Celebration(
            insight_type=result.insight_type,
            confidence_score=result.confidence_score,
            **self._celebration_effect,
        )
        # Delivered on the next loop iteration, after the transition is complete
        asyncio.get_running_loop().call_soon(self._celebrations.broadcast, celebration)
        return celebration

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _append(
        self,
        sender: Sender,
        text: str,
        interaction_id: Optional[str] = None,
        chart_data: Optional[Any] = None,
        table_data: Optional[Any] = None,
    ) -> TranscriptMessage:
        message = self._transcript.create_message(
            sender, text, interaction_id, chart_data=chart_data, table_data=table_data
        )
        self._transcript.append(message)
        return message

    def _log(self, interaction_id: Optional[str] = None) -> logging.LoggerAdapter:
        return get_logger(__name__, session_id=self.session_id, interaction_id=interaction_id)
