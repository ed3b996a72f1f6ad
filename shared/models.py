"""
shared/models.py

Common data models used across the session orchestration layer.

This module contains the value types that flow between the identity layer,
the data context store, the transcript, the orchestrator and the analysis
engine. `SessionState` is a Pydantic model because it crosses the boundary to
the analysis engine and back (JSON with camelCase keys on the wire); the
purely in-process records are dataclasses.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SessionStatus(str, Enum):
    """
    Status of the current analysis cycle.

    - IDLE: no command in flight
    - ANALYZING: one command is waiting on the analysis engine
    - ERROR: the last command failed
    """
    IDLE = "IDLE"
    ANALYZING = "ANALYZING"
    ERROR = "ERROR"


class InsightType(str, Enum):
    """Category tag of the last analysis result."""
    FINANCIAL = "FINANCIAL"
    OPERATIONAL = "OPERATIONAL"
    GENERIC = "GENERIC"


class Sender(str, Enum):
    USER = "user"
    SYSTEM = "system"


class SessionState(BaseModel):
    """
    The single mutable record describing the current analysis cycle.

    The analysis engine receives the current state and must return a complete
    replacement (not a delta). `message` may be omitted by the engine, in which
    case the orchestrator falls back to a generic completion notice in the
    transcript. `chart_data` and `table_data` are opaque to this layer and are
    passed through to the presentation layer untouched.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: SessionStatus = SessionStatus.IDLE
    message: Optional[str] = None
    records_loaded: int = Field(0, ge=0)
    insight_type: InsightType = InsightType.GENERIC
    confidence_score: float = Field(0, ge=0, le=100)
    chart_data: Optional[Any] = None
    table_data: Optional[Any] = None


@dataclass(frozen=True)
class Identity:
    """
    The authenticated principal.

    At most one Identity is active per identity provider; its presence or
    absence is observed through the provider's subscription, never polled.
    """
    id: str
    email: Optional[str]
    display_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'email': self.email,
            'displayName': self.display_name,
        }


@dataclass
class DataSource:
    """
    A named, opaque block of raw tabular text.

    `record_count` is the count contributed by the most recent ingestion of
    this name. The running session total lives on the store, not here.
    """
    name: str
    raw_content: str
    record_count: int


@dataclass(frozen=True)
class TranscriptMessage:
    """
    One entry in the conversation log.

    Messages are immutable once created. `interaction_id` ties a user command
    to the system response it produced; notices that are not part of a command
    cycle get their own interaction id.
    """
    id: str
    sender: Sender
    text: str
    timestamp: datetime
    interaction_id: str
    chart_data: Optional[Any] = None
    table_data: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Render the message in the camelCase shape used by the presentation layer.

        Returns:
            Dict[str, Any]: JSON-serializable mapping; optional payloads are
            included only when present.
        """
        data = {
            'id': self.id,
            'sender': self.sender.value,
            'text': self.text,
            'timestamp': self.timestamp.isoformat(),
            'interactionId': self.interaction_id,
        }
        if self.chart_data is not None:
            data['chartData'] = self.chart_data
        if self.table_data is not None:
            data['tableData'] = self.table_data
        return data


@dataclass(frozen=True)
class Celebration:
    """One-shot celebratory effect request for the presentation layer."""
    insight_type: InsightType
    confidence_score: float
    particle_count: int = 100
    spread: int = 70
    origin_y: float = 0.6
    colors: Tuple[str, ...] = ("#34d399", "#10b981", "#fbbf24")


class CommandOutcome(str, Enum):
    ACCEPTED = "accepted"
    BUSY = "busy"    # another command is in flight
    BLANK = "blank"


@dataclass(frozen=True)
class CommandReceipt:
    """
    What `submit_command` did with one command.

    The outcome is decided at the moment the command is accepted or rejected.
    `celebration` is set when the completed cycle dispatched one.
    """
    outcome: CommandOutcome
    interaction_id: Optional[str] = None
    celebration: Optional[Celebration] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is CommandOutcome.ACCEPTED


@dataclass(frozen=True)
class SessionView:
    """
    Everything the presentation layer needs to render the session surface.
    """
    transcript: Tuple[TranscriptMessage, ...]
    state: SessionState
    is_analyzing: bool
    active_sources: List[str] = field(default_factory=list)

    @property
    def data_layer(self) -> str:
        return "ACTIVE" if self.active_sources else "AWAITING INPUT"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'messages': [message.to_dict() for message in self.transcript],
            'state': self.state.model_dump(mode='json', by_alias=True),
            'isAnalyzing': self.is_analyzing,
            'activeSources': list(self.active_sources),
            'dataLayer': self.data_layer,
        }
