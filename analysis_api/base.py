"""
Engine-agnostic interface of the natural-language analysis collaborator.

The analysis engine is an external system: this service does not reason about
data, it hands the engine the user's command, the current session state and
the loaded data sources, and renders whatever complete state comes back.

Contract:
- `analyze` is a coroutine; it is the only point where a command cycle
  suspends.
- It returns a complete `SessionState`, not a delta. `message` may be None,
  in which case the orchestrator shows a generic completion notice.
- It may raise anything; the orchestrator collapses every failure into one
  user-visible error entry.
"""

from abc import ABC, abstractmethod
from typing import Mapping

from shared.models import SessionState


class AnalysisEngine(ABC):
    """
    Abstract client of the analysis engine.

    Implementations must not mutate `current_state` or `data_context`.
    """

    #: Short label used in logs and metrics.
    name: str = "abstract"

    @abstractmethod
    async def analyze(
        self,
        command_text: str,
        current_state: SessionState,
        data_context: Mapping[str, str],
    ) -> SessionState:
        """
        Run one analysis for a user command.

        Args:
            command_text (str): The user's natural-language command.
            current_state (SessionState): State before this command.
            data_context (Mapping[str, str]): Loaded data sources, name -> raw content.

        Returns:
            SessionState: The complete replacement state.
        """
        raise NotImplementedError
