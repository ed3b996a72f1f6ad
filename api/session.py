"""
api/session.py

Endpoints of the session surface: the terminal transcript, uploaded data
sources and natural-language commands. Every endpoint requires a signed-in
identity and answers HTTP 401 otherwise.

Endpoints:
  - GET /session: Transcript, state, in-flight flag and active data sources.
  - POST /session/sources: Ingest (or replace) a data source.
  - GET /session/sources/{name}: Raw content of a data source.
  - DELETE /session/sources/{name}: Evict a data source.
  - POST /session/command: Run one command cycle.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse

from core.orchestrator import SessionOrchestrator
from core.session_gate import SessionGate, SessionUnavailableError
from services.data_context import DataSourceNotFoundError
from shared.models import CommandOutcome
from .dependencies import get_session_gate
from .schemas import CommandRequest, SourceUploadRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def require_session(gate: SessionGate = Depends(get_session_gate)) -> SessionOrchestrator:
    try:
        return gate.require()
    except SessionUnavailableError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.get("/session")
async def get_session_view(session: SessionOrchestrator = Depends(require_session)):
    return JSONResponse(session.view().to_dict())


@router.post("/session/sources")
async def upload_source(body: SourceUploadRequest, session: SessionOrchestrator = Depends(require_session)):
    """
    Ingest an uploaded data source.

    The record count is added to the session total even when a source with the
    same name is already loaded; the content of that source is replaced.
    """
    logger.info(f"[upload_source] Ingesting {body.name} ({body.record_count} records)")
    try:
        notice = session.ingest(body.name, body.content, body.record_count)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return JSONResponse(
        {
            "message": notice.to_dict(),
            "recordsLoaded": session.state.records_loaded,
            "activeSources": session.list_sources(),
        },
        status_code=201,
    )


@router.get("/session/sources/{name}")
async def get_source(name: str, session: SessionOrchestrator = Depends(require_session)):
    try:
        return PlainTextResponse(session.get_source(name))
    except DataSourceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/session/sources/{name}")
async def evict_source(name: str, session: SessionOrchestrator = Depends(require_session)):
    """Evict a data source. Evicting a name that is not loaded is not an error."""
    notice = session.evict(name)
    return JSONResponse({"message": notice.to_dict(), "activeSources": session.list_sources()})


@router.post("/session/command")
async def submit_command(body: CommandRequest, session: SessionOrchestrator = Depends(require_session)):
    """
    Run one command cycle and return what it added to the transcript.

    Returns:
        JSONResponse: 'accepted', 'celebrate' (True when the presentation layer
            should play the celebration effect), 'celebration' (effect
            parameters or null), the new 'state' and the appended 'messages'.
            HTTP 409 when another command is already in flight, 422 when the
            command is blank.
    """
    before = len(session.transcript)
    receipt = await session.submit_command(body.text)

    if receipt.outcome is CommandOutcome.BUSY:
        return JSONResponse({"accepted": False, "reason": receipt.outcome.value}, status_code=409)
    if receipt.outcome is CommandOutcome.BLANK:
        return JSONResponse({"accepted": False, "reason": receipt.outcome.value}, status_code=422)

    celebration = receipt.celebration
    return JSONResponse({
        "accepted": True,
        "celebrate": celebration is not None,
        "celebration": {
            "particleCount": celebration.particle_count,
            "spread": celebration.spread,
            "originY": celebration.origin_y,
            "colors": list(celebration.colors),
        } if celebration else None,
        "state": session.state.model_dump(mode="json", by_alias=True),
        "messages": [message.to_dict() for message in session.transcript[before:]],
    })
