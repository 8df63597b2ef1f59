from fastapi import APIRouter, Depends, HTTPException, status

from resumeos.ai.types import AIClientFactory
from resumeos.api.deps import get_client_factory, get_store
from resumeos.core.security import require_api_key
from resumeos.core.store import StateStore
from resumeos.normalize.ai_response import resume_from_payload
from resumeos.schemas.tailor import (
    MemoryResponse,
    RecordSessionRequest,
    RecordSessionResponse,
    UpdateStatusRequest,
)
from resumeos.services.memory_service import (
    clear_memory,
    read_memory,
    record_session,
    should_rebuild_summary,
    update_session_status,
)
from resumeos.services.skill_gap_service import run_skill_gap
from resumeos.services.summary_service import maybe_schedule_summary_rebuild

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("/memory", response_model=MemoryResponse)
async def get_memory(store: StateStore = Depends(get_store)):
    memory = await read_memory(store)
    return MemoryResponse(memory=memory, should_rebuild_summary=should_rebuild_summary(memory.aggregate))


@router.delete("/memory")
async def delete_memory(store: StateStore = Depends(get_store)):
    await clear_memory(store)
    return {"cleared": True}


@router.post("/memory/sessions", response_model=RecordSessionResponse)
async def create_session(
    payload: RecordSessionRequest,
    store: StateStore = Depends(get_store),
    client_factory: AIClientFactory = Depends(get_client_factory),
):
    keywords = payload.keywords_used
    if keywords is None:
        keywords = []
        if payload.job_description:
            report = await run_skill_gap(store, payload.job_description)
            keywords = report.matched_skills()

    session_id = await record_session(
        store,
        job=payload.job,
        confirmed_resume=resume_from_payload(payload.confirmed_resume),
        keywords_used=keywords,
    )
    task = await maybe_schedule_summary_rebuild(store, client_factory=client_factory)
    return RecordSessionResponse(session_id=session_id, summary_rebuild_scheduled=task is not None)


@router.patch("/memory/sessions/{session_id}")
async def patch_session(session_id: int, payload: UpdateStatusRequest, store: StateStore = Depends(get_store)):
    updated = await update_session_status(store, session_id, payload.status)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found.")
    return {"updated": True, "status": payload.status.value}
