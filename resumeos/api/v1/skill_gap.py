from fastapi import APIRouter, Depends

from resumeos.api.deps import get_store
from resumeos.core.security import require_api_key
from resumeos.core.store import StateStore
from resumeos.schemas.skill_gap import SkillGapReport, SkillGapRequest
from resumeos.services.skill_gap_service import run_skill_gap

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("/skill-gap", response_model=SkillGapReport)
async def skill_gap(payload: SkillGapRequest, store: StateStore = Depends(get_store)):
    return await run_skill_gap(store, payload.job_text, payload.resume_text)
