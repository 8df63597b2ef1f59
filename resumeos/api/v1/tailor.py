from fastapi import APIRouter, Depends, Request

from resumeos.ai.errors import ClassifiedError, ErrorCode, TailorError
from resumeos.ai.types import AIClientFactory
from resumeos.api.deps import error_response, get_client_factory, get_store, raise_tailor_error
from resumeos.core.rate_limit import rate_limit
from resumeos.core.security import require_api_key
from resumeos.core.store import StateStore
from resumeos.normalize.ai_response import ParseError
from resumeos.schemas.tailor import TailorRequest, TailorResponse
from resumeos.services.tailor_service import tailor_resume

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("/tailor", response_model=TailorResponse)
@rate_limit()
async def tailor(
    request: Request,
    payload: TailorRequest,
    store: StateStore = Depends(get_store),
    client_factory: AIClientFactory = Depends(get_client_factory),
):
    _ = request
    try:
        resume = await tailor_resume(store, payload.job_description, client_factory=client_factory)
    except TailorError as exc:
        raise_tailor_error(exc)
    except ParseError as exc:
        raise error_response(
            ClassifiedError(ErrorCode.UNKNOWN, f"Could not read the AI response: {exc}")
        ) from exc
    return TailorResponse(resume=resume, flagged_bullets=resume.flagged_bullet_count())
