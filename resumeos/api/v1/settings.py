from fastapi import APIRouter, Depends, HTTPException, status

from resumeos.api.deps import get_store
from resumeos.core.security import require_api_key
from resumeos.core.store import StateStore
from resumeos.schemas.settings import UserSettings
from resumeos.services.settings_service import get_settings, save_settings, validate_resume_text

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("/settings", response_model=UserSettings)
async def read_settings(store: StateStore = Depends(get_store)):
    return (await get_settings(store)).masked()


@router.put("/settings", response_model=UserSettings)
async def write_settings(payload: UserSettings, store: StateStore = Depends(get_store)):
    current = await get_settings(store)
    # Fields left out of the payload keep their stored values.
    updates = payload.model_dump(include=payload.model_fields_set)

    # An empty or masked key, or an empty resume, also keeps the stored one.
    api_key = updates.pop("api_key", "")
    if api_key.strip() and "*" not in api_key:
        updates["api_key"] = api_key

    resume_text = updates.pop("base_resume_text", "")
    if resume_text.strip():
        try:
            updates["base_resume_text"] = validate_resume_text(resume_text)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    merged = current.model_copy(update=updates)
    await save_settings(store, merged)
    return merged.masked()
