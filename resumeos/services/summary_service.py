"""Periodic rebuild of the career-memory preference summary.

The rebuild runs as a detached task: the request that records a session
returns without waiting for it, and a failed rebuild is logged and dropped.
It is not retried; the next recorded session re-checks the threshold.
"""

from __future__ import annotations

import asyncio
import logging

from resumeos.ai.factory import get_ai_client
from resumeos.ai.types import AIClientFactory
from resumeos.core import background
from resumeos.core.store import StateStore
from resumeos.schemas.memory import SessionRecord

from .memory_service import read_memory, recent_sessions, should_rebuild_summary, update_preference_summary
from .settings_service import get_settings
from .tailor_service import rebuild_preference_summary

logger = logging.getLogger(__name__)

REBUILD_TASK_NAME = "preference-summary-rebuild"


async def rebuild_and_store_summary(
    store: StateStore,
    api_key: str,
    sessions: list[SessionRecord],
    *,
    client_factory: AIClientFactory = get_ai_client,
) -> str | None:
    try:
        client = client_factory(api_key)
        summary = await rebuild_preference_summary(client, sessions)
        if not summary:
            logger.info("preference_summary_rebuild_empty sessions=%s", len(sessions))
            return None
        aggregate = await update_preference_summary(store, summary)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.warning("preference_summary_rebuild_failed sessions=%s: %s", len(sessions), exc)
        return None
    logger.info("preference_summary_rebuilt built_at=%s", aggregate.summary_built_at)
    return summary


async def maybe_schedule_summary_rebuild(
    store: StateStore,
    *,
    client_factory: AIClientFactory = get_ai_client,
) -> asyncio.Task | None:
    memory = await read_memory(store)
    if not should_rebuild_summary(memory.aggregate):
        return None
    if background.is_running(REBUILD_TASK_NAME):
        logger.info("preference_summary_rebuild_skipped reason=in_progress")
        return None

    user_settings = await get_settings(store)
    if not user_settings.api_key:
        logger.info("preference_summary_rebuild_skipped reason=no_api_key")
        return None

    return background.spawn(
        rebuild_and_store_summary(
            store,
            user_settings.api_key,
            recent_sessions(memory),
            client_factory=client_factory,
        ),
        name=REBUILD_TASK_NAME,
    )
