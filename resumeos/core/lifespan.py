import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from resumeos.analytics.db import init_db, purge_old_records
from resumeos.core import background
from resumeos.core.config import settings
from resumeos.core.store import SqliteStateStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = SqliteStateStore(settings.state_db_path)
    app.state.store = store
    init_db()

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = purge_old_records()
                if any(deleted.values()):
                    logger.info("analytics_retention_purge deleted=%s", deleted)
            except Exception as exc:  # pragma: no cover
                logger.warning("analytics_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=3600)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
    await background.drain()
    store.close()
