from fastapi import APIRouter, Depends

from resumeos.analytics import db as analytics_db
from resumeos.core.security import require_api_key

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("/analytics/summary")
def summary():
    return analytics_db.get_summary()
