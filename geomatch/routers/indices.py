from fastapi import APIRouter

from ..db import get_db
from ..db.mongo import ensure_indexes as ensure_geomatch_indexes

router = APIRouter()


@router.post("/admin/ensure-indexes")
async def ensure_indexes():
    """Create the unique edge/match indexes and lookup indexes. Idempotent."""
    await ensure_geomatch_indexes(get_db())
    return {"ok": True}
