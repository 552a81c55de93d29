from fastapi import APIRouter, Depends, Request
from fastapi.openapi.utils import get_openapi
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.system import SystemStats

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/stats", response_model=SystemStats)
async def get_stats(db: AsyncSession = Depends(get_db)):
    """Return system-wide statistics."""
    sql = text("""
        SELECT
            (SELECT COUNT(*) FROM users) AS users,
            (SELECT COUNT(*) FROM boards) AS boards,
            (SELECT COUNT(*) FROM cards) AS cards,
            (SELECT COUNT(*) FROM views) AS views,
            (SELECT COUNT(*) FROM files) AS files
    """)
    result = await db.execute(sql)
    return result.mappings().first()


@router.get("/docs.json", include_in_schema=False)
async def get_openapi_json(request: Request):
    """Return the full OpenAPI schema in JSON format."""
    app = request.app
    return get_openapi(
        title="Kanban API",
        version="1.0.0",
        description="Full OpenAPI specification for the Kanban backend.",
        routes=app.routes,
    )
