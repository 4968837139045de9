"""Results API endpoints for drilling into a compare result."""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.models.result import DcResult


router = APIRouter(prefix="/api/results", tags=["results"])

TARGET_ROWS_LIMIT = 1000

TARGET_ROWS_QUERY = text(
    f"""
    SELECT
        pk,
        pk_hash,
        column_hash,
        compare_result,
        thread_nbr,
        table_name,
        batch_nbr
    FROM dc_target
    WHERE tid = :tid
    ORDER BY pk_hash
    LIMIT {TARGET_ROWS_LIMIT}
    """
)


@router.get("/{result_id}/target")
async def get_result_target_rows(
    result_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Get the target-side rows staged for the table behind a result.

    Args:
        result_id: Result ID (``cid``)
        session: Database session

    Returns:
        Up to 1000 ``dc_target`` rows ordered by primary key hash
    """
    result = await session.execute(select(DcResult.tid).where(DcResult.cid == result_id))
    tid = result.scalar_one_or_none()

    if tid is None:
        raise HTTPException(status_code=404, detail="Result not found")

    rows = await session.execute(TARGET_ROWS_QUERY, {"tid": tid})
    return [dict(row) for row in rows.mappings().all()]
