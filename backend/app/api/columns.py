"""Column map API endpoints for the column mapping modal."""
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.models.table import ColumnMapResponse, ColumnMapUpdate, DcTableColumnMap


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/columns", tags=["columns"])


@router.get("/{column_id}/maps")
async def get_column_maps(
    column_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Get the source and target mappings of a column."""
    result = await session.execute(
        select(DcTableColumnMap).where(DcTableColumnMap.column_id == column_id)
    )
    return [
        ColumnMapResponse.model_validate(m).model_dump(mode="json")
        for m in result.scalars().all()
    ]


@router.put("/{column_id}/maps")
async def update_column_map(
    column_id: int,
    updates: ColumnMapUpdate,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, bool]:
    """Set the map expression of one column map; an empty string clears it."""
    result = await session.execute(
        update(DcTableColumnMap)
        .where(
            DcTableColumnMap.column_id == updates.column_id,
            DcTableColumnMap.column_origin == updates.column_origin,
            DcTableColumnMap.column_name == updates.column_name,
        )
        .values(map_expression=updates.map_expression or None)
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="Column map not found")
    await session.commit()
    return {"success": True}


@router.delete("/{column_id}/maps")
async def delete_column_map(
    column_id: int,
    column_origin: str = Query(..., description="source or target"),
    column_name: str = Query(..., description="Physical column name"),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, bool]:
    """Delete one column map, addressed by its composite key."""
    result = await session.execute(
        delete(DcTableColumnMap).where(
            DcTableColumnMap.column_id == column_id,
            DcTableColumnMap.column_origin == column_origin,
            DcTableColumnMap.column_name == column_name,
        )
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="Column map not found")
    await session.commit()

    logger.info("Deleted %s column map %s for column %s", column_origin, column_name, column_id)
    return {"success": True}
