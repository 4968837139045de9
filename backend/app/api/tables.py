"""Tables API endpoints for the table view.

Provides endpoints for a table's run settings, its source/target maps,
its columns and its compare history.
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.models.result import DcResult, ResultResponse
from app.models.table import (
    DcTable,
    DcTableColumn,
    DcTableColumnMap,
    DcTableMap,
    TableColumnResponse,
    TableColumnUpdate,
    TableMapResponse,
    TableMapUpdate,
    TableResponse,
    TableUpdate,
)


router = APIRouter(prefix="/api/tables", tags=["tables"])

TABLE_RESULTS_LIMIT = 20


@router.get("/{table_id}")
async def get_table(
    table_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, Any]:
    """Get a single table by ID."""
    result = await session.execute(select(DcTable).where(DcTable.tid == table_id))
    table = result.scalar_one_or_none()

    if not table:
        raise HTTPException(status_code=404, detail="Table not found")

    return TableResponse.model_validate(table).model_dump(mode="json")


@router.put("/{table_id}")
async def update_table(
    table_id: int,
    updates: TableUpdate,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, bool]:
    """Update a table's run settings.

    Args:
        table_id: Table ID
        updates: ``enabled``, ``batch_nbr`` and ``parallel_degree``
        session: Database session
    """
    values = updates.model_dump(exclude_unset=True)
    if values:
        result = await session.execute(
            update(DcTable).where(DcTable.tid == table_id).values(**values)
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Table not found")
        await session.commit()
    return {"success": True}


@router.get("/{table_id}/columns")
async def get_table_columns(
    table_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Get the logical columns of a table."""
    result = await session.execute(
        select(DcTableColumn).where(DcTableColumn.tid == table_id)
    )
    return [
        TableColumnResponse.model_validate(c).model_dump(mode="json")
        for c in result.scalars().all()
    ]


@router.put("/{table_id}/columns")
async def update_table_column(
    table_id: int,
    updates: TableColumnUpdate,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, bool]:
    """Update a column's alias and enabled flag, addressed by ``column_id``."""
    values = updates.model_dump(exclude_unset=True, exclude={"column_id"})
    if values:
        result = await session.execute(
            update(DcTableColumn)
            .where(DcTableColumn.column_id == updates.column_id)
            .values(**values)
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Column not found")
        await session.commit()
    return {"success": True}


@router.get("/{table_id}/maps")
async def get_table_maps(
    table_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Get the source and target locations of a table."""
    result = await session.execute(select(DcTableMap).where(DcTableMap.tid == table_id))
    return [
        TableMapResponse.model_validate(m).model_dump(mode="json")
        for m in result.scalars().all()
    ]


@router.put("/{table_id}/maps")
async def update_table_map(
    table_id: int,
    updates: TableMapUpdate,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, bool]:
    """Update a table map's modification column and filter.

    The map is addressed by its composite key in the body; empty strings
    clear the stored value.
    """
    result = await session.execute(
        update(DcTableMap)
        .where(
            DcTableMap.tid == updates.tid,
            DcTableMap.dest_type == updates.dest_type,
            DcTableMap.schema_name == updates.schema_name,
            DcTableMap.table_name == updates.table_name,
        )
        .values(
            mod_column=updates.mod_column or None,
            table_filter=updates.table_filter or None,
        )
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="Table map not found")
    await session.commit()
    return {"success": True}


@router.get("/{table_id}/results")
async def get_table_results(
    table_id: int,
    latest: bool = Query(False, description="Only return the most recent result"),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Get the compare history of a table, newest first."""
    query = (
        select(DcResult)
        .where(DcResult.tid == table_id)
        .order_by(desc(DcResult.compare_start))
        .limit(1 if latest else TABLE_RESULTS_LIMIT)
    )
    result = await session.execute(query)
    return [
        ResultResponse.model_validate(r).to_dict(rid_as_string=True)
        for r in result.scalars().all()
    ]


@router.get("/{table_id}/all-columns")
async def get_table_all_columns(
    table_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Get every physical column of a table, for populating pickers."""
    result = await session.execute(
        select(DcTableColumnMap.column_name, DcTableColumnMap.column_origin).where(
            DcTableColumnMap.tid == table_id
        )
    )
    return [dict(row) for row in result.mappings().all()]
