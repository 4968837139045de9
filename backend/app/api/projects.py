"""Projects API endpoints for the navigation tree and project view.

Provides endpoints for listing, creating and updating pgCompare projects,
the tables they contain, and the results of their latest compare run.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import Select, desc, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.models.project import DcProject, ProjectCreate, ProjectResponse, ProjectUpdate
from app.models.result import DcResult, ResultResponse
from app.models.table import DcTable, TableResponse


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])

PROJECT_RESULTS_LIMIT = 10

LATEST_RUN_QUERY = text(
    """
    SELECT rid
    FROM dc_result
    ORDER BY compare_start DESC
    LIMIT 1
    """
)

RUN_DETAILS_QUERY = text(
    """
    SELECT
        table_name,
        status,
        compare_start,
        CAST(coalesce(compare_end, current_timestamp) - compare_start AS TEXT) AS run_time,
        source_cnt,
        target_cnt,
        equal_cnt,
        missing_source_cnt,
        missing_target_cnt,
        not_equal_cnt
    FROM dc_result
    WHERE rid = :rid
    AND tid IN (
        SELECT tid
        FROM dc_table
        WHERE pid = :pid
    )
    ORDER BY compare_start DESC
    """
)


async def _get_project_or_404(session: AsyncSession, project_id: int) -> DcProject:
    result = await session.execute(select(DcProject).where(DcProject.pid == project_id))
    project = result.scalar_one_or_none()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("")
async def get_projects(
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Get all projects ordered by name."""
    query: Select[tuple[DcProject]] = select(DcProject).order_by(DcProject.project_name)
    result = await session.execute(query)
    return [
        ProjectResponse.model_validate(p).model_dump(mode="json")
        for p in result.scalars().all()
    ]


@router.post("")
async def create_project(
    project: ProjectCreate,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, Any]:
    """Create a new project.

    Args:
        project: Project creation data
        session: Database session

    Returns:
        Created project details
    """
    if not project.project_name:
        raise HTTPException(status_code=400, detail="Project name is required")

    new_project = DcProject(project_name=project.project_name)
    session.add(new_project)
    await session.commit()
    await session.refresh(new_project)

    logger.info("Created project %s (pid=%s)", new_project.project_name, new_project.pid)
    return ProjectResponse.model_validate(new_project).model_dump(mode="json")


@router.get("/{project_id}")
async def get_project(
    project_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, Any]:
    """Get a single project by ID."""
    project = await _get_project_or_404(session, project_id)
    return ProjectResponse.model_validate(project).model_dump(mode="json")


@router.put("/{project_id}")
async def update_project(
    project_id: int,
    updates: ProjectUpdate,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, bool]:
    """Update a project.

    Only the fields present in the request body are written.

    Args:
        project_id: Project ID
        updates: Fields to update
        session: Database session
    """
    values = updates.model_dump(exclude_unset=True)
    if "project_name" in values and not values["project_name"]:
        raise HTTPException(status_code=400, detail="Project name is required")

    project = await _get_project_or_404(session, project_id)

    for key, value in values.items():
        setattr(project, key, value)

    await session.commit()
    return {"success": True}


@router.get("/{project_id}/tables")
async def get_project_tables(
    project_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Get the tables of a project ordered by alias."""
    query = select(DcTable).where(DcTable.pid == project_id).order_by(DcTable.table_alias)
    result = await session.execute(query)
    return [
        TableResponse.model_validate(t).model_dump(mode="json")
        for t in result.scalars().all()
    ]


@router.get("/{project_id}/results")
async def get_project_results(
    project_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Get the most recent results recorded under this ID.

    The project view charts these; results are matched on ``tid``.
    """
    query = (
        select(DcResult)
        .where(DcResult.tid == project_id)
        .order_by(desc(DcResult.compare_start))
        .limit(PROJECT_RESULTS_LIMIT)
    )
    result = await session.execute(query)
    return [
        ResultResponse.model_validate(r).to_dict()
        for r in result.scalars().all()
    ]


@router.get("/{project_id}/current-run")
async def get_project_current_run(
    project_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, Any]]:
    """Get per-table details of the latest compare run for a project.

    The latest run is the one with the most recent ``compare_start``
    across all projects; an empty list is returned when no run exists.
    """
    latest = await session.execute(LATEST_RUN_QUERY)
    rid = latest.scalar_one_or_none()
    if rid is None:
        logger.info("No results found in dc_result")
        return []

    details = await session.execute(RUN_DETAILS_QUERY, {"rid": rid, "pid": project_id})
    rows = [dict(row) for row in details.mappings().all()]
    logger.debug("Run %s has %d rows for project %s", rid, len(rows), project_id)

    return [
        {
            **row,
            "compare_start": row["compare_start"].isoformat() if row["compare_start"] else None,
        }
        for row in rows
    ]
