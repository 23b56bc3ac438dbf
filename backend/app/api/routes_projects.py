# app/api/routes_projects.py
# 프로젝트 CRUD (Project Management API)
# GET/POST /api/projects, GET/PUT/DELETE /api/projects/{id}

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Request, Response

from app.api.common import BAD_ID_HINT, ensure_same_id, set_location, to_public, to_public_many, validate_path
from app.core.errors import ApiError, NotFoundError
from app.core.ids import to_object_id
from app.core.validation import validate
from app.db.repository import ProjectRepository
from app.models.rules import ID_RULES, PROJECT_CREATE_RULES, PROJECT_UPDATE_RULES


def build_router(projects: ProjectRepository) -> APIRouter:
    router = APIRouter(prefix="/api/projects", tags=["projects"])

    def _check_id(project_id: str) -> None:
        validate_path({"id": project_id}, ID_RULES, f"Invalid project ID: {project_id}. {BAD_ID_HINT}")

    @router.get("")
    async def list_projects():
        return to_public_many(await projects.list())

    @router.get("/{project_id}")
    async def get_project(project_id: str):
        _check_id(project_id)
        project = await projects.get(to_object_id(project_id))
        if not project:
            raise NotFoundError(f"Invalid project ID: {project_id}")
        return to_public(project)

    @router.post("", status_code=201)
    async def create_project(request: Request, response: Response, body: Dict[str, Any] = Body(...)):
        validate(body, PROJECT_CREATE_RULES, "Invalid project data.")
        created, ok = await projects.create(body)
        if not ok:
            raise ApiError("Project was not created.")
        set_location(request, response, created["_id"])
        return to_public(created)

    @router.put("/{project_id}")
    async def update_project(project_id: str, body: Dict[str, Any] = Body(...)):
        ensure_same_id(project_id, body, "Project ID does not match.")
        validate(body, PROJECT_UPDATE_RULES, "Invalid project data.")
        oid = to_object_id(project_id)
        updated = await projects.replace(oid, body)
        if not updated:
            raise NotFoundError(f"Invalid project ID: {project_id}")
        return to_public(updated)

    @router.delete("/{project_id}")
    async def delete_project(project_id: str):
        _check_id(project_id)
        deleted = await projects.delete(to_object_id(project_id))
        if not deleted:
            raise NotFoundError(f"Invalid project ID: {project_id}")
        return to_public(deleted)

    return router
