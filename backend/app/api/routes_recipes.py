# app/api/routes_recipes.py
# 레시피 최상위 CRUD — recipes 컬렉션 (소유자 userId는 바디로 지정)
# GET/POST /api/recipes, GET/PUT/DELETE /api/recipes/{id}

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Request, Response

from app.api.common import BAD_ID_HINT, ensure_same_id, set_location, to_public, to_public_many, validate_path
from app.core.errors import ApiError, NotFoundError
from app.core.ids import to_object_id
from app.core.validation import validate
from app.db.repository import RecipeRepository, UserRepository
from app.models.rules import ID_RULES, RECIPE_CREATE_RULES, RECIPE_UPDATE_RULES

log = logging.getLogger(__name__)


def build_router(recipes: RecipeRepository, users: UserRepository) -> APIRouter:
    router = APIRouter(prefix="/api/recipes", tags=["recipes"])

    def _check_id(recipe_id: str) -> None:
        validate_path({"id": recipe_id}, ID_RULES, f"Invalid recipe ID: {recipe_id}. {BAD_ID_HINT}")

    async def _owner_or_404(user_id: str):
        uid = to_object_id(user_id)
        if not await users.get(uid):
            raise NotFoundError(f"Invalid user ID: {user_id}")
        return uid

    @router.get("")
    async def list_recipes():
        return to_public_many(await recipes.list())

    @router.get("/{recipe_id}")
    async def get_recipe(recipe_id: str):
        _check_id(recipe_id)
        recipe = await recipes.get(to_object_id(recipe_id))
        if not recipe:
            raise NotFoundError(f"Invalid recipe ID: {recipe_id}")
        return to_public(recipe)

    @router.post("", status_code=201)
    async def create_recipe(request: Request, response: Response, body: Dict[str, Any] = Body(...)):
        validate(body, RECIPE_CREATE_RULES, "Invalid recipe data.")
        uid = await _owner_or_404(body["userId"])

        created, ok = await recipes.create({**body, "userId": uid})
        if not ok:
            raise ApiError("Recipe was not created.")
        await users.add_recipe(uid, created["_id"])
        set_location(request, response, created["_id"])
        return to_public(created)

    @router.put("/{recipe_id}")
    async def update_recipe(recipe_id: str, body: Dict[str, Any] = Body(...)):
        ensure_same_id(recipe_id, body, "Recipe ID does not match.")
        validate(body, RECIPE_UPDATE_RULES, "Invalid recipe data.")
        rid = to_object_id(recipe_id)

        current = await recipes.get(rid)
        if not current:
            raise NotFoundError(f"Invalid recipe ID: {recipe_id}")
        uid = await _owner_or_404(body["userId"])

        updated = await recipes.replace(rid, {**body, "userId": uid})
        if not updated:
            # get과 update 사이에 삭제된 경우
            raise NotFoundError(f"Invalid recipe ID: {recipe_id}")

        # 소유자가 바뀌면 양쪽 users.recipes_id 갱신
        old_uid = current.get("userId")
        if old_uid != uid:
            if old_uid is not None:
                await users.remove_recipe(old_uid, rid)
            await users.add_recipe(uid, rid)
            log.info("recipe %s moved %s -> %s", rid, old_uid, uid)
        return to_public(updated)

    @router.delete("/{recipe_id}")
    async def delete_recipe(recipe_id: str):
        _check_id(recipe_id)
        rid = to_object_id(recipe_id)
        deleted = await recipes.delete(rid)
        if not deleted:
            raise NotFoundError(f"Invalid recipe ID: {recipe_id}")
        if deleted.get("userId") is not None:
            await users.remove_recipe(deleted["userId"], rid)
        return to_public(deleted)

    return router
