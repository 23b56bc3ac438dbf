# app/api/routes_users.py
# 사용자 CRUD + 사용자 소유 레시피(중첩 경로)
# GET/POST /api/users, GET/PUT/DELETE /api/users/{userId}
# GET/POST /api/users/{userId}/recipes, GET/PUT/DELETE /api/users/{userId}/recipes/{recipeId}

from __future__ import annotations

import logging
from typing import Any, Dict, List

from bson import ObjectId
from fastapi import APIRouter, Body, Request, Response
from starlette.concurrency import run_in_threadpool

from app.api.common import (
    BAD_ID_HINT,
    ensure_same_id,
    set_location,
    to_public,
    to_public_many,
    validate_path,
)
from app.core.errors import ApiError, NotFoundError
from app.core.ids import is_valid_id, to_object_id
from app.core.security import hash_password
from app.core.validation import validate
from app.db.repository import RecipeRepository, UserRepository
from app.models.rules import (
    SCOPED_RECIPE_CREATE_RULES,
    SCOPED_RECIPE_RULES,
    SCOPED_RECIPE_UPDATE_RULES,
    USER_CREATE_RULES,
    USER_ID_RULES,
    USER_UPDATE_RULES,
)

log = logging.getLogger(__name__)


def public_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    # 비밀번호(해시 포함)는 응답에 절대 싣지 않는다
    out = to_public(doc)
    out.pop("password", None)
    return out


async def _prepare_user(body: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(body)
    # bcrypt는 CPU 바운드라 이벤트 루프 밖에서
    data["password"] = await run_in_threadpool(hash_password, body["password"])
    if isinstance(data.get("recipes_id"), list):
        data["recipes_id"] = [ObjectId(x) if is_valid_id(x) else x for x in data["recipes_id"]]
    return data


def build_router(users: UserRepository, recipes: RecipeRepository) -> APIRouter:
    """저장소를 클로저로 받아 라우터 구성 (전역 DB 핸들 없음)"""

    router = APIRouter(prefix="/api/users", tags=["users"])

    # ------------------------------
    # users
    # ------------------------------

    @router.get("")
    async def list_users() -> List[Dict[str, Any]]:
        return [public_user(u) for u in await users.list()]

    @router.get("/{user_id}")
    async def get_user(user_id: str):
        validate_path({"userId": user_id}, USER_ID_RULES, f"Invalid user ID: {user_id}. {BAD_ID_HINT}")
        user = await users.get(to_object_id(user_id))
        if not user:
            raise NotFoundError(f"Invalid user ID: {user_id}")
        return public_user(user)

    @router.post("", status_code=201)
    async def create_user(request: Request, response: Response, body: Dict[str, Any] = Body(...)):
        validate(body, USER_CREATE_RULES, "Invalid user data.")
        created, ok = await users.create(await _prepare_user(body))
        if not ok:
            raise ApiError("User was not created.")
        log.info("user created: %s", created["_id"])
        set_location(request, response, created["_id"])
        return public_user(created)

    @router.put("/{user_id}")
    async def update_user(user_id: str, body: Dict[str, Any] = Body(...)):
        ensure_same_id(user_id, body, "User ID does not match.")
        validate(body, USER_UPDATE_RULES, "Invalid user data.")
        oid = to_object_id(user_id)
        updated = await users.replace(oid, await _prepare_user(body))
        if not updated:
            raise NotFoundError(f"Invalid user ID: {user_id}")
        return public_user(updated)

    @router.delete("/{user_id}")
    async def delete_user(user_id: str):
        validate_path({"userId": user_id}, USER_ID_RULES, f"Invalid user ID: {user_id}. {BAD_ID_HINT}")
        deleted = await users.delete(to_object_id(user_id))
        if not deleted:
            raise NotFoundError(f"Invalid user ID: {user_id}")
        return public_user(deleted)

    # ------------------------------
    # users/{userId}/recipes
    # ------------------------------

    @router.get("/{user_id}/recipes")
    async def list_user_recipes(user_id: str):
        validate_path({"userId": user_id}, USER_ID_RULES, f"Invalid user ID: {user_id}. {BAD_ID_HINT}")
        return to_public_many(await recipes.list_for_owner(to_object_id(user_id)))

    @router.post("/{user_id}/recipes", status_code=201)
    async def create_user_recipe(
        user_id: str,
        request: Request,
        response: Response,
        body: Dict[str, Any] = Body(...),
    ):
        validate_path({"userId": user_id}, USER_ID_RULES, f"Invalid user ID: {user_id}. {BAD_ID_HINT}")
        validate(body, SCOPED_RECIPE_CREATE_RULES, "Invalid recipe data.")
        uid = to_object_id(user_id)
        if not await users.get(uid):
            raise NotFoundError(f"Invalid user ID: {user_id}")

        created, ok = await recipes.create({**body, "userId": uid})
        if not ok:
            raise ApiError("Recipe was not created.")
        await users.add_recipe(uid, created["_id"])
        set_location(request, response, created["_id"])
        return to_public(created)

    @router.get("/{user_id}/recipes/{recipe_id}")
    async def get_user_recipe(user_id: str, recipe_id: str):
        validate_path(
            {"recipeId": recipe_id, "userId": user_id},
            SCOPED_RECIPE_RULES,
            f"Invalid recipe or user ID. {BAD_ID_HINT}",
        )
        recipe = await recipes.get_scoped(to_object_id(recipe_id), to_object_id(user_id))
        if not recipe:
            raise NotFoundError(f"Invalid recipe ID: {recipe_id}")
        return to_public(recipe)

    @router.put("/{user_id}/recipes/{recipe_id}")
    async def update_user_recipe(user_id: str, recipe_id: str, body: Dict[str, Any] = Body(...)):
        ensure_same_id(recipe_id, body, "Recipe ID does not match.")
        validate_path({"userId": user_id}, USER_ID_RULES, f"Invalid user ID: {user_id}. {BAD_ID_HINT}")
        validate(body, SCOPED_RECIPE_UPDATE_RULES, "Invalid recipe data.")
        uid, rid = to_object_id(user_id), to_object_id(recipe_id)

        # 소유자는 경로가 결정 (바디의 userId로 이전 불가)
        updated = await recipes.replace(rid, {**body, "userId": uid}, parent_id=uid)
        if not updated:
            raise NotFoundError(f"Invalid recipe ID: {recipe_id}")
        return to_public(updated)

    @router.delete("/{user_id}/recipes/{recipe_id}")
    async def delete_user_recipe(user_id: str, recipe_id: str):
        validate_path(
            {"recipeId": recipe_id, "userId": user_id},
            SCOPED_RECIPE_RULES,
            f"Invalid user or recipe ID. {BAD_ID_HINT}",
        )
        uid, rid = to_object_id(user_id), to_object_id(recipe_id)
        deleted = await recipes.delete_scoped(rid, uid)
        if not deleted:
            raise NotFoundError(f"Invalid recipe ID: {recipe_id}")
        await users.remove_recipe(uid, rid)
        return to_public(deleted)

    return router
