# app/main.py
# FastAPI 앱 팩토리 — 서비스 2개
#   create_recipes_app():  Cooking Recipes API (users / users/{id}/recipes / recipes)
#   create_projects_app(): Project Management API (projects)
# Mongo 핸들은 팩토리에서 한 번 만들고 저장소 -> 라우터로 직접 넘긴다 (app 전역 상태 X)
# 실행: uvicorn app.main:create_recipes_app --factory  (또는 cooking-recipes-api 스크립트)

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Iterable

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api import routes_projects, routes_recipes, routes_users
from app.core.access_log import RequestLoggingMiddleware, setup_logging
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.db.indexes import ensure_cooking_indexes, ensure_project_indexes
from app.db.init import close, connect, wait_for_db
from app.db.repository import ProjectRepository, RecipeRepository, UserRepository

log = logging.getLogger(__name__)

VERSION = "0.1.0"


def _build_app(
    title: str,
    db_name: str,
    make_routers: Callable[[AsyncIOMotorDatabase], Iterable[APIRouter]],
    ensure_indexes: Callable[[AsyncIOMotorDatabase], Awaitable[None]],
    db: AsyncIOMotorDatabase | None = None,
) -> FastAPI:
    # db를 넘기면(테스트) 클라이언트 생성/ping/인덱스 생략
    client = None
    if db is None:
        client = connect(settings.MONGO_URI)
        db = client[db_name]

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.LOG_LEVEL)
        if client is not None:
            # 1) DB 먼저 붙는다
            if await wait_for_db(db, retries=settings.DB_INIT_RETRIES):
                # 2) 인덱스 보장
                try:
                    await ensure_indexes(db)
                    log.info("[startup] indexes ensured")
                except Exception as e:
                    log.warning("[startup] ensure_indexes failed: %s", e)
        log.info("%s is running on port %d", title, settings.PORT)
        yield
        close(client)

    app = FastAPI(title=title, version=VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Location"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    @app.get("/health")
    async def health():
        ok = {"status": "ok", "db": "ok"}
        try:
            await db.command("ping")
        except Exception as e:
            ok["db"] = f"error: {e}"
        return ok

    for router in make_routers(db):
        app.include_router(router)
    return app


def _cooking_routers(db: AsyncIOMotorDatabase):
    users = UserRepository(db)
    recipes = RecipeRepository(db)
    return [
        routes_users.build_router(users, recipes),
        routes_recipes.build_router(recipes, users),
    ]


def _project_routers(db: AsyncIOMotorDatabase):
    return [routes_projects.build_router(ProjectRepository(db))]


def create_recipes_app(db: AsyncIOMotorDatabase | None = None) -> FastAPI:
    return _build_app(
        "Cooking Recipes API",
        settings.MONGO_DB,
        _cooking_routers,
        ensure_cooking_indexes,
        db=db,
    )


def create_projects_app(db: AsyncIOMotorDatabase | None = None) -> FastAPI:
    return _build_app(
        "Project Management API",
        settings.PROJECTS_MONGO_DB,
        _project_routers,
        ensure_project_indexes,
        db=db,
    )


def run_recipes() -> None:
    # factory=True: 앱(=motor 클라이언트)을 uvicorn 이벤트 루프 안에서 만든다
    uvicorn.run("app.main:create_recipes_app", factory=True, host=settings.HOST, port=settings.PORT)


def run_projects() -> None:
    uvicorn.run("app.main:create_projects_app", factory=True, host=settings.HOST, port=settings.PORT)
