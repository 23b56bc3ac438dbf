# app/db/init.py
# Mongo 연결 유틸 — motor
# 전역 핸들 없이 create_app에서 한 번 만들고 lifespan에서 ping/close

from __future__ import annotations

import asyncio
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

log = logging.getLogger(__name__)


def connect(uri: str) -> AsyncIOMotorClient:
    # 클라이언트 생성은 I/O 없음 (첫 명령 때 실제 연결)
    return AsyncIOMotorClient(uri)


async def wait_for_db(db: AsyncIOMotorDatabase, retries: int = 20, delay: float = 1.0) -> bool:
    """DB가 붙을 때까지 ping (최대 retries회, delay초 간격)"""
    for i in range(retries):
        try:
            await db.command("ping")
            log.info("[startup] db ready: %s", db.name)
            return True
        except Exception as e:
            log.warning("[startup] db init retry %d: %s", i + 1, e)
            await asyncio.sleep(delay)
    log.error("[startup] db init failed after %d retries", retries)
    return False


def close(client: AsyncIOMotorClient | None) -> None:
    # 앱 종료 시 커넥션 정리
    if client is not None:
        client.close()
