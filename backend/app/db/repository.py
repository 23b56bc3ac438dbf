# app/db/repository.py
# 리소스별 CRUD — motor 컬렉션 래퍼
# 단일 문서 연산만, 트랜잭션/낙관적 락 없음 (동시 수정은 마지막 쓰기가 이김)

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

log = logging.getLogger(__name__)

CREATE_DATE = "createDate"
MODIFICATION_DATE = "modificationDate"

# 바디로 덮어쓰면 안 되는 서버 관리 필드
_PROTECTED = ("_id", "id", CREATE_DATE)


def _now() -> datetime:
    # BSON date는 ms 정밀도 + naive UTC로 돌아오므로 미리 맞춰둔다
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class DocumentRepository:
    """
    컬렉션 하나에 대한 CRUD.
    owner_field가 있으면 *_scoped 연산으로 부모 id까지 함께 매칭한다.
    """

    collection_name: str = ""
    owner_field: Optional[str] = None
    stamp_dates: bool = True

    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db[self.collection_name]

    def _scope(self, oid: ObjectId, parent_id: Optional[ObjectId]) -> Dict[str, Any]:
        flt: Dict[str, Any] = {"_id": oid}
        if parent_id is not None:
            if not self.owner_field:
                raise TypeError(f"{self.collection_name} has no owner field")
            flt[self.owner_field] = parent_id
        return flt

    async def list(self, filter: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        return await self.col.find(dict(filter or {})).to_list(length=None)

    async def get(self, oid: ObjectId) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({"_id": oid})

    async def get_scoped(self, oid: ObjectId, parent_id: ObjectId) -> Optional[Dict[str, Any]]:
        return await self.col.find_one(self._scope(oid, parent_id))

    async def create(self, doc: Mapping[str, Any]) -> Tuple[Dict[str, Any], bool]:
        """서버가 _id/타임스탬프를 채워 insert. (생성된 문서, 성공 여부)"""
        data = {k: v for k, v in doc.items() if k not in _PROTECTED}
        if self.stamp_dates:
            now = _now()
            data[CREATE_DATE] = now
            data[MODIFICATION_DATE] = now
        result = await self.col.insert_one(data)
        data["_id"] = result.inserted_id
        log.debug("%s inserted %s", self.collection_name, result.inserted_id)
        return data, bool(result.acknowledged)

    async def replace(
        self,
        oid: ObjectId,
        doc: Mapping[str, Any],
        parent_id: Optional[ObjectId] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        바디 전체를 $set으로 덮어쓴다 (createDate는 유지).
        갱신 후 문서 전체, 매칭되는 문서가 없으면 None
        """
        data = {k: v for k, v in doc.items() if k not in _PROTECTED}
        if self.stamp_dates:
            data[MODIFICATION_DATE] = _now()
        return await self.col.find_one_and_update(
            self._scope(oid, parent_id),
            {"$set": data},
            return_document=ReturnDocument.AFTER,
        )

    async def delete(self, oid: ObjectId) -> Optional[Dict[str, Any]]:
        return await self.col.find_one_and_delete({"_id": oid})

    async def delete_scoped(self, oid: ObjectId, parent_id: ObjectId) -> Optional[Dict[str, Any]]:
        return await self.col.find_one_and_delete(self._scope(oid, parent_id))


class UserRepository(DocumentRepository):
    collection_name = "users"

    async def add_recipe(self, user_id: ObjectId, recipe_id: ObjectId) -> None:
        await self.col.update_one({"_id": user_id}, {"$addToSet": {"recipes_id": recipe_id}})

    async def remove_recipe(self, user_id: ObjectId, recipe_id: ObjectId) -> None:
        await self.col.update_one({"_id": user_id}, {"$pull": {"recipes_id": recipe_id}})


class RecipeRepository(DocumentRepository):
    collection_name = "recipes"
    owner_field = "userId"

    async def list_for_owner(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        return await self.list({self.owner_field: user_id})


class ProjectRepository(DocumentRepository):
    collection_name = "projects"
    # 프로젝트 문서는 받은 필드만 저장 (서버 타임스탬프 없음)
    stamp_dates = False
