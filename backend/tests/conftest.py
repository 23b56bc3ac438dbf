"""
공용 pytest fixture
- fake_db: motor 컬렉션 흉내 (find/find_one/insert_one/update_one/find_one_and_update/find_one_and_delete)
- recipes_client / projects_client: ASGITransport로 붙인 httpx AsyncClient
"""

import copy
import os
from types import SimpleNamespace

# 앱 import 전에 테스트용 설정 주입
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo import ReturnDocument

from app.main import create_projects_app, create_recipes_app


def _matches(doc, flt):
    return all(doc.get(k) == v for k, v in flt.items())


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    def __init__(self, name):
        self.name = name
        self.docs = []

    def find(self, flt=None):
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, flt or {})])

    async def find_one(self, flt):
        for d in self.docs:
            if _matches(d, flt):
                return copy.deepcopy(d)
        return None

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    @staticmethod
    def _apply(d, update):
        for k, v in update.get("$set", {}).items():
            d[k] = copy.deepcopy(v)
        for k, v in update.get("$addToSet", {}).items():
            items = d.setdefault(k, [])
            if v not in items:
                items.append(v)
        for k, v in update.get("$pull", {}).items():
            d[k] = [x for x in d.get(k, []) if x != v]

    async def update_one(self, flt, update):
        for d in self.docs:
            if not _matches(d, flt):
                continue
            before = copy.deepcopy(d)
            self._apply(d, update)
            return SimpleNamespace(matched_count=1, modified_count=int(before != d))
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def find_one_and_update(self, flt, update, return_document=ReturnDocument.BEFORE):
        for d in self.docs:
            if not _matches(d, flt):
                continue
            before = copy.deepcopy(d)
            self._apply(d, update)
            return copy.deepcopy(d) if return_document == ReturnDocument.AFTER else before
        return None

    async def find_one_and_delete(self, flt):
        for i, d in enumerate(self.docs):
            if _matches(d, flt):
                return self.docs.pop(i)
        return None

    async def create_index(self, *args, **kwargs):
        return "ok"


class FakeDatabase:
    name = "test-db"

    def __init__(self):
        self._cols = {}

    def __getitem__(self, name):
        return self._cols.setdefault(name, FakeCollection(name))

    async def command(self, cmd):
        return {"ok": 1.0}


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest_asyncio.fixture
async def recipes_client(fake_db):
    app = create_recipes_app(db=fake_db)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def projects_client(fake_db):
    app = create_projects_app(db=fake_db)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def user_payload():
    return {
        "name": "Alice",
        "username": "alice1",
        "password": "Abcdef1!",
        "sex": "female",
        "authority": "user",
        "description": "home cook",
        "accountStatus": "active",
    }


@pytest.fixture
def recipe_payload():
    return {
        "name": "Shakshuka",
        "shortDescription": "Eggs poached in tomato sauce",
        "fullDescription": "Simmer tomatoes and peppers, crack eggs, cover and cook.",
        "cookingTime": 25,
        "products": ["eggs", "tomatoes", "peppers"],
        "tags": ["breakfast", "vegetarian"],
    }
