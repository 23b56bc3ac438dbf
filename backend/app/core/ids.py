# app/core/ids.py
# 외부 24자리 hex 문자열 <-> Mongo ObjectId
# 응답용 문서 정리: _id(ObjectId) -> id(str), 내부 키 제거

from __future__ import annotations

import re
from typing import Any, Dict, Mapping

from bson import ObjectId

from app.core.errors import InvalidIdentifier
from app.core.validation import ID_PATTERN

_ID_RE = re.compile(ID_PATTERN)


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and bool(_ID_RE.fullmatch(value))


def to_object_id(value: str) -> ObjectId:
    # 대문자 hex는 ObjectId는 받아주지만 외부 포맷 규칙상 거부
    if not is_valid_id(value):
        raise InvalidIdentifier(f"Invalid ID: {value}. Id should have 24 hexadecimal characters.")
    return ObjectId(value)


def _stringify(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [_stringify(v) for v in value]
    if isinstance(value, dict):
        return {k: _stringify(v) for k, v in value.items()}
    return value


def replace_id(doc: Mapping[str, Any]) -> Dict[str, Any]:
    """
    _id를 문자열 id로 바꾼 사본을 돌려준다.
    중첩된 ObjectId(userId, recipes_id 등)도 문자열로 변환.
    """
    out = {k: _stringify(v) for k, v in doc.items() if k != "_id"}
    if "_id" in doc:
        out["id"] = str(doc["_id"])
    return out
