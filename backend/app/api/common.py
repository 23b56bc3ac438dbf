# 라우터 공통 헬퍼: 경로 id 검증, 바디 id 일치 검사, 응답 정리

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from fastapi import Request, Response

from app.core.errors import IdentifierMismatch, InvalidIdentifier, ValidationError
from app.core.ids import replace_id
from app.core.validation import RuleSet, validate

BAD_ID_HINT = "Id should have 24 hexadecimal characters."


def validate_path(params: Mapping[str, Any], rules: RuleSet, message: str) -> None:
    # 경로 id 형식 오류는 400이 아니라 404
    try:
        validate(params, rules)
    except ValidationError as e:
        raise InvalidIdentifier(message, e.error) from e


def ensure_same_id(path_id: str, body: Mapping[str, Any], message: str) -> None:
    # 불일치는 종료 전이: 이후 검증/DB 호출 없이 바로 404
    if body.get("id") != path_id:
        raise IdentifierMismatch(message)


def to_public(doc: Mapping[str, Any]) -> Dict[str, Any]:
    return replace_id(doc)


def to_public_many(docs: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [replace_id(d) for d in docs]


def set_location(request: Request, response: Response, new_id: Any) -> None:
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{new_id}"
