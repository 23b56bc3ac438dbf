# app/core/validation.py
# 필드 단위 선언형 검증기
# - 규칙은 제약 종류별 dataclass (Required, MaxLength(n), Regex(...), OneOf(...) ...)
# - validate(record, rules): 통과하면 record 그대로 반환, 실패하면 첫 위반으로 ValidationError

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, FrozenSet, Mapping, Sequence, Union
from urllib.parse import urlparse

from app.core.errors import ValidationError

ID_PATTERN = r"^[0-9a-f]{24}\Z"
PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[!@#$%^&*_])(?=.{8,})"

_ALNUM_RE = re.compile(r"[a-zA-Z0-9]+")


@dataclass(frozen=True)
class Required:
    name = "required"


@dataclass(frozen=True)
class IsString:
    name = "string"


@dataclass(frozen=True)
class IsNumber:
    name = "number"


@dataclass(frozen=True)
class IsArray:
    name = "array"


@dataclass(frozen=True)
class IsDate:
    name = "date"


@dataclass(frozen=True)
class IsUrl:
    name = "url"


@dataclass(frozen=True)
class AlphaNumeric:
    name = "alpha_numeric"


@dataclass(frozen=True)
class MaxLength:
    limit: int
    name = "max"


@dataclass(frozen=True)
class MaxBytes:
    # UTF-8 인코딩 기준 길이 (bcrypt 입력 제한)
    limit: int
    name = "max_bytes"


@dataclass(frozen=True)
class Regex:
    pattern: str
    name = "regex"


@dataclass(frozen=True)
class OneOf:
    values: FrozenSet[str]
    name = "in"


Constraint = Union[
    Required, IsString, IsNumber, IsArray, IsDate, IsUrl, AlphaNumeric, MaxLength, MaxBytes, Regex, OneOf
]
RuleSet = Mapping[str, Sequence[Constraint]]


def one_of(*values: str) -> OneOf:
    return OneOf(frozenset(values))


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _is_date(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str):
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _is_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parts = urlparse(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def check(constraint: Constraint, value: Any) -> bool:
    """제약 하나를 값에 적용. Required 외에는 값이 없으면 통과."""
    if isinstance(constraint, Required):
        return not _is_missing(value)
    if value is None:
        return True

    if isinstance(constraint, IsString):
        return isinstance(value, str)
    if isinstance(constraint, IsNumber):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if isinstance(constraint, IsArray):
        return isinstance(value, list)
    if isinstance(constraint, IsDate):
        return _is_date(value)
    if isinstance(constraint, IsUrl):
        return _is_url(value)
    if isinstance(constraint, AlphaNumeric):
        return isinstance(value, str) and bool(_ALNUM_RE.fullmatch(value))
    if isinstance(constraint, MaxLength):
        return isinstance(value, (str, list)) and len(value) <= constraint.limit
    if isinstance(constraint, MaxBytes):
        return isinstance(value, str) and len(value.encode("utf-8")) <= constraint.limit
    if isinstance(constraint, Regex):
        return isinstance(value, str) and re.search(constraint.pattern, value) is not None
    if isinstance(constraint, OneOf):
        return value in constraint.values
    raise TypeError(f"unknown constraint: {constraint!r}")


def describe(field: str, constraint: Constraint) -> str:
    if isinstance(constraint, MaxLength):
        return f"{field} must be at most {constraint.limit} characters"
    if isinstance(constraint, MaxBytes):
        return f"{field} must be at most {constraint.limit} bytes"
    if isinstance(constraint, OneOf):
        return f"{field} must be one of: {', '.join(sorted(constraint.values))}"
    if isinstance(constraint, Regex):
        return f"{field} has an invalid format"
    if isinstance(constraint, Required):
        return f"{field} is required"
    return f"{field} validation failed on {constraint.name}"


def validate(record: Mapping[str, Any], rules: RuleSet, message: str = "Validation failed") -> Mapping[str, Any]:
    """
    rules 순서대로 필드를 검사하고, 첫 번째 위반에서 ValidationError.
    record는 수정하지 않고 그대로 돌려준다 (규칙에 없는 필드도 유지).
    """
    if not isinstance(record, Mapping):
        raise ValidationError(message, error=[{"field": None, "validation": "object", "message": "body must be an object"}])

    for field, constraints in rules.items():
        value = record.get(field)
        for c in constraints:
            if not check(c, value):
                raise ValidationError(message, field=field, rule=c.name, error=[
                    {"field": field, "validation": c.name, "message": describe(field, c)}
                ])
    return record
