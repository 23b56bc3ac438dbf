# app/core/errors.py
# 에러 타입 + 공통 JSON 에러 응답 {message, error}
# 라우터/코덱에서 raise → create_app에서 등록한 핸들러가 봉투로 변환

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger(__name__)


class ApiError(Exception):
    """상태코드 + 사용자 메시지 + (선택) 원인"""

    status_code = 500

    def __init__(self, message: str, error: Any = None):
        super().__init__(message)
        self.message = message
        # 원인이 없으면 빈 객체
        self.error = error if error is not None else {}


class ValidationError(ApiError):
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        rule: Optional[str] = None,
        error: Any = None,
    ):
        if error is None and field is not None:
            # indicative 스타일: [{field, validation, message}]
            error = [{"field": field, "validation": rule, "message": message}]
        super().__init__(message, error)
        self.field = field
        self.rule = rule


class InvalidIdentifier(ApiError):
    status_code = 404


class NotFoundError(ApiError):
    status_code = 404


class IdentifierMismatch(ApiError):
    status_code = 404


def error_body(message: str, error: Any = None) -> dict:
    return {"message": message, "error": jsonable_encoder(error if error is not None else {})}


def error_response(status_code: int, message: str, error: Any = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(message, error))


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            log.error("%s %s -> %s", request.method, request.url.path, exc.message)
        else:
            log.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
        return error_response(exc.status_code, exc.message, exc.error)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        # 라우팅 안 된 경로(404), 메서드 불일치(405) 등
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        # 깨진 JSON, 객체가 아닌 바디
        return error_response(400, "Invalid request body.", exc.errors())

    @app.exception_handler(PyMongoError)
    async def handle_db_error(request: Request, exc: PyMongoError):
        log.exception("mongo error on %s %s", request.method, request.url.path)
        return error_response(500, "Database error.", {"type": type(exc).__name__})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        log.exception("unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "Internal Server Error")
