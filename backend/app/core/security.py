# 비밀번호 해시 (bcrypt) — 인증 로직은 없음, 저장용 해시만
import bcrypt

from app.core.config import settings


def hash_password(password: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
