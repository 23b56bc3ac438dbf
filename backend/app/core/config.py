# 환경변수 로딩 (.env)
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"  # 필요 시 prod/staging로 분리
    MONGO_DB: str = "cooking-recipes-db"
    PROJECTS_MONGO_DB: str = "project-management-db"

    HOST: str = "0.0.0.0"
    PORT: int = 9000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # bcrypt cost factor
    BCRYPT_ROUNDS: int = 10
    # 스타트업 시 DB ping 재시도 횟수 (1초 간격)
    DB_INIT_RETRIES: int = 20

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("LOG_LEVEL")
    @classmethod
    def _v_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL '{v}'")
        return upper

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
