"""
Order Service — 設定

設定値はすべて環境変数から読む(コンテナ前提)。
DATABASE_URL だけは必須。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    database_url: str
    redis_url: str = "redis://localhost:6379"
    log_level: str = "INFO"
    sql_echo: bool = False


def load_settings(environ=None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        database_url=env["DATABASE_URL"],
        redis_url=env.get("REDIS_URL", "redis://localhost:6379"),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        sql_echo=env.get("SQL_ECHO", "").lower() in ("1", "true", "yes"),
    )
