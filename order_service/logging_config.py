"""
Order Service — ログ設定

全モジュールは logging.getLogger(__name__) でロガーを取得し、
出力先とフォーマットはここで一元的に設定する。
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: str | int = logging.INFO) -> None:
    """標準出力(Docker 互換)へのハンドラを設定する。"""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # 外部ライブラリのログを抑える
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)