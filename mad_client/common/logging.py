"""構造化ログの設定と共通ユーティリティ."""

import logging
import sys
from typing import Any, cast

import structlog
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    unbind_contextvars,
)


# ログレベルの定義
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    add_timestamp: bool = True,
    stream: Any = None,
) -> None:
    """構造化ログの初期設定.

    Args:
        log_level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: JSON形式で出力するか
        add_timestamp: タイムスタンプを追加するか
        stream: 出力先（省略時は標準エラー出力）
    """
    timestamper = structlog.processors.TimeStamper(fmt="iso")

    # 共通のプロセッサー
    shared_processors_raw = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        timestamper if add_timestamp else None,
        structlog.processors.StackInfoRenderer(),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.UnicodeDecoder(),
    ]
    shared_processors: list[Any] = [p for p in shared_processors_raw if p is not None]

    # レンダラーの選択
    if json_format:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # 標準ログのフォーマッター
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    # CLI の出力と混ざらないよう標準エラー出力に出す
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(handler)
    root_logger.setLevel(LOG_LEVELS.get(log_level.upper(), logging.INFO))

    # requests / urllib3 のデバッグログは抑制
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """構造化ログのロガーインスタンスを取得.

    Args:
        name: ロガー名（通常は__name__を渡す）

    Returns:
        構造化ログのロガーインスタンス
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


def add_context(**kwargs: Any) -> None:
    """現在のコンテキストにキー・バリューペアを追加."""
    bind_contextvars(**kwargs)


def clear_context() -> None:
    """現在のコンテキストをクリア."""
    clear_contextvars()


class LogContext:
    """with文で使用できるログコンテキストマネージャー.

    Examples:
        with LogContext(model_id="abc"):
            logger.info("Deleting model")  # model_id が自動的に含まれる
    """

    def __init__(self, **kwargs: Any):
        self.context = kwargs

    def __enter__(self) -> "LogContext":
        add_context(**self.context)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # 自分が追加したキーのみ外す
        unbind_contextvars(*self.context.keys())
