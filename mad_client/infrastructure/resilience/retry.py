"""リトライポリシーの実装

外部サービス呼び出しのリトライ処理を統一的に管理
"""

import asyncio
import functools
import logging

from collections.abc import Callable, Sequence
from typing import Any

from tenacity import (
    RetryError,
    before_sleep_log,
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_chain,
    wait_fixed,
    wait_none,
)

from mad_client.infrastructure.exceptions import (
    ExternalServiceException,
    NetworkException,
    RateLimitException,
)


logger = logging.getLogger(__name__)

# バックオフ遅延（ミリ秒）。試行ごとに先頭から1つずつ消費する
DEFAULT_BACKOFF_MS: tuple[int, ...] = (100, 500, 1000)


class RetryableError(Exception):
    """リトライ可能なエラーの基底クラス"""

    pass


class RetryPolicy:
    """リトライポリシーを定義するクラス"""

    # リトライ可能な例外のデフォルトリスト
    DEFAULT_RETRYABLE_EXCEPTIONS = (
        ExternalServiceException,
        NetworkException,
        RetryableError,
    )

    @staticmethod
    def backoff_sequence(
        delays_ms: Sequence[int] = DEFAULT_BACKOFF_MS,
        retry_client_errors: bool = True,
        sleep: Callable[[float], Any] | None = None,
    ):
        """固定のバックオフ遅延列に従うリトライポリシー

        - 試行回数は len(delays_ms) + 1
        - n 回目の失敗後は delays_ms[n] だけ待機
        - 遅延列を使い切ったら最後の例外を伝播

        Args:
            delays_ms: バックオフ遅延（ミリ秒）の列
            retry_client_errors: 429 以外の 4xx もリトライするか
            sleep: 待機関数（テスト用、非同期関数にはコルーチン関数を渡す）
        """
        if any(delay < 0 for delay in delays_ms):
            raise ValueError(f"Backoff delays must be >= 0, got {list(delays_ms)}")

        if delays_ms:
            wait = wait_chain(*(wait_fixed(delay / 1000) for delay in delays_ms))
        else:
            wait = wait_none()

        if retry_client_errors:
            retry_condition = retry_if_exception_type(
                RetryPolicy.DEFAULT_RETRYABLE_EXCEPTIONS
            )
        else:
            retry_condition = retry_if_exception(RetryPolicy.is_transient)

        options: dict[str, Any] = {
            "stop": stop_after_attempt(len(delays_ms) + 1),
            "wait": wait,
            "retry": retry_condition,
            "before_sleep": before_sleep_log(logger, logging.WARNING),
            "reraise": True,
        }
        if sleep is not None:
            options["sleep"] = sleep
        return retry(**options)

    @staticmethod
    def is_transient(exception: BaseException) -> bool:
        """一時的な失敗か判定

        ネットワークエラー・429・5xx はリトライ、それ以外の 4xx はリトライしない
        """
        if isinstance(exception, RateLimitException):
            return True
        if isinstance(exception, ExternalServiceException):
            status_code = exception.details.get("status_code")
            return bool(status_code and 500 <= status_code < 600)
        return isinstance(exception, NetworkException | RetryableError)

    @staticmethod
    def no_retry():
        """リトライしないポリシー

        リトライを無効化（テスト用など）
        """
        return retry(
            stop=stop_after_attempt(1),
            retry=retry_if_exception_type(()),  # 何もリトライしない
            reraise=True,
        )


def with_retry(
    policy: Callable[..., Any] | None = None, async_func: bool = False
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """関数にリトライポリシーを適用するデコレータ

    リトライを使い切った場合は RetryError ではなく最後の例外をそのまま送出する。

    Args:
        policy: 使用するリトライポリシー（Noneの場合は DEFAULT_BACKOFF_MS）
        async_func: 非同期関数かどうか

    Examples:
        @with_retry(policy=RetryPolicy.backoff_sequence([100, 500, 1000]))
        def list_models():
            return executor.execute(ServiceRequest.get(), MODELS_PATH)
    """
    if policy is None:
        policy = RetryPolicy.backoff_sequence()

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if async_func or asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                @policy
                async def retry_func():
                    return await func(*args, **kwargs)

                try:
                    return await retry_func()
                except RetryError as e:
                    # 最後の例外を再発生
                    last_exception = e.last_attempt.exception()
                    if last_exception is not None:
                        raise last_exception
                    raise

            return async_wrapper
        else:

            @functools.wraps(func)
            def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
                @policy
                def retry_func():
                    return func(*args, **kwargs)

                try:
                    return retry_func()
                except RetryError as e:
                    # 最後の例外を再発生
                    last_exception = e.last_attempt.exception()
                    if last_exception is not None:
                        raise last_exception
                    raise

            return sync_wrapper

    return decorator
