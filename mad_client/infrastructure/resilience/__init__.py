"""レジリエンスモジュール

リトライポリシーをエクスポート
"""

from .retry import DEFAULT_BACKOFF_MS, RetryableError, RetryPolicy, with_retry


__all__ = [
    "DEFAULT_BACKOFF_MS",
    "RetryPolicy",
    "RetryableError",
    "with_retry",
]
