"""レスポンス分類ドメインサービス

ステータスコード・reason phrase・ヘッダーから ResponseOutcome を決定する。
HTTP クライアント実装（requests / aiohttp）には依存しない。
"""

import math

from collections.abc import Mapping
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

from mad_client.domain.value_objects.response_outcome import (
    Created,
    Failure,
    NoContent,
    RateLimited,
    ResponseOutcome,
    Success,
)


# Retry-After が欠落・解析不能な場合の待機秒数
DEFAULT_RETRY_AFTER_SECONDS = 1

TOO_MANY_REQUESTS = 429


def _header(headers: Mapping[str, str], name: str) -> str | None:
    """ヘッダーを大文字小文字を区別せずに取得"""
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def parse_retry_after(value: str | None, now: datetime | None = None) -> int:
    """Retry-After ヘッダーを秒数に変換

    秒数形式と HTTP-date 形式の両方に対応する。

    Args:
        value: ヘッダー値
        now: HTTP-date 形式の基準時刻（テスト用）

    Returns:
        待機秒数（0以上）
    """
    if value is None or not value.strip():
        return DEFAULT_RETRY_AFTER_SECONDS

    value = value.strip()
    if value.isdecimal():
        return int(value)

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER_SECONDS
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=UTC)
    now = now or datetime.now(UTC)
    return max(0, math.ceil((retry_at - now).total_seconds()))


def classify_response(
    status_code: int,
    reason: str | None,
    headers: Mapping[str, str],
    body: str,
    request_url: str,
    request_body: str | None = None,
) -> ResponseOutcome:
    """レスポンスを分類する

    Args:
        status_code: HTTP ステータスコード
        reason: reason phrase
        headers: レスポンスヘッダー
        body: デコード済みのレスポンスボディ
        request_url: リクエストURL（診断用）
        request_body: リクエストボディ（診断用）

    Returns:
        ResponseOutcome: 分類結果
    """
    reason = reason or ""

    if 200 <= status_code < 300:
        if reason == "No Content":
            return NoContent()
        if reason == "Created":
            location = _header(headers, "Location")
            if location is None:
                # Location 欠落は不正なレスポンスとして扱う
                return Failure(
                    status_code=status_code,
                    reason="Created (missing Location header)",
                    body=body,
                    request_url=request_url,
                    request_body=request_body,
                )
            return Created(location_url=location)
        return Success(body=body)

    if status_code == TOO_MANY_REQUESTS:
        return RateLimited(
            retry_after_seconds=parse_retry_after(_header(headers, "Retry-After"))
        )

    return Failure(
        status_code=status_code,
        reason=reason,
        body=body,
        request_url=request_url,
        request_body=request_body,
    )
