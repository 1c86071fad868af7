"""HTTPレスポンスの分類結果を表す値オブジェクト."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ResponseOutcome:
    """レスポンス分類結果の基底クラス."""

    @property
    def is_success(self) -> bool:
        """呼び出し元に値を返せる結果かどうか."""
        return False


@dataclass(frozen=True)
class Success(ResponseOutcome):
    """2xx レスポンス（No Content / Created 以外）.

    Attributes:
        body: デコード済みのレスポンスボディ
    """

    body: str = ""

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Created(ResponseOutcome):
    """2xx かつ reason が Created のレスポンス.

    Attributes:
        location_url: Location ヘッダーの値
    """

    location_url: str

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class NoContent(ResponseOutcome):
    """2xx かつ reason が No Content のレスポンス."""

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class RateLimited(ResponseOutcome):
    """429 Too Many Requests.

    Attributes:
        retry_after_seconds: Retry-After ヘッダーが指定する待機秒数
    """

    retry_after_seconds: int

    def __post_init__(self) -> None:
        if self.retry_after_seconds < 0:
            raise ValueError(
                f"retry_after_seconds must be >= 0, got {self.retry_after_seconds}"
            )


@dataclass(frozen=True)
class Failure(ResponseOutcome):
    """429 以外の非 2xx レスポンス.

    Attributes:
        status_code: HTTP ステータスコード
        reason: ステータスラインの reason phrase
        body: レスポンスボディ
        request_url: リクエストURL
        request_body: リクエストボディ（ボディ無しのリクエストは None）
    """

    status_code: int
    reason: str
    body: str
    request_url: str
    request_body: str | None = None


def result_text(outcome: ResponseOutcome) -> str:
    """成功系の結果を呼び出し元に返す文字列へ変換

    Args:
        outcome: 成功系の分類結果

    Returns:
        No Content は空文字、Created は Location、それ以外はボディ

    Raises:
        ValueError: 成功系以外の結果が渡された場合
    """
    if isinstance(outcome, NoContent):
        return ""
    if isinstance(outcome, Created):
        return outcome.location_url
    if isinstance(outcome, Success):
        return outcome.body
    raise ValueError(f"{type(outcome).__name__} does not carry a result")
