"""インフラストラクチャ層の例外クラス定義

外部サービス呼び出しで発生する例外を定義。
一時的な失敗（ネットワーク・レート制限）はリトライ対象、
それ以外の非 2xx 応答は ExternalServiceException として呼び出し元に伝播する。
"""

from typing import Any

from mad_client.domain.exceptions import MADClientException
from mad_client.domain.value_objects.response_outcome import Failure
from mad_client.domain.value_objects.vendor_error_code import VendorErrorCode


class InfrastructureException(MADClientException):
    """インフラストラクチャ層の基底例外クラス"""

    pass


class ExternalServiceException(InfrastructureException):
    """外部サービスのエラー

    非 2xx 応答を表す。メッセージにはステータスライン・リクエストURL・
    レスポンスボディ・リクエストボディを含め、呼び出し元がベンダーの
    エラーコード文字列で判別できるようにする。
    """

    def __init__(
        self,
        service_name: str,
        operation: str,
        status_code: int | None = None,
        reason: str | None = None,
        response_body: str | None = None,
        request_url: str | None = None,
        request_body: str | None = None,
    ):
        """
        Args:
            service_name: サービス名
            operation: 実行した操作（HTTPメソッドなど）
            status_code: HTTP ステータスコード
            reason: reason phrase
            response_body: レスポンスボディ
            request_url: リクエストURL
            request_body: リクエストボディ（ボディ無しなら None）
        """
        status_line = f"{status_code} {reason}".strip() if status_code else reason
        message = f"Failed: service '{service_name}' ({operation})"
        if status_line:
            message += f" - response: {status_line}"
        if response_body:
            message += f" {response_body}"
        if request_url:
            message += f" requestUrl: {request_url}"
        message += f" requestBody: {request_body or ''}"

        super().__init__(
            message=message,
            error_code="INF-003",
            details={
                "service_name": service_name,
                "operation": operation,
                "status_code": status_code,
                "reason": reason,
                "response_body": response_body,
                "request_url": request_url,
                "request_body": request_body,
            },
        )

    @classmethod
    def from_failure(
        cls, service_name: str, operation: str, failure: Failure
    ) -> "ExternalServiceException":
        """Failure 分類結果から例外を生成"""
        return cls(
            service_name,
            operation,
            status_code=failure.status_code,
            reason=failure.reason,
            response_body=failure.body,
            request_url=failure.request_url,
            request_body=failure.request_body,
        )

    @property
    def status_code(self) -> int | None:
        return self.details.get("status_code")

    @property
    def request_url(self) -> str | None:
        return self.details.get("request_url")

    @property
    def response_body(self) -> str | None:
        return self.details.get("response_body")

    @property
    def vendor_error_code(self) -> VendorErrorCode | None:
        """メッセージに含まれるベンダーのエラーコード"""
        return VendorErrorCode.from_message(self.message)


class RateLimitException(ExternalServiceException):
    """レート制限（429）

    Retry-After 分の待機後に送出され、リトライの契機となる。
    """

    def __init__(
        self,
        service_name: str,
        operation: str,
        retry_after: int,
        request_url: str | None = None,
    ):
        """
        Args:
            service_name: サービス名
            operation: 実行した操作
            retry_after: Retry-After の秒数
            request_url: リクエストURL
        """
        super().__init__(
            service_name,
            operation,
            status_code=429,
            reason="Too Many Requests",
            request_url=request_url,
        )
        self.error_code = "INF-010"
        self.details["retry_after"] = retry_after

    @property
    def retry_after(self) -> int:
        return self.details["retry_after"]


class NetworkException(InfrastructureException):
    """ネットワークエラー

    接続失敗・タイムアウトなど、レスポンスを得られなかった場合に発生
    """

    def __init__(
        self,
        method: str,
        url: str,
        reason: str,
        **kwargs: Any,
    ):
        """
        Args:
            method: HTTP メソッド
            url: リクエストURL
            reason: エラーの理由
            **kwargs: 追加の詳細情報
        """
        details = {"method": method, "url": url, "reason": reason}
        details.update(kwargs)
        super().__init__(
            message=f"Network error ({method}): {url} - {reason}",
            error_code="INF-007",
            details=details,
        )


class ResponseParsingException(InfrastructureException):
    """レスポンスボディの解析に失敗した場合の例外"""

    def __init__(self, service_name: str, reason: str, body: str | None = None):
        """
        Args:
            service_name: サービス名
            reason: 解析失敗の理由
            body: 解析できなかったボディ（先頭のみ保持）
        """
        snippet = (body or "")[:500]
        super().__init__(
            message=f"Failed to parse response from '{service_name}': {reason}",
            error_code="INF-011",
            details={"service_name": service_name, "reason": reason, "body": snippet},
        )
