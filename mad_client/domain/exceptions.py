"""ドメイン層の例外クラス定義

アプリケーション全体で使用される基底例外クラスを定義
"""

from typing import Any


class MADClientException(Exception):  # noqa: N818
    """MADクライアントの基底例外クラス

    すべての独自例外クラスはこのクラスを継承する。
    エラーコードとメッセージを管理し、トレーサビリティを提供。
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Args:
            message: エラーメッセージ
            error_code: エラーコード（例: INF-003）
            details: 追加の詳細情報
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """エラーの文字列表現を返す"""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class DomainException(MADClientException):
    """ドメイン層の基底例外クラス"""

    pass


class InvalidRequestException(DomainException):
    """送信前のリクエストが不正な場合の例外

    メソッドやパスなど、送信できない値が指定された場合に発生
    """

    def __init__(self, field: str, reason: str):
        """
        Args:
            field: 不正なフィールド名
            reason: 不正な理由
        """
        super().__init__(
            message=f"Invalid request field '{field}': {reason}",
            error_code="DOM-001",
            details={"field": field, "reason": reason},
        )
