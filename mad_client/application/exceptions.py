"""アプリケーション層の例外クラス定義

設定の読み込み・検証で発生する例外を定義
"""

from typing import Any

from mad_client.domain.exceptions import MADClientException


class ApplicationException(MADClientException):
    """アプリケーション層の基底例外クラス"""

    pass


class ConfigurationException(ApplicationException):
    """設定エラーの基底例外

    必要な設定が欠落している、または不正な値の場合に発生
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Args:
            message: エラーメッセージ
            details: 追加の詳細情報
        """
        super().__init__(message=message, error_code="APP-001", details=details)


class MissingConfigException(ConfigurationException):
    """必須設定が未設定の場合の例外"""

    def __init__(self, config_key: str, message: str | None = None):
        """
        Args:
            config_key: 設定キー（環境変数名など）
            message: エラーメッセージ（省略時は自動生成）
        """
        super().__init__(
            message or f"Required configuration '{config_key}' is not set",
            {"config_key": config_key},
        )
        self.error_code = "APP-002"


class InvalidConfigException(ConfigurationException):
    """設定値が不正な場合の例外"""

    def __init__(self, config_key: str, value: str, reason: str):
        """
        Args:
            config_key: 設定キー
            value: 不正な値
            reason: 不正な理由
        """
        super().__init__(
            f"Invalid value for '{config_key}': {reason}",
            {"config_key": config_key, "value": value, "reason": reason},
        )
        self.error_code = "APP-003"
