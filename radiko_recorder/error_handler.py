"""
エラーハンドリングモジュール

このモジュールはRadikoRecorderの統一例外クラスを提供します。
- 入力値検証エラー（I/O前に検出）
- 通信エラー（ネットワーク障害・タイムアウト・非2xxステータス）
- プロトコルエラー（必須ヘッダー欠落・部分キー範囲外・XML不正）
- 録音エラー（外部キャプチャプロセスの失敗）

いずれのエラーも呼び出し元まで伝播させ、局所的な復旧は行いません。
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """エラー重要度"""
    LOW = "low"           # 軽微な警告
    MEDIUM = "medium"     # 注意が必要なエラー
    HIGH = "high"         # 重要なエラー
    CRITICAL = "critical" # 致命的なエラー


class ErrorCategory(Enum):
    """エラーカテゴリ"""
    VALIDATION = "validation"             # 入力値検証
    NETWORK = "network"                   # ネットワーク関連
    PROTOCOL = "protocol"                 # 認証プロトコル・データ形式
    RECORDING = "recording"               # 録音関連
    AUTHENTICATION = "authentication"     # 認証セッション状態
    CONFIGURATION = "configuration"       # 設定関連
    UNKNOWN = "unknown"                   # 不明


class RadikoRecorderError(Exception):
    """RadikoRecorder基底例外クラス"""
    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN,
                 severity: ErrorSeverity = ErrorSeverity.MEDIUM, context: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or {}


class ValidationError(RadikoRecorderError):
    """入力値検証エラー"""
    def __init__(self, message: str, context: Dict[str, Any] = None):
        super().__init__(message, ErrorCategory.VALIDATION, ErrorSeverity.LOW, context)


class TransportError(RadikoRecorderError):
    """通信エラー（ネットワーク障害・タイムアウト・非2xxレスポンス）"""
    def __init__(self, message: str, endpoint: str,
                 status_code: Optional[int] = None, body: str = "",
                 context: Dict[str, Any] = None):
        context = dict(context or {})
        context.update({'endpoint': endpoint, 'status_code': status_code})
        if body:
            context['body'] = body
        super().__init__(message, ErrorCategory.NETWORK, ErrorSeverity.HIGH, context)
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body


class ProtocolError(RadikoRecorderError):
    """プロトコル違反エラー"""
    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.HIGH,
                 context: Dict[str, Any] = None):
        super().__init__(message, ErrorCategory.PROTOCOL, severity, context)


class PartialKeyBoundsError(ProtocolError):
    """部分キーの切り出し範囲が認証キーの長さを超えた"""
    def __init__(self, offset: int, length: int, key_length: int):
        super().__init__(
            f"部分キーの範囲が不正です: offset={offset}, length={length}, key_length={key_length}",
            context={'offset': offset, 'length': length, 'key_length': key_length}
        )
        self.offset = offset
        self.length = length
        self.key_length = key_length


class SinkError(RadikoRecorderError):
    """録音エラー（外部キャプチャプロセスの起動失敗・異常終了）"""
    def __init__(self, message: str, exit_status: Optional[int] = None,
                 context: Dict[str, Any] = None):
        context = dict(context or {})
        context['exit_status'] = exit_status
        super().__init__(message, ErrorCategory.RECORDING, ErrorSeverity.HIGH, context)
        self.exit_status = exit_status


class SessionStateError(RadikoRecorderError):
    """認証が確立していないセッションの利用"""
    def __init__(self, message: str, context: Dict[str, Any] = None):
        super().__init__(message, ErrorCategory.AUTHENTICATION, ErrorSeverity.HIGH, context)


class ConfigurationError(RadikoRecorderError):
    """設定エラー"""
    def __init__(self, message: str, context: Dict[str, Any] = None):
        super().__init__(message, ErrorCategory.CONFIGURATION, ErrorSeverity.HIGH, context)


def format_error(error: Exception) -> str:
    """ログ出力用にエラー内容を整形

    Args:
        error: 例外オブジェクト

    Returns:
        str: "[カテゴリ] メッセージ (key=value, ...)" 形式の文字列
    """
    if not isinstance(error, RadikoRecorderError):
        return f"[{ErrorCategory.UNKNOWN.value}] {type(error).__name__}: {error}"

    text = f"[{error.category.value}] {error.message}"
    if error.context:
        details = ", ".join(f"{key}={value}" for key, value in error.context.items())
        text += f" ({details})"
    return text
