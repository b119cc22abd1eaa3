"""
RadikoRecorder - Radikoのタイムフリー録音ツール

このパッケージはRadikoの認証・放送局リスト取得・録音機能を提供します。

主要コンポーネント:
- auth: Radiko認証（auth1/auth2 ハンドシェイク、部分キー生成）
- station_catalog: 放送局リスト取得
- recording: プレイリストURL組み立てと外部キャプチャ（ffmpeg）による録音
- error_handler: 統一例外クラス
- cli: コマンドライン操作
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .auth import (
    RADIKO_AUTH_KEY, AuthState, HandshakeHeaders, RadikoAuthSession, derive_partial_key
)
from .station_catalog import StationCatalogClient, StationRecord, parse_station_list
from .recording import (
    CaptureSink, FfmpegCaptureSink, RecordingResult, StreamSession,
    build_auth_header_line, build_playlist_url
)
from .error_handler import (
    RadikoRecorderError, ValidationError, TransportError, ProtocolError,
    PartialKeyBoundsError, SinkError, SessionStateError, ConfigurationError,
    ErrorSeverity, ErrorCategory
)

__all__ = [
    # 認証関連
    'RADIKO_AUTH_KEY',
    'AuthState',
    'HandshakeHeaders',
    'RadikoAuthSession',
    'derive_partial_key',
    
    # 放送局リスト関連
    'StationCatalogClient',
    'StationRecord',
    'parse_station_list',
    
    # 録音関連
    'CaptureSink',
    'FfmpegCaptureSink',
    'RecordingResult',
    'StreamSession',
    'build_auth_header_line',
    'build_playlist_url',
    
    # エラーハンドリング関連
    'RadikoRecorderError',
    'ValidationError',
    'TransportError',
    'ProtocolError',
    'PartialKeyBoundsError',
    'SinkError',
    'SessionStateError',
    'ConfigurationError',
    'ErrorSeverity',
    'ErrorCategory',
]
