"""
RadikoRecorder ユーティリティモジュール

共通機能やヘルパー関数を提供するユーティリティパッケージ
"""

from typing import List
from .base import LoggerMixin
from .datetime_utils import format_radiko_datetime, parse_radiko_datetime
from .path_utils import ensure_directory_path_exists
from .network_utils import create_radiko_session

__all__: List[str] = [
    'LoggerMixin',
    'format_radiko_datetime',
    'parse_radiko_datetime',
    'ensure_directory_path_exists',
    'create_radiko_session'
]
