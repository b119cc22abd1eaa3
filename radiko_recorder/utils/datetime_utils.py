"""
日時処理ユーティリティ

Radiko APIで使う14桁の日時表記（YYYYMMDDHHMMSS）の変換処理
"""

from datetime import datetime

from ..error_handler import ValidationError


RADIKO_DATETIME_FORMAT = '%Y%m%d%H%M%S'


def format_radiko_datetime(value: datetime) -> str:
    """datetime を YYYYMMDDHHMMSS 形式の文字列に変換
    
    Example:
        format_radiko_datetime(datetime(2024, 1, 1, 0, 0, 0))
        # '20240101000000'
    """
    return value.strftime(RADIKO_DATETIME_FORMAT)


def parse_radiko_datetime(text: str) -> datetime:
    """YYYYMMDDHHMMSS 形式の文字列をローカル時刻（naive datetime）に変換
    
    Args:
        text: 14桁の日時文字列
        
    Returns:
        datetime: ローカル時刻として解釈した datetime
        
    Raises:
        ValidationError: 14桁の数字でない、または日時として不正な場合
    """
    if len(text) != 14 or not text.isdigit():
        raise ValidationError(f"開始時刻はYYYYMMDDHHMMSS形式で指定してください: {text}",
                              context={'start_time': text})
    try:
        return datetime.strptime(text, RADIKO_DATETIME_FORMAT)
    except ValueError as e:
        raise ValidationError(f"開始時刻が不正です: {text} ({e})",
                              context={'start_time': text})
