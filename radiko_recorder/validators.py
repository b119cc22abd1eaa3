"""
入力値検証モジュール

エリアID・放送局ID・録音時間の検証を行います。
いずれもネットワークアクセスの前に呼び出し、不正な値は ValidationError で即座に失敗させます。
"""

import re

from .error_handler import ValidationError


# JP1〜JP47（先頭ゼロなし）
AREA_ID_PATTERN = re.compile(r"^JP([1-9]|[1-3][0-9]|4[0-7])$")
STATION_ID_PATTERN = re.compile(r"^[A-Z0-9]+$")


def is_valid_area_id(area_id: str) -> bool:
    """エリアIDが正しい形式（JP1〜JP47）かチェックする"""
    return isinstance(area_id, str) and AREA_ID_PATTERN.fullmatch(area_id) is not None


def is_valid_station_id(station_id: str) -> bool:
    """放送局IDが正しい形式（大文字の英数字のみ）かチェックする"""
    return isinstance(station_id, str) and STATION_ID_PATTERN.fullmatch(station_id) is not None


def validate_area_id(area_id: str) -> str:
    if not is_valid_area_id(area_id):
        raise ValidationError(f"エリアIDが不正です: {area_id!r}（JP1〜JP47）",
                              context={'area_id': area_id})
    return area_id


def validate_station_id(station_id: str) -> str:
    if not is_valid_station_id(station_id):
        raise ValidationError(f"放送局IDが不正です: {station_id!r}（大文字英数字のみ）",
                              context={'station_id': station_id})
    return station_id


def validate_duration_minutes(duration_minutes: int) -> int:
    # bool は int のサブクラスなので明示的に除外
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise ValidationError(f"録音時間（分）は整数で指定してください: {duration_minutes!r}",
                              context={'duration_minutes': duration_minutes})
    if duration_minutes <= 0:
        raise ValidationError(f"録音時間（分）は正の値で指定してください: {duration_minutes}",
                              context={'duration_minutes': duration_minutes})
    return duration_minutes
