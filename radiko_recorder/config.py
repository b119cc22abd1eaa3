"""
設定モジュール

RadikoRecorderの実行時設定を管理します。
優先順位: デフォルト値 < 設定ファイル(JSON) < 環境変数 < コマンドライン引数
"""

import os
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .error_handler import ConfigurationError
from .logging_config import get_logger
from .utils.config_utils import ConfigManager

logger = get_logger(__name__)

DEFAULT_AREA_ID = "JP13"

# 環境変数名 -> 設定項目名
ENVIRONMENT_OVERRIDES = {
    'RADIKO_RECORDER_AREA_ID': 'area_id',
    'RADIKO_RECORDER_OUTPUT_DIR': 'output_dir',
    'RADIKO_RECORDER_LOG_DIR': 'log_dir',
    'RADIKO_RECORDER_LOG_LEVEL': 'log_level',
    'RADIKO_RECORDER_FFMPEG_PATH': 'ffmpeg_path',
}

STRING_FIELDS = ('area_id', 'output_dir', 'log_dir', 'log_level', 'ffmpeg_path')


@dataclass(frozen=True)
class RecorderConfig:
    """実行時設定"""
    area_id: str = DEFAULT_AREA_ID
    output_dir: str = "output"
    log_dir: str = "logs"
    log_level: str = "INFO"
    ffmpeg_path: str = "ffmpeg"
    request_timeout: float = 5.0   # 秒
    request_pause: float = 1.0     # 各リクエスト後の待機秒数
    
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RecorderConfig':
        known = {f.name: f for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"未知の設定項目を無視します: {key}")
                continue
            values[key] = value

        for key in STRING_FIELDS:
            if key in values and not isinstance(values[key], str):
                raise ConfigurationError(f"{key} は文字列で指定してください: {values[key]!r}",
                                         context={key: values[key]})

        for key in ('request_timeout', 'request_pause'):
            if key in values:
                try:
                    values[key] = float(values[key])
                except (TypeError, ValueError):
                    raise ConfigurationError(f"{key} は数値で指定してください: {values[key]!r}",
                                             context={key: values[key]})

        # タイムアウトは正の値のみ、待機秒数は0を許す
        if values.get('request_timeout', 1.0) <= 0:
            raise ConfigurationError(
                f"request_timeout は0より大きい値で指定してください: {values['request_timeout']}",
                context={'request_timeout': values['request_timeout']})
        if values.get('request_pause', 0.0) < 0:
            raise ConfigurationError(
                f"request_pause は0以上で指定してください: {values['request_pause']}",
                context={'request_pause': values['request_pause']})
        return cls(**values)
    
    def with_overrides(self, **overrides: Any) -> 'RecorderConfig':
        """None 以外の値で上書きした設定を返す"""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(config_path: Optional[Union[str, Path]] = None,
                environ: Optional[Dict[str, str]] = None) -> RecorderConfig:
    """設定を読み込む
    
    Args:
        config_path: JSON設定ファイルのパス（None時は設定ファイルを使わない）
        environ: 環境変数（テスト用、None時は os.environ）
        
    Returns:
        RecorderConfig: マージ済みの設定
    """
    data = RecorderConfig().to_dict()
    
    if config_path is not None:
        data = ConfigManager(config_path).load_config(data)
    
    environ = os.environ if environ is None else environ
    for env_name, key in ENVIRONMENT_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            data[key] = value
    
    return RecorderConfig.from_dict(data)
