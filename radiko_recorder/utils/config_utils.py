"""
設定ファイル管理ユーティリティ

JSON設定ファイルの読み込み機能を提供します。
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..error_handler import ConfigurationError
from ..logging_config import get_logger

logger = get_logger(__name__)


class ConfigManager:
    """JSON設定ファイル管理クラス
    
    Usage:
        config_manager = ConfigManager("config.json")
        config = config_manager.load_config(default_config)
    """
    
    def __init__(self, config_path: Union[str, Path], encoding: str = 'utf-8'):
        self.config_path = Path(config_path)
        self.encoding = encoding
    
    def load_config(self, default_config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """設定ファイルを読み込み、デフォルト設定とマージする
        
        Args:
            default_config: デフォルト設定辞書
            
        Returns:
            設定辞書（ファイルが存在しない場合はデフォルト設定のコピー）
            
        Raises:
            ConfigurationError: ファイルが読めない、JSONとして不正、またはオブジェクトでない場合
        """
        merged_config = dict(default_config or {})
        
        if not self.config_path.exists():
            logger.info(f"設定ファイルが存在しません。デフォルト設定を使用します: {self.config_path}")
            return merged_config
        
        try:
            with open(self.config_path, 'r', encoding=self.encoding) as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"設定ファイルJSON解析エラー: {self.config_path} - {e}")
            raise ConfigurationError(f"設定ファイルの解析に失敗しました: {self.config_path}: {e}",
                                     context={'config_path': str(self.config_path)})
        except OSError as e:
            logger.error(f"設定ファイル読み込みエラー: {self.config_path} - {e}")
            raise ConfigurationError(f"設定ファイルを読み込めません: {self.config_path}: {e}",
                                     context={'config_path': str(self.config_path)})
        
        if not isinstance(config, dict):
            raise ConfigurationError(f"設定ファイルの最上位はオブジェクトである必要があります: {self.config_path}",
                                     context={'config_path': str(self.config_path)})
        
        merged_config.update(config)
        logger.debug(f"設定ファイル読み込み成功: {self.config_path}")
        return merged_config
