"""
ログ設定モジュール

RadikoRecorder全体のログ設定を統一管理します。
- 通常使用時：日付ごとのログファイル（logs/YYYY-MM-DD.log）とコンソールに出力
- テスト時：ファイル出力なし、コンソールはERRORレベル以上のみ
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


LOG_FORMAT = '%(asctime)s %(levelname)-8s %(name)s %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class RadikoRecorderLogConfig:
    """RadikoRecorderのログ設定管理クラス"""
    
    # デフォルト設定
    DEFAULT_LOG_LEVEL = logging.INFO
    DEFAULT_LOG_DIR = "logs"
    DEFAULT_MAX_LOG_SIZE = 10 * 1024 * 1024  # 10MB
    
    def __init__(self):
        self._initialized = False
        self._is_test_mode = self._detect_test_mode()
        self._console_output = self._determine_console_output()
    
    def _detect_test_mode(self) -> bool:
        """テストモードかどうかを判定"""
        return any([
            'PYTEST_CURRENT_TEST' in os.environ,
            'pytest' in sys.modules,
            os.environ.get('RADIKO_RECORDER_TEST_MODE', '').lower() == 'true'
        ])
    
    def _determine_console_output(self) -> bool:
        """コンソール出力を行うかどうかを判定"""
        console_env = os.environ.get('RADIKO_RECORDER_CONSOLE_OUTPUT', '').lower()
        if console_env == 'true':
            return True
        elif console_env == 'false':
            return False
        return True
    
    @staticmethod
    def log_file_for(log_dir: Union[str, Path], today: Optional[datetime] = None) -> Path:
        """日付ごとのログファイルパスを返す"""
        today = today or datetime.now()
        return Path(log_dir) / f"{today.strftime('%Y-%m-%d')}.log"
    
    def setup_logging(self,
                      log_level: Optional[Union[str, int]] = None,
                      log_dir: Optional[Union[str, Path]] = None,
                      console_output: Optional[bool] = None,
                      max_log_size: Optional[int] = None) -> None:
        """
        ログ設定を初期化
        
        Args:
            log_level: ログレベル（DEBUG, INFO, WARNING, ERROR, CRITICAL）
            log_dir: ログファイルを置くディレクトリ
            console_output: コンソール出力の有無（None時は環境変数で判定）
            max_log_size: ログファイルの最大サイズ（バイト）
        """
        if self._initialized:
            return
        
        if log_level is None:
            log_level = os.environ.get('RADIKO_RECORDER_LOG_LEVEL', self.DEFAULT_LOG_LEVEL)
        
        if isinstance(log_level, str):
            log_level = getattr(logging, log_level.upper(), self.DEFAULT_LOG_LEVEL)
        
        if log_dir is None:
            log_dir = os.environ.get('RADIKO_RECORDER_LOG_DIR', self.DEFAULT_LOG_DIR)
        
        if console_output is None:
            console_output = self._console_output
        
        if max_log_size is None:
            max_log_size = self.DEFAULT_MAX_LOG_SIZE
        
        handlers = []
        
        # ファイルハンドラー（テスト時以外で有効）
        if log_dir and not self._is_test_mode:
            log_file = self.log_file_for(log_dir)
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = RotatingFileHandler(
                    log_file,
                    maxBytes=max_log_size,
                    backupCount=5,
                    encoding='utf-8'
                )
                file_handler.setLevel(log_level)
                handlers.append(file_handler)
            except OSError as e:
                print(f"Warning: Failed to create log file handler: {e}", file=sys.stderr)
        
        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            # テスト時はERRORレベル以上のみ
            if self._is_test_mode:
                console_handler.setLevel(logging.ERROR)
            else:
                console_handler.setLevel(log_level)
            handlers.append(console_handler)
        
        if not handlers:
            handlers.append(logging.NullHandler())
        
        logging.basicConfig(
            level=log_level,
            handlers=handlers,
            format=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            force=True
        )
        
        self._initialized = True
        logging.getLogger(__name__).debug(
            f"ログ設定完了 - レベル: {logging.getLevelName(log_level)}, "
            f"ディレクトリ: {log_dir}, コンソール出力: {console_output}"
        )
    
    def get_logger(self, name: str) -> logging.Logger:
        """
        ロガーを取得
        
        Args:
            name: ロガー名
            
        Returns:
            logging.Logger: ロガー
        """
        return logging.getLogger(name)
    
    def is_test_mode(self) -> bool:
        """テストモードかどうかを返す"""
        return self._is_test_mode
    
    def is_initialized(self) -> bool:
        return self._initialized
    
    def reset(self) -> None:
        """ログ設定をリセット（テスト用）"""
        self._initialized = False
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()


# グローバルインスタンス
_log_config = RadikoRecorderLogConfig()


def setup_logging(log_level: Optional[Union[str, int]] = None,
                  log_dir: Optional[Union[str, Path]] = None,
                  console_output: Optional[bool] = None,
                  max_log_size: Optional[int] = None) -> None:
    """RadikoRecorderのログ設定を初期化（CLI起動時に一度だけ呼ぶ）"""
    _log_config.setup_logging(log_level, log_dir, console_output, max_log_size)


def get_logger(name: str) -> logging.Logger:
    """ロガーを取得"""
    return _log_config.get_logger(name)


def is_test_mode() -> bool:
    """テストモードかどうかを返す"""
    return _log_config.is_test_mode()


def reset_logging() -> None:
    """ログ設定をリセット（テスト用）"""
    _log_config.reset()
