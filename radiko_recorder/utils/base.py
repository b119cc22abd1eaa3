"""
基底クラスとMixin

共通機能を提供する基底クラスとMixin
"""

import logging
from typing import Optional

from ..logging_config import get_logger


class LoggerMixin:
    """ロガー機能を提供するMixin
    
    Usage:
        class MyClass(LoggerMixin):
            def __init__(self, logger=None):
                super().__init__(logger)  # self.logger が利用可能
    
    ロガーを注入した場合はそれを診断出力先として使い、
    省略時はクラスのモジュール名のロガーを使う。
    """
    
    logger: logging.Logger
    
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or get_logger(self.__class__.__module__)
