"""
pytest configuration and fixtures for RadikoRecorder tests

ネットワーク・外部プロセスは使わず、HTTPセッションとキャプチャは偽装する。
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

os.environ.setdefault("RADIKO_RECORDER_TEST_MODE", "true")

from radiko_recorder.logging_config import reset_logging


@pytest.fixture(autouse=True)
def isolated_logging():
    """テストごとにログ設定をリセット"""
    yield
    reset_logging()

