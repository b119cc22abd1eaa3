"""
RadikoRecorder テストパッケージ

テスト構造:
- test_auth.py: 認証ハンドシェイク・部分キー生成のテスト
- test_station_catalog.py: 放送局リスト取得のテスト
- test_recording.py: 録音セッション・キャプチャのテスト
- test_validators.py: 入力値検証のテスト
- test_region_mapper.py: 地域IDマッピングのテスト
- test_config.py: 設定読み込みのテスト
- test_error_handler.py: 例外クラスのテスト
- test_logging_config.py: ログ設定のテスト
- test_cli.py: CLIインターフェースのテスト
"""

import sys
from pathlib import Path

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
