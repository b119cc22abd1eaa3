#!/usr/bin/env python3
"""
RadikoRecorder - Radikoタイムフリー録音ツール

使用例:
    # 放送局リストを表示
    python RadikoRecorder.py --station-list --area-id JP13
    
    # TBSラジオの 2024/01/01 00:00 から60分を録音
    python RadikoRecorder.py TBS 20240101000000 60
"""

import sys
from pathlib import Path

# プロジェクトルートディレクトリをPythonパスに追加
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from radiko_recorder.cli import main


if __name__ == "__main__":
    main()
