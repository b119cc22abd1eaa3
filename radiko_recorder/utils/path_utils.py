"""
パス処理ユーティリティ

ディレクトリ作成などのパス関連処理の統一機能
"""

from pathlib import Path
from typing import Union


def ensure_directory_path_exists(dir_path: Union[str, Path]) -> Path:
    """ディレクトリパスを作成し、Pathオブジェクトを返す
    
    既存のディレクトリがある場合はエラーにならない。
    
    Example:
        output_dir = ensure_directory_path_exists("output")
    """
    path = Path(dir_path)
    path.mkdir(parents=True, exist_ok=True)
    return path
