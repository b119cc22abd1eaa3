"""
ネットワーク処理ユーティリティ

HTTP セッション作成などのネットワーク関連処理の統一機能
"""

import requests


DEFAULT_TIMEOUT = 5.0


def create_radiko_session() -> requests.Session:
    """Radiko API用の標準セッションを作成
    
    requests.Session はセッション単位のタイムアウトを持たないため、
    タイムアウトは各リクエストで timeout=DEFAULT_TIMEOUT として渡すこと。
    
    Returns:
        requests.Session: 設定済みセッション
        
    Example:
        with create_radiko_session() as session:
            response = session.get("https://radiko.jp/v3/station/list/JP13.xml",
                                   timeout=DEFAULT_TIMEOUT)
    """
    session = requests.Session()
    
    # Radiko API標準ヘッダー
    session.headers.update({
        'User-Agent': 'python3.7',
        'Accept': '*/*',
    })
    return session
