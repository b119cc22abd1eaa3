"""
Radiko認証モジュール

このモジュールはRadikoサービスへの認証（auth1 → auth2 の二段階ハンドシェイク）を管理します。
- 認証トークンの取得
- 部分キー（パーシャルキー）の生成
- 認証済みヘッダーの提供
"""

import base64
import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional

import requests
from requests.structures import CaseInsensitiveDict

from .error_handler import (
    PartialKeyBoundsError, ProtocolError, SessionStateError, TransportError
)
from .utils.base import LoggerMixin
from .utils.network_utils import DEFAULT_TIMEOUT, create_radiko_session
from .validators import validate_area_id


# Radiko認証キー（固定値）
RADIKO_AUTH_KEY = b"bcd151073c03b352e1ef2fd66c32209da9ca0afa"

# auth1 レスポンスヘッダー名
AUTH_TOKEN_HEADER = 'X-Radiko-AUTHTOKEN'
KEY_OFFSET_HEADER = 'X-Radiko-KeyOffset'
KEY_LENGTH_HEADER = 'X-Radiko-KeyLength'


def derive_partial_key(offset: int, length: int, secret: bytes = RADIKO_AUTH_KEY) -> str:
    """部分キーを生成

    認証キーの secret[offset:offset + length] を Base64（パディングあり）でエンコードする。

    Args:
        offset: 切り出し開始位置
        length: 切り出し長
        secret: 認証キー

    Returns:
        str: Base64エンコードされた部分キー

    Raises:
        PartialKeyBoundsError: 範囲が負、または認証キーの長さを超える場合

    Example:
        derive_partial_key(0, 8)  # 'YmNkMTUxMDc='
    """
    if offset < 0 or length < 0 or offset + length > len(secret):
        raise PartialKeyBoundsError(offset, length, len(secret))
    return base64.b64encode(secret[offset:offset + length]).decode('ascii')


class AuthState(Enum):
    """ハンドシェイクの状態"""
    UNINITIALIZED = "uninitialized"
    STEP1_PENDING = "step1_pending"
    STEP1_DONE = "step1_done"
    STEP2_PENDING = "step2_pending"
    ESTABLISHED = "established"
    FAILED = "failed"


@dataclass(frozen=True)
class HandshakeHeaders:
    """ハンドシェイクで送信するヘッダー

    固定値のフィールドと、auth1 成功後に一度だけ埋まる
    auth_token / partial_key の2スロットを持つ。
    """
    area_id: str
    user_agent: str = 'python3.7'
    accept: str = '*/*'
    app: str = 'pc_html5'
    app_version: str = '0.0.1'
    user: str = 'dummy_user'
    device: str = 'pc'
    auth_token: Optional[str] = None
    partial_key: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        return self.auth_token is not None and self.partial_key is not None

    def with_credentials(self, auth_token: str, partial_key: str) -> 'HandshakeHeaders':
        """認証トークンと部分キーを埋めたヘッダーを返す"""
        if self.auth_token is not None or self.partial_key is not None:
            raise SessionStateError("認証トークンと部分キーは既に設定されています")
        return replace(self, auth_token=auth_token, partial_key=partial_key)

    def to_dict(self) -> Dict[str, str]:
        """HTTPヘッダー辞書に変換（未設定のスロットは空文字列）"""
        return {
            'User-Agent': self.user_agent,
            'Accept': self.accept,
            'X-Radiko-App': self.app,
            'X-Radiko-App-Version': self.app_version,
            'X-Radiko-User': self.user,
            'X-Radiko-Device': self.device,
            'X-Radiko-AuthToken': self.auth_token or '',
            'X-Radiko-Partialkey': self.partial_key or '',
            'X-Radiko-AreaId': self.area_id,
        }


class RadikoAuthSession(LoggerMixin):
    """Radiko認証セッション

    コンストラクタで auth1 → auth2 のハンドシェイクを同期的に実行する。
    いずれかの段階で失敗した場合は例外がそのまま呼び出し元に伝播し、
    途中状態のセッションは返らない。
    http_session を渡さない場合に作成したセッションはハンドシェイク後に閉じる。

    Usage:
        session = RadikoAuthSession("JP13")
        headers = session.get_authenticated_headers()
    """

    # Radiko API エンドポイント
    AUTH1_URL = "https://radiko.jp/v2/api/auth1"
    AUTH2_URL = "https://radiko.jp/v2/api/auth2"

    def __init__(self, area_id: str,
                 http_session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 pause_seconds: float = 1.0,
                 logger: Optional[logging.Logger] = None):
        super().__init__(logger)

        self._area_id = validate_area_id(area_id)
        self._owns_session = http_session is None
        self.session = http_session or create_radiko_session()
        self.timeout = timeout
        self.pause_seconds = pause_seconds

        self._headers = HandshakeHeaders(area_id=self._area_id)
        self._state = AuthState.UNINITIALIZED

        self._authenticate()

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def area_id(self) -> str:
        return self._area_id

    @property
    def is_established(self) -> bool:
        return self._state is AuthState.ESTABLISHED

    @property
    def auth_token(self) -> str:
        """認証トークン"""
        self._require_established()
        return self._headers.auth_token

    def get_authenticated_headers(self) -> Dict[str, str]:
        """認証済みヘッダーのコピーを取得

        Raises:
            SessionStateError: ハンドシェイクが完了していない場合
        """
        self._require_established()
        return self._headers.to_dict()

    def _require_established(self) -> None:
        if self._state is not AuthState.ESTABLISHED:
            raise SessionStateError(
                f"認証が完了していないセッションは使用できません: state={self._state.value}",
                context={'area_id': self._area_id, 'state': self._state.value}
            )

    def _authenticate(self) -> None:
        """auth1 → auth2 のハンドシェイクを実行"""
        try:
            self.logger.info(f"Radiko認証を開始: area_id={self._area_id}")

            # Step 1: 認証トークンと部分キー情報の取得
            self._state = AuthState.STEP1_PENDING
            auth1_response = self._call_auth_api(self.AUTH1_URL)
            auth_token, offset, length = self._parse_auth1_headers(auth1_response)
            partial_key = derive_partial_key(offset, length)
            self._headers = self._headers.with_credentials(auth_token, partial_key)
            self._state = AuthState.STEP1_DONE
            self.logger.debug(f"部分キー生成: offset={offset}, length={length}")

            # Step 2: 認証トークンと部分キーを送信して認証を完了
            self._state = AuthState.STEP2_PENDING
            auth2_response = self._call_auth_api(self.AUTH2_URL)
            self.logger.debug(f"auth2 レスポンス: {auth2_response.text}")
            self._state = AuthState.ESTABLISHED

            self.logger.info(f"Radiko認証完了: area_id={self._area_id}")
        except Exception:
            self._state = AuthState.FAILED
            raise
        finally:
            if self._owns_session:
                self.session.close()

    def _call_auth_api(self, api_url: str) -> requests.Response:
        """認証APIにGETリクエストを送信する

        リクエスト後は成否にかかわらず pause_seconds 秒待機する。

        Raises:
            TransportError: 通信失敗・タイムアウト・非2xxステータス
        """
        try:
            response = self.session.get(
                api_url,
                headers=self._headers.to_dict(),
                timeout=self.timeout
            )
        except requests.RequestException as e:
            self.logger.warning(f"{api_url} への通信に失敗しました: {e}")
            raise TransportError(f"{api_url} への通信に失敗しました: {e}", endpoint=api_url)
        finally:
            time.sleep(self.pause_seconds)

        if not 200 <= response.status_code < 300:
            body = response.text
            self.logger.warning(f"failed in {api_url}. status code: {response.status_code}")
            self.logger.warning(f"content: {body}")
            raise TransportError(
                f"{api_url} が失敗しました (status={response.status_code})",
                endpoint=api_url,
                status_code=response.status_code,
                body=body
            )

        self.logger.debug(f"auth in {api_url} is success.")
        return response

    def _parse_auth1_headers(self, response: requests.Response):
        """auth1 レスポンスヘッダーから (認証トークン, オフセット, 長さ) を取り出す

        Raises:
            ProtocolError: ヘッダーの欠落、または整数として解釈できない場合
        """
        headers = CaseInsensitiveDict(response.headers)

        auth_token = headers.get(AUTH_TOKEN_HEADER)
        if not auth_token:
            raise ProtocolError(f"{AUTH_TOKEN_HEADER} ヘッダーがありません",
                                context={'endpoint': self.AUTH1_URL})

        offset = self._parse_key_header(headers, KEY_OFFSET_HEADER)
        length = self._parse_key_header(headers, KEY_LENGTH_HEADER)
        return auth_token, offset, length

    def _parse_key_header(self, headers: CaseInsensitiveDict, name: str) -> int:
        raw = headers.get(name)
        if raw is None:
            raise ProtocolError(f"{name} ヘッダーがありません",
                                context={'endpoint': self.AUTH1_URL})
        value = raw.strip()
        # 符号なしのASCII10進数字のみ
        if not (value.isascii() and value.isdigit()):
            raise ProtocolError(f"{name} ヘッダーが非負整数ではありません: {raw!r}",
                                context={'endpoint': self.AUTH1_URL, name: raw})
        return int(value)
