"""
放送局リスト取得モジュール

このモジュールはRadikoの放送局リスト（エリア単位）を取得・解析します。
放送局リストのAPIは認証不要です。
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import List, Optional, Union

import requests

from .error_handler import ProtocolError, TransportError
from .utils.base import LoggerMixin
from .utils.network_utils import DEFAULT_TIMEOUT, create_radiko_session
from .validators import validate_area_id


STATION_LIST_ROOT_TAG = 'stations'
STATION_FIELDS = ('id', 'name', 'ascii_name', 'ruby')


@dataclass(frozen=True)
class StationRecord:
    """放送局情報"""
    id: str
    name: str
    ascii_name: str
    ruby: str

    def describe(self) -> str:
        return (f"Station: id={self.id}, name={self.name}, "
                f"ascii_name={self.ascii_name}, ruby={self.ruby}")


def _get_element_text(parent: ET.Element, tag_name: str) -> str:
    elem = parent.find(tag_name)
    if elem is None:
        raise ProtocolError(f"station 要素に {tag_name} がありません",
                            context={'tag': tag_name})
    return (elem.text or '').strip()


def parse_station_list(content: Union[bytes, str]) -> List[StationRecord]:
    """放送局リストXMLを解析

    ルート要素 stations 直下の station 要素を文書順に StationRecord に変換する。

    Raises:
        ProtocolError: XMLとして不正、ルート要素が stations でない、
            station 要素が1件もない、または station 要素に必須フィールドがない場合
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ProtocolError(f"放送局リストの解析に失敗しました: {e}")

    if root.tag != STATION_LIST_ROOT_TAG:
        raise ProtocolError(f"放送局リストのルート要素が不正です: {root.tag}",
                            context={'tag': root.tag})

    station_elems = root.findall('station')
    if not station_elems:
        raise ProtocolError("放送局リストに station 要素がありません",
                            context={'tag': 'station'})

    return [
        StationRecord(*(_get_element_text(station_elem, name) for name in STATION_FIELDS))
        for station_elem in station_elems
    ]


class StationCatalogClient(LoggerMixin):
    """放送局リスト取得クラス

    http_session を渡さない場合は取得ごとにセッションを作成し、取得後に閉じる。
    """

    # Radiko API エンドポイント
    STATION_LIST_URL = "https://radiko.jp/v3/station/list/{area_id}.xml"

    def __init__(self, http_session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self.session = http_session
        self.timeout = timeout

    def list_stations(self, area_id: str) -> List[StationRecord]:
        """指定エリアの放送局リストを取得

        Args:
            area_id: 地域ID（JP1〜JP47）

        Returns:
            List[StationRecord]: 放送局情報（文書順）

        Raises:
            ValidationError: 地域IDが不正な場合（通信前）
            TransportError: 通信失敗・非2xxステータス
            ProtocolError: XMLが想定した形式でない場合
        """
        validate_area_id(area_id)

        if self.session is not None:
            return self._fetch_stations(self.session, area_id)
        with create_radiko_session() as session:
            return self._fetch_stations(session, area_id)

    def _fetch_stations(self, session: requests.Session, area_id: str) -> List[StationRecord]:
        url = self.STATION_LIST_URL.format(area_id=area_id)
        self.logger.info(f"放送局リストを取得中: area_id={area_id}")

        try:
            response = session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.error(f"放送局リスト取得エラー: {e}")
            raise TransportError(f"放送局リストの取得に失敗しました: {e}", endpoint=url)

        if not 200 <= response.status_code < 300:
            self.logger.error(f"放送局リスト取得エラー: status={response.status_code}")
            raise TransportError(
                f"放送局リストの取得に失敗しました (status={response.status_code})",
                endpoint=url,
                status_code=response.status_code,
                body=response.text
            )

        stations = parse_station_list(response.content)
        self.logger.info(f"放送局リスト取得完了: {len(stations)}局")
        return stations
