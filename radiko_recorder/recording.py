"""
録音モジュール

このモジュールは認証済みセッションを使ってタイムフリー録音を行います。
- プレイリストURLの組み立て（放送局ID・開始/終了時刻）
- 認証ヘッダー行の組み立て
- 外部キャプチャプロセス（ffmpeg）への受け渡しと終了ステータスの判定

ストリームの取得とファイルへの書き込みはキャプチャプロセスの責務です。
"""

import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Union

import ffmpeg

from .auth import RadikoAuthSession
from .error_handler import ProtocolError, SinkError
from .utils.base import LoggerMixin
from .utils.datetime_utils import format_radiko_datetime
from .utils.path_utils import ensure_directory_path_exists
from .validators import validate_duration_minutes, validate_station_id


PLAYLIST_URL = "https://radiko.jp/v2/api/ts/playlist.m3u8"
AUTH_TOKEN_HEADER_NAME = 'X-RADIKO-AUTHTOKEN'


def build_playlist_url(station_id: str, start_time: datetime, end_time: datetime) -> str:
    """タイムフリーのプレイリストURLを組み立てる"""
    return (f"{PLAYLIST_URL}?station_id={station_id}&l=15"
            f"&ft={format_radiko_datetime(start_time)}&to={format_radiko_datetime(end_time)}")


def build_auth_header_line(auth_token: str) -> str:
    """キャプチャプロセスに渡す認証ヘッダー行"""
    return f"{AUTH_TOKEN_HEADER_NAME}: {auth_token}"


def default_output_path(output_dir: Union[str, Path], station_id: str,
                        now: Optional[datetime] = None) -> Path:
    """出力ファイルパス {output_dir}/{station_id}_{YYYYMMDDHHMMSS}.aac を返す

    出力ディレクトリが存在しなければ作成する。
    """
    now = now or datetime.now()
    directory = ensure_directory_path_exists(output_dir)
    return directory / f"{station_id}_{format_radiko_datetime(now)}.aac"


@dataclass
class RecordingResult:
    """録音結果データクラス"""
    station_id: str
    stream_url: str
    output_path: str
    start_time: datetime
    end_time: datetime
    exit_status: int = 0

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() / 60)


class CaptureSink(ABC):
    """外部キャプチャプロセスの抽象"""

    @abstractmethod
    def launch(self, url: str, header: str, output_path: str) -> int:
        """キャプチャを実行して終了ステータスを返す

        Args:
            url: プレイリストURL
            header: 認証ヘッダー行
            output_path: 出力ファイルパス

        Returns:
            int: 終了ステータス（0 = 成功）

        Raises:
            OSError: プロセスを起動できない場合
        """


class FfmpegCaptureSink(CaptureSink, LoggerMixin):
    """ffmpeg によるキャプチャ

    ffmpeg -headers <header> -i <url> -acodec copy <output> -y を実行する。
    """

    def __init__(self, ffmpeg_path: str = 'ffmpeg', logger=None):
        LoggerMixin.__init__(self, logger)
        self.ffmpeg_path = ffmpeg_path

    def build_command(self, url: str, header: str, output_path: str) -> List[str]:
        stream = (
            ffmpeg
            .input(url, headers=header)
            .output(str(output_path), acodec='copy')
            .overwrite_output()
        )
        return stream.compile(cmd=self.ffmpeg_path)

    def launch(self, url: str, header: str, output_path: str) -> int:
        command = self.build_command(url, header, output_path)
        self.logger.debug(f"ffmpeg 実行: {self.ffmpeg_path} -i {url} -> {output_path}")
        completed = subprocess.run(command)
        return completed.returncode


class StreamSession(LoggerMixin):
    """タイムフリー録音セッション

    認証済みの RadikoAuthSession からヘッダーを読み取り専用で受け取り、
    録音ごとにプレイリストURLと認証ヘッダー行を組み立ててキャプチャに渡す。
    """

    def __init__(self, auth_session: RadikoAuthSession, sink: CaptureSink, logger=None):
        super().__init__(logger)
        # 未認証セッションはここで SessionStateError になる
        headers = dict(auth_session.get_authenticated_headers())
        headers['Connection'] = 'keep-alive'
        self.headers = headers
        self.sink = sink

    @property
    def auth_token(self) -> str:
        auth_token = self.headers.get('X-Radiko-AuthToken')
        if not auth_token:
            raise ProtocolError("認証ヘッダーに X-Radiko-AuthToken がありません")
        return auth_token

    def record(self, station_id: str, start_time: datetime,
               duration_minutes: int, output_path: Union[str, Path]) -> RecordingResult:
        """指定した放送局の時間帯を録音してファイルに保存する

        Args:
            station_id: 放送局ID
            start_time: 録音開始日時（ローカル時刻）
            duration_minutes: 録音時間（分）
            output_path: 出力先ファイルパス

        Returns:
            RecordingResult: 録音結果

        Raises:
            ValidationError: 放送局ID・録音時間が不正な場合（キャプチャ起動前）
            SinkError: キャプチャの起動失敗または非0の終了ステータス
        """
        validate_station_id(station_id)
        validate_duration_minutes(duration_minutes)

        end_time = start_time + timedelta(minutes=duration_minutes)
        stream_url = build_playlist_url(station_id, start_time, end_time)
        header_line = build_auth_header_line(self.auth_token)
        output_path = str(output_path)

        self.logger.info(f"Recording {output_path}...")
        try:
            exit_status = self.sink.launch(stream_url, header_line, output_path)
        except OSError as e:
            self.logger.error(f"キャプチャを起動できません: {e}")
            raise SinkError(f"キャプチャを起動できません: {e}",
                            context={'output_path': output_path})

        if exit_status != 0:
            self.logger.error(f"キャプチャが異常終了しました: exit_status={exit_status}")
            raise SinkError(f"キャプチャが異常終了しました (exit status: {exit_status})",
                            exit_status=exit_status,
                            context={'output_path': output_path, 'stream_url': stream_url})

        self.logger.info(f"Successfully recorded {output_path}")
        return RecordingResult(
            station_id=station_id,
            stream_url=stream_url,
            output_path=output_path,
            start_time=start_time,
            end_time=end_time,
            exit_status=exit_status
        )
