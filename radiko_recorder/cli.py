"""
CLIインターフェースモジュール

このモジュールはRadikoRecorderのコマンドライン操作を提供します。
- 放送局リスト表示（--station-list）
- タイムフリー録音（放送局ID・開始時刻・録音時間を指定）
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import Callable, List, Optional

from . import __version__
from .auth import RadikoAuthSession
from .config import RecorderConfig, load_config
from .error_handler import RadikoRecorderError, format_error
from .logging_config import setup_logging
from .recording import CaptureSink, FfmpegCaptureSink, StreamSession, default_output_path
from .region_mapper import RegionMapper
from .station_catalog import StationCatalogClient
from .utils.base import LoggerMixin
from .utils.datetime_utils import parse_radiko_datetime
from .validators import validate_area_id, validate_duration_minutes, validate_station_id


AuthSessionFactory = Callable[[str, RecorderConfig], RadikoAuthSession]


def default_auth_session_factory(area_id: str, config: RecorderConfig) -> RadikoAuthSession:
    return RadikoAuthSession(
        area_id,
        timeout=config.request_timeout,
        pause_seconds=config.request_pause
    )


class RadikoRecorderCLI(LoggerMixin):
    """RadikoRecorder CLIメインクラス"""

    VERSION = __version__

    def __init__(self,
                 catalog_client: Optional[StationCatalogClient] = None,
                 auth_session_factory: Optional[AuthSessionFactory] = None,
                 capture_sink: Optional[CaptureSink] = None,
                 environ: Optional[dict] = None):
        super().__init__()

        # コンポーネント初期化（依存性注入対応）
        self.catalog_client = catalog_client
        self.auth_session_factory = auth_session_factory or default_auth_session_factory
        self.capture_sink = capture_sink
        self.environ = environ
        self.config = RecorderConfig()

    def create_parser(self) -> argparse.ArgumentParser:
        """コマンドライン引数パーサーを作成"""
        parser = argparse.ArgumentParser(
            prog='radiko-recorder',
            description='Radikoのタイムフリー番組を録音するツール',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
使用例:
  radiko-recorder --station-list --area-id JP13   # 放送局リスト表示
  radiko-recorder TBS 20240101000000 60           # 録音（開始時刻から60分）
            """
        )

        parser.add_argument('--version', action='version', version=f'RadikoRecorder {self.VERSION}')
        parser.add_argument('--config', help='設定ファイルパス（JSON）', default=None)
        parser.add_argument('-a', '--area-id', '--area_id', dest='area_id', default=None,
                            help='エリアID（例: JP13）または都道府県名')
        parser.add_argument('-s', '--station-list', action='store_true',
                            help='放送局リストを表示する')
        parser.add_argument('-o', '--output-dir', default=None, help='録音ファイルの出力先ディレクトリ')
        parser.add_argument('-v', '--verbose', action='store_true', help='詳細ログを表示')

        parser.add_argument('station_id', nargs='?', help='放送局ID（録音時は必須）')
        parser.add_argument('start_time', nargs='?',
                            help='録音開始時刻 YYYYMMDDHHMMSS（録音時は必須）')
        parser.add_argument('duration_minutes', nargs='?', type=int, default=60,
                            help='録音時間（分、デフォルト: 60）')
        return parser

    def run(self, args: Optional[List[str]] = None) -> int:
        """CLIメインエントリーポイント

        Returns:
            int: 終了コード（0 = 成功）
        """
        parser = self.create_parser()
        parsed_args = parser.parse_args(args)

        try:
            self.config = load_config(parsed_args.config, environ=self.environ).with_overrides(
                area_id=parsed_args.area_id,
                output_dir=parsed_args.output_dir
            )
        except RadikoRecorderError as e:
            print(f"エラー: {e.message}", file=sys.stderr)
            return 1

        setup_logging(
            log_level=logging.DEBUG if parsed_args.verbose else self.config.log_level,
            log_dir=self.config.log_dir
        )

        try:
            area_id = RegionMapper.resolve_area_id(self.config.area_id)

            if parsed_args.station_list:
                return self._cmd_station_list(area_id)

            if parsed_args.station_id is None or parsed_args.start_time is None:
                print("放送局IDと録音開始時刻は必須です（--station-list 指定時を除く）", file=sys.stderr)
                parser.print_usage(sys.stderr)
                return 1

            return self._cmd_record(area_id, parsed_args.station_id,
                                    parsed_args.start_time, parsed_args.duration_minutes)

        except RadikoRecorderError as e:
            self.logger.error(format_error(e))
            print(f"エラー: {e.message}", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            print("\n操作がキャンセルされました", file=sys.stderr)
            return 1

    def _cmd_station_list(self, area_id: str) -> int:
        """放送局リスト表示コマンド"""
        validate_area_id(area_id)
        client = self.catalog_client or StationCatalogClient(timeout=self.config.request_timeout)

        stations = client.list_stations(area_id)
        prefecture = RegionMapper.get_prefecture_name(area_id)
        print(f"エリア: {area_id} ({prefecture}) - {len(stations)}局")
        for station in stations:
            print(station.describe())
        return 0

    def _cmd_record(self, area_id: str, station_id: str, start_time_text: str,
                    duration_minutes: int) -> int:
        """録音コマンド"""
        # 通信前にすべての入力を検証する
        validate_area_id(area_id)
        validate_station_id(station_id)
        validate_duration_minutes(duration_minutes)
        start_time = parse_radiko_datetime(start_time_text)

        output_path = default_output_path(self.config.output_dir, station_id, datetime.now())
        sink = self.capture_sink or FfmpegCaptureSink(self.config.ffmpeg_path)

        auth_session = self.auth_session_factory(area_id, self.config)
        stream_session = StreamSession(auth_session, sink)
        result = stream_session.record(station_id, start_time, duration_minutes, output_path)

        print(f"録音完了: {result.output_path} ({result.duration_minutes}分)")
        return 0


def main():
    """メインエントリーポイント"""
    cli = RadikoRecorderCLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
