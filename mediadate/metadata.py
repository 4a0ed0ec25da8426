"""
メタデータ読み書きモジュール

ExifTool (PyExifTool) を使ってメディアファイルの撮影日時を読み書きします。
ExifToolのプロセスは処理全体で1つだけ起動し、終了時に必ず停止します。
"""

import logging
import re
import shutil
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import exiftool
from exiftool.exceptions import ExifToolException

from .exceptions import MetadataReadError, MetadataWriteError
from .models import is_representable


_EXIF_DATETIME = re.compile(
    r'(\d{4})[:\-/.](\d{2})[:\-/.](\d{2})[ T](\d{2}):(\d{2})(?::(\d{2}))?'
    r'(?:\.(\d+))?(?:Z|[+\-]\d{2}:?\d{2})?'
)


class MetadataOracle:
    """ExifToolを使用した撮影日時の読み書きクラス"""

    # 撮影日時を表すタグの優先順位リスト（ExifTool形式）
    DATETIME_TAGS: List[str] = [
        'DateTimeOriginal',    # 撮影日時（最優先）
        'CreateDate',          # 作成日時
        'ModifyDate',          # 更新日時
        'DateTime',            # 一般的な日時
    ]

    # 書き込むタグ
    WRITE_TAGS: List[str] = ['DateTimeOriginal', 'CreateDate']

    def __init__(self, executable: Optional[Path] = None):
        """
        MetadataOracleを初期化

        Args:
            executable: ExifToolのパス（省略時は自動検索）
        """
        self.logger = logging.getLogger(__name__)
        self.executable = executable
        self._helper: Optional[exiftool.ExifToolHelper] = None

    def __enter__(self) -> 'MetadataOracle':
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        """
        ExifToolプロセスを起動

        Raises:
            MetadataReadError: ExifToolが見つからない、または起動できない場合
        """
        if self._helper is not None:
            return
        try:
            executable = self.executable or self._find_exiftool()
            helper = exiftool.ExifToolHelper(executable=str(executable), common_args=['-n'])
            helper.run()
        except (FileNotFoundError, ExifToolException, OSError) as e:
            error_msg = (
                "ExifTool が見つかりません。以下の方法でインストールしてください:\n"
                "Windows: https://exiftool.org/ からダウンロードしてPATHに追加\n"
                "macOS: brew install exiftool\n"
                "Linux: sudo apt-get install libimage-exiftool-perl (Ubuntu/Debian)"
            )
            self.logger.error(error_msg)
            raise MetadataReadError(error_msg) from e
        self._helper = helper
        self.logger.debug(f"ExifTool を起動しました: {executable}")

    def close(self) -> None:
        """ExifToolプロセスを停止"""
        if self._helper is None:
            return
        try:
            self._helper.terminate()
        finally:
            self._helper = None
            self.logger.debug("ExifTool を停止しました")

    def _find_exiftool(self) -> Path:
        """ExifToolの実行可能ファイルを検索"""
        exiftool_name = 'exiftool.exe' if sys.platform == 'win32' else 'exiftool'
        exiftool_path = shutil.which(exiftool_name)

        if exiftool_path:
            return Path(exiftool_path)

        # 一般的なインストール場所を検索
        if sys.platform == 'win32':
            common_paths = [
                Path('C:/Windows/exiftool.exe'),
                Path('C:/Program Files/exiftool/exiftool.exe'),
                Path('C:/Program Files (x86)/exiftool/exiftool.exe'),
            ]
        else:
            common_paths = [
                Path('/usr/local/bin/exiftool'),
                Path('/usr/bin/exiftool'),
                Path('/opt/homebrew/bin/exiftool'),  # Apple Silicon Mac
            ]

        for path in common_paths:
            if path.exists() and path.is_file():
                return path

        raise FileNotFoundError("ExifTool が見つかりません")

    def read_tags(self, file_path: Path) -> Dict[str, Any]:
        """
        ファイルから日時関連のタグを読み取る

        Raises:
            MetadataReadError: ExifToolが起動していない場合
        """
        if self._helper is None:
            raise MetadataReadError("ExifTool が起動していません")
        result = self._helper.get_tags([str(file_path)], tags=self.DATETIME_TAGS)
        return result[0] if result else {}

    def read_capture_datetime(self, file_path: Path) -> Optional[datetime]:
        """
        ファイルから撮影日時を読み取る

        Args:
            file_path: 読み取り対象のファイルパス

        Returns:
            撮影日時（取得できない場合はNone）
        """
        try:
            tags = self.read_tags(file_path)
        except ExifToolException as e:
            self.logger.debug(f"ExifTool実行中にエラー: {file_path} - {e}")
            return None

        for tag_name in self.DATETIME_TAGS:
            tag_value = self._find_tag(tags, tag_name)
            if tag_value is None:
                continue
            datetime_obj = self._parse_exif_datetime(str(tag_value))
            if datetime_obj:
                self.logger.debug(f"撮影日時タグ '{tag_name}' から取得: {file_path} -> {datetime_obj}")
                return datetime_obj

        self.logger.debug(f"撮影日時が見つかりません: {file_path}")
        return None

    def write_capture_datetime(self, file_path: Path, value: datetime) -> None:
        """
        ファイルに撮影日時を書き込む

        Raises:
            MetadataWriteError: 書き込みに失敗した場合
        """
        if self._helper is None:
            raise MetadataWriteError("ExifTool が起動していません")
        text = value.strftime('%Y:%m:%d %H:%M:%S')
        try:
            self._helper.set_tags(
                [str(file_path)],
                tags={tag: text for tag in self.WRITE_TAGS},
                params=['-overwrite_original'],
            )
        except ExifToolException as e:
            raise MetadataWriteError(f"メタデータ書き込みエラー: {file_path} - {e}") from e

    @staticmethod
    def _find_tag(tags: Dict[str, Any], name: str) -> Optional[Any]:
        """グループ名付き（例: EXIF:DateTimeOriginal）のキーも含めてタグを検索"""
        if name in tags:
            return tags[name]
        for key, value in tags.items():
            if key.rsplit(':', 1)[-1] == name:
                return value
        return None

    def _parse_exif_datetime(self, datetime_str: str) -> Optional[datetime]:
        """
        Exif日時文字列をdatetimeオブジェクトに変換

        Args:
            datetime_str: Exif日時文字列（例: "2023:12:25 14:30:45" や
                "2023-12-25T14:30:45.123+09:00"）

        Returns:
            datetimeオブジェクト（解析できない場合はNone）
        """
        m = _EXIF_DATETIME.fullmatch(datetime_str.strip())
        if not m:
            self.logger.debug(f"日時文字列の解析に失敗: '{datetime_str}'")
            return None

        year, month, day, hour, minute = (int(g) for g in m.groups()[:5])
        second = int(m.group(6) or 0)
        millisecond = int((m.group(7) or '0')[:3].ljust(3, '0'))
        try:
            # タイムゾーンは無視して撮影地の時刻として扱う
            value = datetime(year, month, day, hour, minute, second, millisecond * 1000)
        except ValueError:
            # "0000:00:00 00:00:00" など
            self.logger.debug(f"無効な日時: '{datetime_str}'")
            return None
        if not is_representable(value):
            self.logger.debug(f"ローカル時刻に変換できない日時: '{datetime_str}'")
            return None
        return value
