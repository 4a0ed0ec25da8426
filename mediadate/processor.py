"""
処理管理モジュール

入力ファイルごとに日時を推定し、出力パスを決めてコピーする一連の処理を管理します。
ファイルは走査順に1つずつ処理されます。
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from .aligner import align
from .copier import Copier
from .date_merger import guess_path_date
from .exceptions import FileOperationError, MetadataWriteError
from .file_scanner import FileScanner
from .logger import ProgressLogger
from .metadata import MetadataOracle
from .models import (
    FileEntry, ProcessingStats, RunConfig, TimeSource, TimeTarget
)
from .renderer import TargetRenderer
from .source_selector import select_time
from .template import compile_source_template, compile_target_template


def normalize_extension(ext: str) -> str:
    """拡張子を小文字・ドット付きに正規化"""
    ext = ext.strip().lower()
    if ext and not ext.startswith('.'):
        ext = '.' + ext
    return ext


class Processor:
    """ファイルごとの日時推定とコピーを担当するクラス"""

    def __init__(self, config: RunConfig, oracle: MetadataOracle,
                 progress_logger: ProgressLogger,
                 copier: Optional[Copier] = None,
                 file_scanner: Optional[FileScanner] = None):
        """
        Processorを初期化

        Args:
            config: 実行設定
            oracle: 起動済みのメタデータ読み書きオブジェクト
            progress_logger: ログ出力
            copier: ファイル操作（省略時は新規作成）
            file_scanner: ディレクトリ走査（省略時は新規作成）
        """
        self.config = config
        self.oracle = oracle
        self.progress_logger = progress_logger
        self.copier = copier or Copier()
        self.file_scanner = file_scanner or FileScanner()
        self.output_root = Path(os.path.abspath(config.output_root))
        self.extensions = {normalize_extension(e) for e in config.extensions if e.strip()}
        self.sidecar_extensions = [normalize_extension(e) for e in config.sidecar_extensions if e.strip()]
        self.source_template = compile_source_template(config.source_template)
        self.renderer = TargetRenderer(compile_target_template(config.target_template),
                                       self.output_root)
        self.stats = ProcessingStats()

    def run(self) -> ProcessingStats:
        """
        設定された全ての入力パスを処理

        Returns:
            処理統計情報
        """
        self.progress_logger.log_processing_start(self.config.paths, self.output_root)

        for input_path in self.config.paths:
            path = Path(os.path.abspath(input_path))
            if path.is_dir():
                for entry in self.file_scanner.scan(path):
                    self._process_or_abort(entry, path)
            else:
                self._process_or_abort(self.file_scanner.entry_for(path), path.parent)

        self.progress_logger.log_processing_complete(self.stats)
        return self.stats

    def _process_or_abort(self, entry: FileEntry, base_dir: Path) -> None:
        """ファイル操作エラーを記録してから処理全体を中断する"""
        try:
            self.process(entry, base_dir)
        except FileOperationError as e:
            self.progress_logger.log_error(entry.path, "処理を中断します", e)
            raise

    def is_allowed(self, ext: str) -> bool:
        """拡張子が処理対象かどうか（空の設定は全て許可）"""
        return not self.extensions or ext.lower() in self.extensions

    def metadata_source(self, entry: FileEntry) -> Path:
        """メタデータを読み取るファイル（サイドカーがあればそちら）"""
        for ext in self.sidecar_extensions:
            sidecar = entry.sidecars.get(ext)
            if sidecar is not None and sidecar != entry.path:
                return sidecar
        return entry.path

    def process(self, entry: FileEntry, base_dir: Path) -> None:
        """
        1ファイルを処理

        Args:
            entry: 処理対象のファイル
            base_dir: ログ表示で相対パスの基準とするディレクトリ

        Raises:
            FileOperationError: ファイルの読み取りやコピーに失敗した場合
        """
        self.stats.files_found += 1
        file_path = entry.path

        if not self.is_allowed(entry.ext):
            self.progress_logger.log_skip(file_path)
            self.stats.files_skipped += 1
            return

        try:
            stat = file_path.stat()
        except OSError as e:
            raise FileOperationError(f"ファイル情報の取得エラー: {file_path} - {str(e)}") from e
        metadata_file = self.metadata_source(entry)
        metadata_date = self.oracle.read_capture_datetime(metadata_file)
        modify_date = datetime.fromtimestamp(stat.st_mtime)

        path_segments = str(file_path).split(os.sep)
        matches = align(path_segments, self.source_template, self.config.default_date)
        path_date = guess_path_date(matches, metadata_date, modify_date, self.config.default_date)

        candidates: Dict[TimeSource, Optional[datetime]] = {
            TimeSource.METADATA: metadata_date,
            TimeSource.MODIFY_TIME: modify_date,
            TimeSource.PATH: path_date,
        }
        chosen = select_time(candidates, self.config.sources)
        if chosen is None:
            self.progress_logger.log_no_time(file_path)
            self.stats.files_without_time += 1
            return
        source, value = chosen
        self.progress_logger.log_debug(f"日時ソース: {source.value} ({file_path})")

        target_path = self.renderer.render(path_segments, matches, value)
        if not self.config.dry_run:
            self.copier.ensure_directory(target_path.parent)

        self.progress_logger.log_mapping(
            os.path.relpath(file_path, base_dir),
            os.path.relpath(target_path, self.output_root),
            value,
        )
        if target_path.exists():
            self.progress_logger.log_exists(target_path)
            self.stats.files_existing += 1
            return

        self.stats.files_mapped += 1
        if not self.config.dry_run:
            self.copier.copy_file(file_path, target_path)

        sidecar_target: Optional[Path] = None
        if metadata_file != file_path:
            sidecar_target = target_path.with_suffix(metadata_file.suffix)
            self.progress_logger.log_mapping(
                os.path.relpath(metadata_file, base_dir),
                os.path.relpath(sidecar_target, self.output_root),
                value,
            )
            self.stats.sidecars_mapped += 1
            if not self.config.dry_run:
                self.copier.copy_file(metadata_file, sidecar_target)

        if self.config.dry_run:
            return

        if TimeTarget.METADATA in self.config.targets:
            try:
                self.oracle.write_capture_datetime(sidecar_target or target_path, value)
            except MetadataWriteError as e:
                self.progress_logger.log_debug(f"メタデータ書き込みを無視します: {e}")

        # メタデータ書き込みの後で更新日時を設定する
        mtime = value.timestamp() if TimeTarget.MODIFY_TIME in self.config.targets else stat.st_mtime
        self.copier.set_times(target_path, stat.st_atime, mtime)
        if sidecar_target is not None:
            self.copier.set_times(sidecar_target, stat.st_atime, mtime)
