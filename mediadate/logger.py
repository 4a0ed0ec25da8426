"""
ロギングシステム

mediadateのロギング機能を提供します。
標準出力とファイル出力の両方をサポートし、ファイルごとの処理結果と
処理全体のサマリーを出力します。
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass

from .date_format import to_iso
from .models import ProcessingStats


@dataclass
class LogConfig:
    """ログ設定"""
    console_level: int = logging.INFO
    file_level: int = logging.DEBUG
    log_file: Optional[Path] = None
    verbose: bool = False


class ProgressLogger:
    """処理結果の表示とロギングを管理するクラス"""

    def __init__(self, config: LogConfig):
        self.config = config
        self.logger = self._setup_logger()
        self._start_time: Optional[datetime] = None

    def _setup_logger(self) -> logging.Logger:
        """ロガーのセットアップ"""
        logger = logging.getLogger('mediadate')
        logger.setLevel(logging.DEBUG)

        # 既存のハンドラーをクリア
        logger.handlers.clear()

        console_formatter = logging.Formatter('%(message)s')
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.config.console_level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        if self.config.log_file:
            self.config.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.config.log_file, encoding='utf-8')
            file_handler.setLevel(self.config.file_level)
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)

        return logger

    def log_processing_start(self, inputs: List[Path], output_root: Path):
        """処理開始時のサマリー表示"""
        self._start_time = datetime.now()

        self.logger.info("=" * 60)
        self.logger.info("mediadate - 処理開始")
        self.logger.info("=" * 60)
        self.logger.info("入力:")
        for path in inputs:
            self.logger.info(f"  - {path}")
        self.logger.info(f"出力先: {output_root}")
        self.logger.info("")

    def log_mapping(self, source: str, target: str, value: datetime):
        """コピー元とコピー先の対応"""
        self.logger.info(f"{source} -> {target} ({to_iso(value)})")

    def log_skip(self, file_path: Path):
        """対象外の拡張子"""
        self.logger.info(f"Skip {file_path}")

    def log_no_time(self, file_path: Path):
        """日時が得られなかったファイル"""
        self.logger.info(f"No time for {file_path}")

    def log_exists(self, target_path: Path):
        """コピー先が既に存在するファイル"""
        self.logger.info(f"Exists {target_path}")

    def log_processing_complete(self, stats: ProcessingStats):
        """処理完了時のサマリー表示"""
        self.logger.info("")
        self.logger.info("=" * 60)
        self.logger.info("処理完了サマリー")
        self.logger.info("=" * 60)
        self.logger.info(f"  - ファイル発見数: {stats.files_found}")
        self.logger.info(f"  - 出力対象: {stats.files_mapped}")
        self.logger.info(f"  - サイドカー: {stats.sidecars_mapped}")
        self.logger.info(f"  - 対象外の拡張子: {stats.files_skipped}")
        self.logger.info(f"  - 日時不明: {stats.files_without_time}")
        self.logger.info(f"  - 既存: {stats.files_existing}")
        self.logger.info("=" * 60)

        if self._start_time:
            total_time = (datetime.now() - self._start_time).total_seconds()
            self.logger.debug(f"総処理時間: {total_time:.2f}秒")

    def log_error(self, file_path: Path, error_message: str, exception: Optional[Exception] = None):
        """エラーログの詳細記録"""
        error_msg = f"エラー - {file_path}: {error_message}"

        if exception:
            error_msg += f" ({type(exception).__name__}: {str(exception)})"

        self.logger.error(error_msg)

        # 詳細なスタックトレースはファイルログのみに記録
        if exception and self.config.log_file:
            self.logger.debug("スタックトレース:", exc_info=exception)

    def log_debug(self, message: str):
        """デバッグメッセージのログ"""
        self.logger.debug(message)


def create_default_logger(verbose: bool = False, log_file: Optional[Path] = None) -> ProgressLogger:
    """デフォルトのロガーを作成"""
    config = LogConfig(
        console_level=logging.DEBUG if verbose else logging.INFO,
        file_level=logging.DEBUG,
        log_file=log_file,
        verbose=verbose
    )
    return ProgressLogger(config)


def get_default_log_file() -> Path:
    """デフォルトのログファイルパスを取得"""
    log_dir = Path.home() / '.mediadate' / 'logs'
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return log_dir / f'mediadate_{timestamp}.log'
