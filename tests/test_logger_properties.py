"""
ロギングシステムのプロパティベーステスト

ファイルごとの出力行の形式とエラーログの完全性を検証します。
"""

import tempfile
import logging
from pathlib import Path
from datetime import datetime
from hypothesis import given, strategies as st
from hypothesis import settings

from mediadate.logger import ProgressLogger, LogConfig, create_default_logger, get_default_log_file
from mediadate.exceptions import ProcessingError, ValidationError, FileOperationError, MetadataReadError
from mediadate.models import ProcessingStats


def file_logger(log_file: Path) -> ProgressLogger:
    """コンソール出力を抑制してファイルにだけ出力するロガー"""
    config = LogConfig(
        console_level=logging.CRITICAL,
        file_level=logging.DEBUG,
        log_file=log_file,
        verbose=True
    )
    return ProgressLogger(config)


class TestLoggerProperties:
    """ロギングシステムのプロパティテスト"""

    @given(
        file_paths=st.lists(
            st.text(min_size=1, max_size=100).filter(lambda x: x.strip() and '/' not in x and '\\' not in x and '\n' not in x and '\r' not in x),
            min_size=1,
            max_size=5
        ),
        error_messages=st.lists(
            st.text(min_size=1, max_size=100).filter(lambda x: x.strip() and '\n' not in x and '\r' not in x),
            min_size=1,
            max_size=5
        ),
        exception_types=st.lists(
            st.sampled_from([ProcessingError, ValidationError, FileOperationError, MetadataReadError]),
            min_size=1,
            max_size=5
        )
    )
    @settings(max_examples=50)
    def test_error_log_completeness_property(self, file_paths, error_messages, exception_types):
        """
        例外オブジェクトと共にエラーログを記録する場合、ファイルパス、
        エラーメッセージ、例外情報の全てが含まれるべきである。
        """
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "run.log"
            logger = file_logger(log_file)

            logged_errors = []
            for i, (file_path_str, error_msg, exc_type) in enumerate(zip(file_paths, error_messages, exception_types)):
                file_path = Path(f"test_file_{i}_{file_path_str}")
                exception = exc_type(f"Test exception: {error_msg}")
                logger.log_error(file_path, error_msg, exception)
                logged_errors.append((file_path, error_msg, exception))

            log_content = log_file.read_text(encoding='utf-8')

            for file_path, error_msg, exception in logged_errors:
                assert str(file_path) in log_content
                assert error_msg in log_content
                assert type(exception).__name__ in log_content

    @given(
        source=st.text(min_size=1, max_size=50).filter(lambda x: x.strip() and '\n' not in x and '\r' not in x),
        target=st.text(min_size=1, max_size=50).filter(lambda x: x.strip() and '\n' not in x and '\r' not in x),
        value=st.datetimes(min_value=datetime(1970, 1, 2), max_value=datetime(2099, 12, 31))
    )
    @settings(max_examples=50)
    def test_mapping_line_format_property(self, source, target, value):
        """
        対応の行は「コピー元 -> コピー先 (ISO日時)」の形式であるべきである。
        """
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "run.log"
            logger = file_logger(log_file)

            logger.log_mapping(source, target, value)

            log_content = log_file.read_text(encoding='utf-8')
            assert f"{source} -> {target} ({value:%Y-%m-%dT%H:%M:%S}" in log_content


class TestProgressLogger:
    """ProgressLoggerの個別ケース"""

    def test_per_file_lines(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "run.log"
            logger = file_logger(log_file)

            logger.log_skip(Path("/in/a.txt"))
            logger.log_no_time(Path("/in/b.jpg"))
            logger.log_exists(Path("/out/c.jpg"))

            log_content = log_file.read_text(encoding='utf-8')
            assert "Skip /in/a.txt" in log_content
            assert "No time for /in/b.jpg" in log_content
            assert "Exists /out/c.jpg" in log_content

    def test_summary(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "run.log"
            logger = file_logger(log_file)

            logger.log_processing_start([Path("/in")], Path("/out"))
            logger.log_processing_complete(ProcessingStats(files_found=3, files_mapped=2))

            log_content = log_file.read_text(encoding='utf-8')
            assert "処理完了サマリー" in log_content
            assert "ファイル発見数: 3" in log_content
            assert "出力対象: 2" in log_content

    def test_default_logger_levels(self):
        logger = create_default_logger(verbose=True)

        assert logger.config.console_level == logging.DEBUG
        assert logger.config.log_file is None

    def test_default_log_file_location(self):
        log_file = get_default_log_file()

        assert log_file.parent == Path.home() / '.mediadate' / 'logs'
        assert log_file.suffix == '.log'
