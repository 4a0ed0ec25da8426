"""
ファイルコピー処理モジュール

出力先ディレクトリの作成、ファイルのコピー、タイムスタンプの更新を提供します。
ファイルシステムのエラーはFileOperationErrorとして呼び出し元に伝播させます。
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Set

from .exceptions import FileOperationError


class Copier:
    """ファイルをコピーするクラス"""

    def __init__(self):
        """Copierを初期化"""
        self.logger = logging.getLogger(__name__)
        self._created_dirs: Set[Path] = set()

    def ensure_directory(self, directory: Path) -> bool:
        """
        ディレクトリを作成（実行中は同じディレクトリを2度作成しない）

        Args:
            directory: 作成するディレクトリ

        Returns:
            今回作成処理を行った場合True

        Raises:
            FileOperationError: 作成に失敗した場合
        """
        if directory in self._created_dirs:
            return False
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"ディレクトリ作成エラー: {directory} - {str(e)}") from e
        self._created_dirs.add(directory)
        self.logger.debug(f"ディレクトリ作成: {directory}")
        return True

    def copy_file(self, source_path: Path, target_path: Path) -> None:
        """
        ファイルの内容をコピー

        Raises:
            FileOperationError: コピーに失敗した場合
        """
        try:
            shutil.copyfile(source_path, target_path)
        except OSError as e:
            raise FileOperationError(f"コピーエラー: {source_path} -> {target_path} - {str(e)}") from e
        self.logger.debug(f"コピー成功: {source_path.name} -> {target_path}")

    def set_times(self, path: Path, atime: float, mtime: float) -> None:
        """アクセス日時と更新日時を設定（エポック秒）"""
        try:
            os.utime(path, (atime, mtime))
        except OSError as e:
            raise FileOperationError(f"タイムスタンプ設定エラー: {path} - {str(e)}") from e
