"""
ファイルスキャナー

ディレクトリを走査して処理対象のファイルとサイドカーファイルを検索する機能を提供します。
"""

from pathlib import Path
from typing import Dict, Iterator, List

from .models import FileEntry
from .path_validator import PathValidator


class FileScanner:
    """ディレクトリを走査してファイルを列挙するクラス"""

    def __init__(self):
        """FileScannerを初期化"""
        pass

    def scan(self, directory: Path) -> Iterator[FileEntry]:
        """
        ディレクトリを深さ優先で走査

        各ディレクトリではまずその階層のファイルを返し、
        その後サブディレクトリに再帰します。

        Args:
            directory: 走査するディレクトリ

        Yields:
            見つかったファイルの情報

        Raises:
            ValidationError: ディレクトリが無効な場合
        """
        PathValidator.validate_directory(directory)

        entries = sorted(directory.iterdir(), key=lambda p: p.name)
        files = [p for p in entries if p.is_file()]
        subdirs = [p for p in entries if p.is_dir()]

        groups = self.group_sidecars(files)
        for file_path in files:
            yield FileEntry(
                path=file_path,
                ext=file_path.suffix,
                sidecars=groups[self.get_basename(file_path)],
            )

        for subdir in subdirs:
            yield from self.scan(subdir)

    def entry_for(self, file_path: Path) -> FileEntry:
        """単一ファイルの情報を同じディレクトリのサイドカーと共に作成"""
        siblings = [p for p in file_path.parent.iterdir()
                    if p.is_file() and self.get_basename(p) == self.get_basename(file_path)]
        groups = self.group_sidecars(siblings)
        return FileEntry(
            path=file_path,
            ext=file_path.suffix,
            sidecars=groups.get(self.get_basename(file_path), {}),
        )

    def group_sidecars(self, files: List[Path]) -> Dict[str, Dict[str, Path]]:
        """
        ファイルをベース名ごとにまとめる

        Args:
            files: 同じディレクトリ内のファイル

        Returns:
            ベース名 -> (小文字の拡張子 -> パス) の辞書
        """
        groups: Dict[str, Dict[str, Path]] = {}
        for file_path in files:
            group = groups.setdefault(self.get_basename(file_path), {})
            group[file_path.suffix.lower()] = file_path
        return groups

    def get_basename(self, file_path: Path) -> str:
        """拡張子を除いたファイル名"""
        return file_path.stem
