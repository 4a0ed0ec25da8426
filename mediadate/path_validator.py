"""
パス検証ユーティリティ

入力パスと出力先の検証を提供します。
"""

import os
from pathlib import Path

from .exceptions import ValidationError


class PathValidator:
    """パス検証を行うユーティリティクラス"""

    @staticmethod
    def validate_directory(path: Path) -> None:
        """
        ディレクトリの存在とアクセス権を検証

        Args:
            path: 検証するディレクトリパス

        Raises:
            ValidationError: ディレクトリが存在しない、アクセス不可能、
                           またはディレクトリではない場合
        """
        if not path.exists():
            raise ValidationError(f"ディレクトリが存在しません: {path}")

        if not path.is_dir():
            raise ValidationError(f"指定されたパスはディレクトリではありません: {path}")

        if not os.access(path, os.R_OK):
            raise ValidationError(f"ディレクトリに読み取り権限がありません: {path}")

    @staticmethod
    def validate_input(path: Path) -> None:
        """
        入力パス（ファイルまたはディレクトリ）を検証

        Raises:
            ValidationError: パスが存在しない、または読み取れない場合
        """
        if not path.exists():
            raise ValidationError(f"パスが存在しません: {path}")

        if path.is_dir():
            PathValidator.validate_directory(path)
        elif not os.access(path, os.R_OK):
            raise ValidationError(f"ファイルに読み取り権限がありません: {path}")

    @staticmethod
    def validate_output_root(path: Path) -> None:
        """
        出力先ルートを検証

        存在しない場合は実行時に作成されるため、最も近い既存の親ディレクトリが
        書き込み可能かを確認します。

        Raises:
            ValidationError: 出力先がファイルである、または書き込めない場合
        """
        if path.exists() and not path.is_dir():
            raise ValidationError(f"出力先がディレクトリではありません: {path}")

        existing = path
        while not existing.exists():
            existing = existing.parent
        if not existing.is_dir():
            raise ValidationError(f"出力先を作成できません: {existing} はディレクトリではありません")
        if not os.access(existing, os.W_OK):
            raise ValidationError(f"出力先に書き込み権限がありません: {existing}")

    @staticmethod
    def normalize_path(path_str: str) -> Path:
        """
        パス文字列を正規化してPathオブジェクトに変換

        Args:
            path_str: パス文字列

        Returns:
            正規化されたPathオブジェクト
        """
        return Path(path_str).expanduser().resolve()
