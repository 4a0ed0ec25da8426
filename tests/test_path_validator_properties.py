"""
PathValidatorのプロパティベーステスト

入力パスと出力先の検証を確認します。
"""

import os
import tempfile
from pathlib import Path
from hypothesis import given, strategies as st
from hypothesis import settings
import pytest

from mediadate.path_validator import PathValidator
from mediadate.exceptions import ValidationError


# ファイルシステムで安全に使用できる文字のストラテジー
safe_filename_strategy = st.text(
    alphabet=st.characters(
        whitelist_categories=('Lu', 'Ll', 'Nd'),
        min_codepoint=32,
        max_codepoint=126
    ),
    min_size=1,
    max_size=50
).filter(lambda x: x.strip() and not any(c in x for c in '<>:"|?*\\/.'))


@settings(max_examples=50)
@given(safe_filename_strategy)
def test_directory_validation_consistency_property(dir_name):
    """
    任意の存在するディレクトリは検証に成功し、存在しないパスは
    ValidationErrorとなるべきである。
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        test_dir = Path(temp_dir) / dir_name
        test_dir.mkdir()

        PathValidator.validate_directory(test_dir)
        PathValidator.validate_input(test_dir)

        with pytest.raises(ValidationError):
            PathValidator.validate_input(Path(temp_dir) / f"{dir_name}_missing")


@settings(max_examples=50)
@given(st.lists(safe_filename_strategy, min_size=1, max_size=3))
def test_missing_output_root_is_accepted_property(parts):
    """
    まだ存在しない出力先は、既存の親ディレクトリが書き込み可能であれば
    検証に成功すべきである。
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        output_root = Path(temp_dir).joinpath(*parts)

        PathValidator.validate_output_root(output_root)

        assert not output_root.exists()


class TestPathValidator:
    """PathValidatorの個別ケース"""

    def test_file_is_not_directory(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            file_path = Path(temp_dir) / "a.jpg"
            file_path.write_bytes(b"data")

            PathValidator.validate_input(file_path)
            with pytest.raises(ValidationError):
                PathValidator.validate_directory(file_path)
            with pytest.raises(ValidationError):
                PathValidator.validate_output_root(file_path)

    def test_normalize_path_is_absolute(self):
        result = PathValidator.normalize_path("relative/dir")

        assert result.is_absolute()
        assert result == Path(os.getcwd()).resolve() / "relative" / "dir"

    def test_normalize_path_expands_home(self):
        assert PathValidator.normalize_path("~") == Path.home().resolve()
