"""
コマンドラインインターフェース

mediadateのメインエントリーポイントです。
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .exceptions import ProcessingError, ValidationError
from .logger import create_default_logger, get_default_log_file
from .metadata import MetadataOracle
from .models import DEFAULT_DATE, RunConfig, TimeSource, TimeTarget
from .path_validator import PathValidator
from .processor import Processor


def _time_source(value: str) -> TimeSource:
    try:
        return TimeSource.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _time_target(value: str) -> TimeTarget:
    try:
        return TimeTarget.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"日付の形式が不正です: {value}")


def create_parser() -> argparse.ArgumentParser:
    """
    コマンドライン引数パーサーを作成

    Returns:
        設定済みのArgumentParser
    """
    defaults = RunConfig(paths=[], output_root=Path('out'))
    parser = argparse.ArgumentParser(
        prog='mediadate',
        description='撮影日時を推定してメディアファイルを日付ごとのディレクトリにコピーするツール',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
テンプレート:
  パスは末尾（ファイル名）から1階層ずつテンプレートと対応付けられます。
  yyyy MM dd HH mm ss SSS などは日時、'...' はリテラル、[...] はキャプチャです。
  ソース側の [正規表現] で取り出した文字列はターゲット側で [$1] として使えます。
  ソース側は ~正規表現~置換~書式 の形式でも指定できます。

使用例:
  # 日付フォルダ内の写真を年/日付フォルダにコピー
  mediadate ~/Photos --out ~/Sorted --source path mtime \\
      --source-template 'yyyyMMdd/[.*]' --target-template 'yyyy/yyyyMMdd/[$1]'

  # 実際にはコピーせず対応だけを表示
  mediadate ~/Photos --out ~/Sorted --dry-run

  # ファイル名の日付を使って名前を付け直す
  mediadate ~/Photos --out ~/Sorted \\
      --source-template "~(?:[A-Za-z]+[_-])?([0-9]+)[_-]([0-9]+)(\\..*)~\\$1\\$2~yyyyMMddHHmmss" \\
      --target-template "yyyy/yyyyMM/yyyyMMdd_HHmmss[\\$3]"
        """
    )
    parser.add_argument(
        'paths',
        nargs='+',
        type=str,
        help='処理するファイルまたはディレクトリ'
    )
    parser.add_argument(
        '--source',
        nargs='+',
        type=_time_source,
        default=defaults.sources,
        metavar='SOURCE',
        help='日時の候補の優先順位 (metadata, path, modifyTime)'
    )
    parser.add_argument(
        '--target',
        nargs='*',
        type=_time_target,
        default=defaults.targets,
        metavar='TARGET',
        help='出力ファイルに書き込む日時 (metadata, modifyTime)'
    )
    parser.add_argument(
        '--source-template',
        type=str,
        default=defaults.source_template,
        help=f'入力パスから日時を抽出するテンプレート（デフォルト: {defaults.source_template}）'
    )
    parser.add_argument(
        '--target-template',
        type=str,
        default=defaults.target_template,
        help=f'出力パスのテンプレート（デフォルト: {defaults.target_template}）'
    )
    parser.add_argument(
        '--ext',
        nargs='*',
        type=str,
        default=defaults.extensions,
        help='処理対象の拡張子（空の場合は全て）'
    )
    parser.add_argument(
        '--sidecar-ext',
        nargs='*',
        type=str,
        default=defaults.sidecar_extensions,
        help='メタデータを読み取るサイドカーファイルの拡張子'
    )
    parser.add_argument(
        '--out', '-o',
        type=str,
        default=str(defaults.output_root),
        help='出力先ディレクトリ'
    )
    parser.add_argument(
        '--default-date',
        type=_date,
        default=DEFAULT_DATE,
        help='パスに含まれない日付フィールドに使う日付（デフォルト: 2000-01-01）'
    )
    parser.add_argument(
        '--exiftool',
        type=str,
        default=None,
        help='ExifToolのパス（省略時は自動検索）'
    )
    parser.add_argument(
        '--dry-run', '-n',
        action='store_true',
        help='ファイルを変更せず対応だけを表示'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='詳細ログを表示'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='ログファイルのパス（--verbose 時は省略すると自動作成）'
    )
    return parser


def build_config(args: argparse.Namespace) -> RunConfig:
    """
    引数から実行設定を作成

    Raises:
        ValidationError: 入力パスまたは出力先が無効な場合
    """
    paths = [PathValidator.normalize_path(p) for p in args.paths]
    for path in paths:
        PathValidator.validate_input(path)

    output_root = PathValidator.normalize_path(args.out)
    PathValidator.validate_output_root(output_root)

    log_file: Optional[Path] = None
    if args.log_file:
        log_file = PathValidator.normalize_path(args.log_file)
    elif args.verbose:
        log_file = get_default_log_file()

    return RunConfig(
        paths=paths,
        output_root=output_root,
        sources=list(args.source),
        targets=list(args.target),
        source_template=args.source_template,
        target_template=args.target_template,
        extensions=list(args.ext),
        sidecar_extensions=list(args.sidecar_ext),
        default_date=args.default_date,
        exiftool=Path(args.exiftool) if args.exiftool else None,
        dry_run=args.dry_run,
        verbose=args.verbose,
        log_file=log_file,
    )


def run(config: RunConfig) -> int:
    """
    設定に従って処理を実行

    Returns:
        終了コード（0: 成功）
    """
    progress_logger = create_default_logger(verbose=config.verbose, log_file=config.log_file)
    with MetadataOracle(config.exiftool) as oracle:
        Processor(config, oracle, progress_logger).run()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        終了コード（0: 成功、1: エラー）
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        return run(build_config(args))
    except ValidationError as e:
        print(f"❌ 入力エラー: {e}", file=sys.stderr)
        return 1
    except ProcessingError as e:
        print(f"❌ 処理エラー: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"❌ 予期しないエラー: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
