#!/usr/bin/env python3
"""
mediadate - 基本的な使用例

このスクリプトは、mediadateの機能をプログラムから直接呼び出す例を示します。
"""

from datetime import datetime
from pathlib import Path

from mediadate import (
    MetadataOracle, Processor, ProcessingError, RunConfig, TimeSource, TimeTarget,
    create_default_logger
)
from mediadate.aligner import align
from mediadate.date_merger import guess_path_date
from mediadate.renderer import TargetRenderer
from mediadate.template import compile_source_template, compile_target_template


def example_preview_template():
    """テンプレートの動作をファイルに触れずに確認する例"""
    print("=" * 60)
    print("mediadate - テンプレートのプレビュー")
    print("=" * 60)

    source_template = compile_source_template("~(?:[A-Za-z]+[_-])?([0-9]+)[_-]([0-9]+)(\\..*)~$1$2~yyyyMMddHHmmss")
    target_template = compile_target_template("yyyy/yyyyMM/yyyyMMdd_HHmmss[$3]")
    renderer = TargetRenderer(target_template, Path("/sorted"))

    for name in ["IMG_20120804_101112.jpg", "VID_20130101_000001.mp4", "DSC0001.jpg"]:
        segments = ["photos", name]
        matches = align(segments, source_template)
        value = guess_path_date(matches, None, datetime.now())
        if value is None:
            print(f"{name}: 日時を推定できません")
            continue
        print(f"{name} -> {renderer.render(segments, matches, value)}")


def example_basic_workflow():
    """日付フォルダの写真を年/日付フォルダにコピーする例"""
    print("=" * 60)
    print("mediadate - 基本的な使用例")
    print("=" * 60)

    # 例用のディレクトリパス（実際の使用時は適切なパスに変更してください）
    photo_directory = Path("~/Photos/Camera").expanduser()
    output_directory = Path("~/Photos/Sorted").expanduser()

    if not photo_directory.exists():
        print(f"⚠️  ディレクトリが存在しません: {photo_directory}")
        print("実際のディレクトリパスに変更してください。")
        return

    config = RunConfig(
        paths=[photo_directory],
        output_root=output_directory,
        sources=[TimeSource.METADATA, TimeSource.PATH, TimeSource.MODIFY_TIME],
        targets=[TimeTarget.MODIFY_TIME],
        source_template="yyyyMMdd/[.*]",
        target_template="yyyy/yyyyMMdd/[$1]",
        dry_run=True,  # まずは対応だけを確認
    )

    try:
        progress_logger = create_default_logger(verbose=False)
        with MetadataOracle() as oracle:
            stats = Processor(config, oracle, progress_logger).run()
        print(f"✅ {stats.files_mapped} 件のファイルを確認しました（ドライラン）")
    except ProcessingError as e:
        print(f"❌ エラーが発生しました: {e}")


if __name__ == '__main__':
    example_preview_template()
    print()
    example_basic_workflow()
