"""
データモデル定義

mediadateで使用するデータクラスを定義します。
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple


# 日付フィールド（粗い順）
DATE_FIELDS: Tuple[str, ...] = (
    'year', 'month', 'day', 'hour', 'minute', 'second', 'millisecond'
)

DEFAULT_DATE = datetime(2000, 1, 1)


def get_field(value: datetime, name: str) -> int:
    """datetimeから日付フィールドの値を取得"""
    if name == 'millisecond':
        return value.microsecond // 1000
    return getattr(value, name)


def replace_fields(value: datetime, fields: Dict[str, int]) -> datetime:
    """
    日付フィールドを置き換えたdatetimeを返す

    Raises:
        ValueError: 存在しない日時になる場合
    """
    kwargs = {k: v for k, v in fields.items() if k != 'millisecond'}
    if 'millisecond' in fields:
        kwargs['microsecond'] = fields['millisecond'] * 1000
    return value.replace(**kwargs)


def is_representable(value: datetime) -> bool:
    """ローカル時刻への変換とエポック秒への変換が可能かどうか"""
    try:
        value.astimezone()
        value.timestamp()
    except (ValueError, OverflowError, OSError):
        # 1年1月1日や、東側のタイムゾーンでの9999年12月31日など
        return False
    return True


class _AliasedEnum(Enum):
    """コマンドライン上の別名を受け付けるEnum"""

    @classmethod
    def parse(cls, name: str):
        key = name.strip().lower().replace('-', '').replace('_', '')
        for member in cls:
            if key == member.value.lower() or key in member.aliases():
                return member
        choices = ', '.join(m.value for m in cls)
        raise ValueError(f"不明な{cls.label()}: {name} (選択肢: {choices})")

    @classmethod
    def label(cls) -> str:
        return cls.__name__

    def aliases(self) -> Tuple[str, ...]:
        return ()


class TimeSource(_AliasedEnum):
    """日時の候補ソース"""
    METADATA = 'metadata'
    MODIFY_TIME = 'modifyTime'
    PATH = 'path'

    @classmethod
    def label(cls) -> str:
        return '時刻ソース'

    def aliases(self) -> Tuple[str, ...]:
        return {
            'metadata': ('exif', 'meta'),
            'modifyTime': ('mtime', 'modifytime'),
            'path': (),
        }[self.value]


class TimeTarget(_AliasedEnum):
    """出力ファイルに書き込む日時の種類"""
    METADATA = 'metadata'
    MODIFY_TIME = 'modifyTime'

    @classmethod
    def label(cls) -> str:
        return '書き込み対象'

    def aliases(self) -> Tuple[str, ...]:
        return {
            'metadata': ('exif', 'meta'),
            'modifyTime': ('mtime', 'modifytime'),
        }[self.value]


@dataclass(frozen=True)
class PartialDate:
    """部分的な日時（どのフィールドが設定されたかを保持）"""
    value: datetime
    fields: FrozenSet[str]  # 書式に含まれていたフィールド


@dataclass(frozen=True)
class SegmentMatch:
    """パスセグメントとテンプレートの対応付け結果"""
    depth: int  # 末尾からの位置（0 = ファイル名）
    segment: str
    captures: Tuple[str, ...] = ()
    date: Optional[PartialDate] = None


@dataclass(frozen=True)
class FileEntry:
    """走査で見つかったファイル"""
    path: Path
    ext: str
    sidecars: Dict[str, Path] = field(default_factory=dict)  # 小文字の拡張子 -> パス


@dataclass
class RunConfig:
    """実行設定"""
    paths: List[Path]
    output_root: Path
    sources: List[TimeSource] = field(default_factory=lambda: [
        TimeSource.METADATA, TimeSource.PATH, TimeSource.MODIFY_TIME
    ])
    targets: List[TimeTarget] = field(default_factory=lambda: [TimeTarget.MODIFY_TIME])
    source_template: str = 'yyyyMMdd/[.*]'
    target_template: str = 'yyyy/yyyyMMdd/[$1]'
    extensions: List[str] = field(default_factory=lambda: [
        '.jpg', '.png', '.mts', '.avi', '.mp4'
    ])
    sidecar_extensions: List[str] = field(default_factory=lambda: ['.thm'])
    default_date: datetime = DEFAULT_DATE
    exiftool: Optional[Path] = None
    dry_run: bool = False
    verbose: bool = False
    log_file: Optional[Path] = None


@dataclass
class ProcessingStats:
    """処理統計情報"""
    files_found: int = 0
    files_mapped: int = 0
    files_skipped: int = 0
    files_without_time: int = 0
    files_existing: int = 0
    sidecars_mapped: int = 0
