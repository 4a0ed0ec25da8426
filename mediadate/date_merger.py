"""
パス由来の日時の統合

各階層から得られた部分日時を1つの日時にまとめ、時刻を含まない場合は
メタデータまたは更新日時から時刻を引き継ぎます。
"""

from datetime import datetime
from typing import Dict, Optional, Sequence

from .models import DEFAULT_DATE, SegmentMatch, get_field, is_representable, replace_fields


def merge(matches: Sequence[SegmentMatch],
          default: datetime = DEFAULT_DATE) -> Optional[datetime]:
    """
    部分日時を統合

    深い階層から順に処理し、各部分日時が含むフィールドで値を上書きします。
    どのフィールドも設定されなかった場合はNoneを返します。

    Args:
        matches: 対応付けの結果（浅い階層から順）
        default: 設定されなかったフィールドに使う日時

    Returns:
        統合された日時（得られない場合はNone）
    """
    fields: Dict[str, int] = {}
    for match in sorted(matches, key=lambda m: m.depth):
        if match.date is None:
            continue
        for name in match.date.fields:
            fields[name] = get_field(match.date.value, name)
    if not fields:
        return None
    try:
        merged = replace_fields(default, fields)
    except ValueError:
        # 階層ごとには有効でも組み合わせると存在しない日付
        return None
    return merged if is_representable(merged) else None


def has_zero_time(value: datetime) -> bool:
    return value.hour == 0 and value.minute == 0 and value.second == 0 and value.microsecond == 0


def inherit_time_of_day(path_date: Optional[datetime], metadata_date: Optional[datetime],
                        modify_date: datetime) -> Optional[datetime]:
    """時刻が 00:00:00.000 の場合、メタデータまたは更新日時の時刻を引き継ぐ"""
    if path_date is None or not has_zero_time(path_date):
        return path_date
    source = metadata_date if metadata_date is not None else modify_date
    return path_date.replace(
        hour=source.hour,
        minute=source.minute,
        second=source.second,
        microsecond=source.microsecond // 1000 * 1000,
    )


def guess_path_date(matches: Sequence[SegmentMatch], metadata_date: Optional[datetime],
                    modify_date: datetime, default: datetime = DEFAULT_DATE) -> Optional[datetime]:
    """パスから日時を推定（ローカル時刻に変換できない日時はNone）"""
    value = inherit_time_of_day(merge(matches, default), metadata_date, modify_date)
    if value is None or not is_representable(value):
        return None
    return value
