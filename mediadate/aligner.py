"""
パスセグメントの対応付け

パスとソーステンプレートを末尾（ファイル名側）から1階層ずつ対応付け、
各階層からキャプチャと部分日時を抽出します。
"""

from datetime import datetime
from typing import List, Sequence

from .models import DEFAULT_DATE, SegmentMatch
from .template import SourceSegment


def align(path_segments: Sequence[str], source_template: Sequence[SourceSegment],
          default: datetime = DEFAULT_DATE) -> List[SegmentMatch]:
    """
    パスセグメントとソーステンプレートを末尾から対応付ける

    パスがテンプレートより深い場合、先頭側の余ったセグメントは対象外です。
    パスが浅い場合、テンプレート先頭側の規則は適用されません。

    Args:
        path_segments: パスを区切り文字で分割したリスト
        source_template: コンパイル済みのソーステンプレート
        default: 書式に含まれないフィールドに使う日時

    Returns:
        対応付けの結果（浅い階層から順）
    """
    matches: List[SegmentMatch] = []
    for depth in range(min(len(path_segments), len(source_template))):
        segment = path_segments[-1 - depth]
        rule = source_template[-1 - depth]
        captures, date = rule.extract(segment, default)
        matches.append(SegmentMatch(depth=depth, segment=segment,
                                    captures=captures, date=date))
    matches.reverse()
    return matches
