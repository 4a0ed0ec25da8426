"""
日時ソースの選択
"""

from datetime import datetime
from typing import Mapping, Optional, Sequence, Tuple

from .models import TimeSource


def select_time(candidates: Mapping[TimeSource, Optional[datetime]],
                priority: Sequence[TimeSource]) -> Optional[Tuple[TimeSource, datetime]]:
    """
    優先順位に従って最初に得られた日時を選ぶ

    Args:
        candidates: ソースごとの候補（得られなかったものはNone）
        priority: ソースの優先順位

    Returns:
        (ソース, 日時) のタプル、どれも得られない場合はNone
    """
    for source in priority:
        value = candidates.get(source)
        if value is not None:
            return source, value
    return None
