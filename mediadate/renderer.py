"""
出力パスの生成
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Sequence

from .models import SegmentMatch
from .template import TargetSegment


class TargetRenderer:
    """ターゲットテンプレートから出力パスを組み立てるクラス"""

    def __init__(self, target_template: Sequence[TargetSegment], output_root: Path):
        self.target_template = list(target_template)
        self.output_root = output_root

    def render_segments(self, path_segments: Sequence[str], matches: Sequence[SegmentMatch],
                        value: datetime) -> List[str]:
        """
        ターゲットテンプレートの各階層を描画

        テンプレートとパスは末尾から対応付けられ、キャプチャは同じ深さの
        ソースセグメントから取り出されます。空になった階層は除外されます。

        Args:
            path_segments: 元のパスを区切り文字で分割したリスト
            matches: ソース側の対応付け結果
            value: 採用された日時

        Returns:
            出力パスのセグメント（浅い階層から順）
        """
        by_depth: Dict[int, SegmentMatch] = {m.depth: m for m in matches}
        rendered: List[str] = []
        for depth, rule in enumerate(reversed(self.target_template)):
            segment = path_segments[-1 - depth] if depth < len(path_segments) else None
            match = by_depth.get(depth)
            captures = match.captures if match else ()
            text = rule.render(value, segment, captures)
            if text:
                rendered.append(text)
        rendered.reverse()
        return rendered

    def render(self, path_segments: Sequence[str], matches: Sequence[SegmentMatch],
               value: datetime) -> Path:
        """出力先の絶対パスを返す（ファイルシステムには触れない）"""
        return Path(os.path.join(self.output_root,
                                 *self.render_segments(path_segments, matches, value)))
