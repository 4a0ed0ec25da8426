"""
パステンプレートのコンパイル

`/` 区切りのテンプレート文字列を、パスの各階層に対応する規則に変換します。

ソーステンプレートの各セグメントは次のいずれかです:

- 空文字列: この階層からは何も抽出しない
- インライン形式: 日時書式と `[正規表現]` のキャプチャを並べたもの
  (例: `yyyyMMdd`, `[.*]`, `yyyyMMdd'_'[.*]`)
- 明示形式: `~正規表現~置換~日時書式`。正規表現がセグメント全体に
  一致した場合は置換後の文字列を日時書式で解析する

ターゲットテンプレートの各セグメントは日時書式と `[$1]` のような
プレースホルダーの組み合わせで、空文字列は元のセグメントをそのまま使います。

構文が不正なセグメントは例外を投げず「パターンなし」として扱います。
"""

import logging
import re
from datetime import datetime
from typing import List, Optional, Sequence, Tuple, Union

from .date_format import DateFormat, DateToken, build_partial_date, tokenize
from .exceptions import TemplateSyntaxError
from .models import PartialDate


logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r'\$(\d+|&|\$)')

Extraction = Tuple[Tuple[str, ...], Optional[PartialDate]]


def split_brackets(text: str) -> List[Tuple[bool, str]]:
    """
    セグメントを括弧の外側と内側に分割

    Returns:
        (括弧内かどうか, 文字列) のリスト

    Raises:
        TemplateSyntaxError: 括弧の対応が取れていない場合
    """
    parts: List[Tuple[bool, str]] = []
    buf: List[str] = []
    depth = 0
    in_quote = False
    i = 0
    while i < len(text):
        c = text[i]
        if depth == 0:
            if c == "'":
                in_quote = not in_quote
            elif c == '[' and not in_quote:
                if buf:
                    parts.append((False, ''.join(buf)))
                    buf = []
                depth = 1
                i += 1
                continue
            elif c == ']' and not in_quote:
                raise TemplateSyntaxError(f"対応する '[' がありません: {text}")
            buf.append(c)
        else:
            if c == '\\' and i + 1 < len(text):
                buf.append(text[i:i + 2])
                i += 2
                continue
            if c == '[':
                depth += 1
            elif c == ']':
                depth -= 1
                if depth == 0:
                    parts.append((True, ''.join(buf)))
                    buf = []
                    i += 1
                    continue
            buf.append(c)
        i += 1

    if depth:
        raise TemplateSyntaxError(f"']' が閉じられていません: {text}")
    if buf:
        parts.append((False, ''.join(buf)))
    return parts


class Substitution:
    """`$1` `$&` `$$` を含む置換文字列"""

    def __init__(self, text: str):
        self.text = text
        self.pieces: List[Union[str, int]] = []
        pos = 0
        for m in _PLACEHOLDER.finditer(text):
            if m.start() > pos:
                self.pieces.append(text[pos:m.start()])
            ref = m.group(1)
            if ref == '$':
                self.pieces.append('$')
            elif ref == '&':
                self.pieces.append(0)
            else:
                self.pieces.append(int(ref))
            pos = m.end()
        if pos < len(text):
            self.pieces.append(text[pos:])

    @property
    def max_group(self) -> int:
        return max((p for p in self.pieces if isinstance(p, int)), default=0)

    def expand(self, whole: str, captures: Sequence[str]) -> str:
        out = []
        for p in self.pieces:
            if isinstance(p, str):
                out.append(p)
            elif p == 0:
                out.append(whole)
            elif p <= len(captures):
                out.append(captures[p - 1] or '')
        return ''.join(out)


class SourceSegment:
    """パターンなしのソースセグメント"""

    def __init__(self, text: str = ''):
        self.text = text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.text!r})"

    @property
    def has_pattern(self) -> bool:
        return False

    def extract(self, segment: str, default: datetime) -> Extraction:
        """
        パスセグメントからキャプチャと部分日時を抽出

        Args:
            segment: パスセグメント
            default: 書式に含まれないフィールドに使う日時

        Returns:
            (キャプチャのタプル, 部分日時またはNone)
        """
        return (), None


class InlineSourceSegment(SourceSegment):
    """日時書式と `[正規表現]` キャプチャからなるセグメント"""

    def __init__(self, text: str):
        super().__init__(text)
        self.tokens: List[DateToken] = []
        self.capture_count = 0
        regex: List[str] = []
        for is_capture, chunk in split_brackets(text):
            if is_capture:
                regex.append(f'(?P<_c{self.capture_count}>{chunk})')
                self.capture_count += 1
                continue
            for part in tokenize(chunk, words=True):
                if isinstance(part, DateToken):
                    regex.append(f'(?P<_d{len(self.tokens)}>{part.regex})')
                    self.tokens.append(part)
                else:
                    regex.append(re.escape(part))
        try:
            self.regex = re.compile(''.join(regex))
        except re.error as e:
            raise TemplateSyntaxError(f"正規表現が不正です: {text} ({e})") from e

    @property
    def has_pattern(self) -> bool:
        return True

    def extract(self, segment: str, default: datetime) -> Extraction:
        m = self.regex.fullmatch(segment)
        if not m:
            return (), None
        captures = tuple(m.group(f'_c{i}') or '' for i in range(self.capture_count))
        date = None
        if self.tokens:
            date = build_partial_date(
                ((t, m.group(f'_d{i}')) for i, t in enumerate(self.tokens)),
                default,
            )
        return captures, date


class ExplicitSourceSegment(SourceSegment):
    """`~正規表現~置換~日時書式` 形式のセグメント"""

    def __init__(self, text: str):
        super().__init__(text)
        fields = text[1:].split('~')
        if len(fields) != 3:
            raise TemplateSyntaxError(f"'~正規表現~置換~書式' の形式ではありません: {text}")
        pattern, substitution, date_format = fields
        try:
            self.regex = re.compile(pattern)
        except re.error as e:
            raise TemplateSyntaxError(f"正規表現が不正です: {pattern} ({e})") from e
        self.substitution = Substitution(substitution)
        if self.substitution.max_group > self.regex.groups:
            raise TemplateSyntaxError(f"存在しないグループを参照しています: {substitution}")
        self.date_format = DateFormat(date_format) if date_format else None

    @property
    def has_pattern(self) -> bool:
        return True

    def extract(self, segment: str, default: datetime) -> Extraction:
        captures: Tuple[str, ...] = ()
        rewritten = segment
        m = self.regex.fullmatch(segment)
        if m:
            captures = tuple(g or '' for g in m.groups())
            rewritten = self.substitution.expand(m.group(0), captures)
        date = self.date_format.parse(rewritten, default) if self.date_format else None
        return captures, date


class TargetSegment:
    """ターゲットテンプレートの1階層"""

    def __init__(self, text: str):
        self.text = text
        self.parts: List[Union[DateFormat, Substitution]] = []
        for is_placeholder, chunk in split_brackets(text):
            if is_placeholder:
                self.parts.append(Substitution(chunk))
            else:
                self.parts.append(DateFormat(chunk))

    def __repr__(self) -> str:
        return f"TargetSegment({self.text!r})"

    def render(self, value: datetime, segment: Optional[str],
               captures: Sequence[str] = ()) -> str:
        """
        日時とキャプチャから出力セグメントを生成

        Args:
            value: 採用された日時
            segment: 対応する元のパスセグメント（パスが浅い場合はNone）
            captures: 対応する位置で抽出されたキャプチャ
        """
        if not self.text:
            return segment or ''
        out = []
        for part in self.parts:
            if isinstance(part, DateFormat):
                out.append(part.format(value))
            else:
                out.append(part.expand(segment or '', captures))
        return ''.join(out)


class LiteralTargetSegment(TargetSegment):
    """構文が不正なためそのまま出力されるセグメント"""

    def __init__(self, text: str):
        self.text = text
        self.parts = []

    def render(self, value: datetime, segment: Optional[str],
               captures: Sequence[str] = ()) -> str:
        return self.text


def compile_source_segment(text: str) -> SourceSegment:
    """ソーステンプレートの1セグメントをコンパイル"""
    if not text:
        return SourceSegment(text)
    try:
        if text.startswith('~'):
            return ExplicitSourceSegment(text)
        return InlineSourceSegment(text)
    except TemplateSyntaxError as e:
        logger.warning(f"警告: テンプレートを無視します: {e}")
        return SourceSegment(text)


def compile_target_segment(text: str) -> TargetSegment:
    """ターゲットテンプレートの1セグメントをコンパイル"""
    try:
        return TargetSegment(text)
    except TemplateSyntaxError as e:
        logger.warning(f"警告: テンプレートをそのまま出力します: {e}")
        return LiteralTargetSegment(text)


def compile_source_template(template: str) -> List[SourceSegment]:
    """ソーステンプレートをセグメント規則のリストにコンパイル"""
    return [compile_source_segment(s) for s in template.split('/')]


def compile_target_template(template: str) -> List[TargetSegment]:
    """ターゲットテンプレートをセグメント規則のリストにコンパイル"""
    return [compile_target_segment(s) for s in template.split('/')]
