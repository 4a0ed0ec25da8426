"""
日時書式モジュール

`yyyyMMdd_HHmmss` のようなトークン形式の日時書式を扱います。
書式はコンパイル時にトークンへ分解され、どの日付フィールドを含むかが
静的に判明するため、解析結果に対して「設定されたフィールド」を
既定日時との比較なしで判断できます。
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from .exceptions import TemplateSyntaxError
from .models import PartialDate, get_field, is_representable, replace_fields


@dataclass(frozen=True)
class DateToken:
    """日時書式のトークン"""
    name: str
    field: str
    regex: str
    width: int  # 出力時のゼロ埋め桁数（0 = 埋めない）

    def render(self, value: datetime) -> str:
        v = get_field(value, self.field)
        if self.name == 'yy':
            v %= 100
        return str(v).zfill(self.width) if self.width else str(v)

    def to_value(self, text: str) -> int:
        v = int(text)
        if self.name == 'yy':
            v += 2000 if v < 60 else 1900
        return v


TOKENS: Dict[str, DateToken] = {t.name: t for t in (
    DateToken('yyyy', 'year', r'\d{4}', 4),
    DateToken('yy', 'year', r'\d{2}', 2),
    DateToken('MM', 'month', r'\d{2}', 2),
    DateToken('M', 'month', r'\d{1,2}', 0),
    DateToken('dd', 'day', r'\d{2}', 2),
    DateToken('d', 'day', r'\d{1,2}', 0),
    DateToken('HH', 'hour', r'\d{2}', 2),
    DateToken('H', 'hour', r'\d{1,2}', 0),
    DateToken('mm', 'minute', r'\d{2}', 2),
    DateToken('m', 'minute', r'\d{1,2}', 0),
    DateToken('ss', 'second', r'\d{2}', 2),
    DateToken('s', 'second', r'\d{1,2}', 0),
    DateToken('SSS', 'millisecond', r'\d{3}', 3),
    DateToken('S', 'millisecond', r'\d{1,3}', 0),
)}

TOKEN_LETTERS = frozenset(name[0] for name in TOKENS)

Part = Union[str, DateToken]


def _split_word(word: str) -> Optional[List[DateToken]]:
    """英字の並びを全てトークンに分解できればそのリストを返す"""
    tokens: List[DateToken] = []
    i = 0
    while i < len(word):
        j = i
        while j < len(word) and word[j] == word[i]:
            j += 1
        token = TOKENS.get(word[i:j])
        if token is None:
            return None
        tokens.append(token)
        i = j
    return tokens


def _is_word_char(c: str) -> bool:
    return c.isascii() and c.isalpha()


def tokenize(pattern: str, words: bool = False) -> List[Part]:
    """
    日時書式をトークンとリテラル文字列のリストに分解

    Args:
        pattern: 日時書式（例: "yyyyMMdd'_'HHmmss"）
        words: Trueの場合、英字の連続を1語として扱い、語全体がトークンに
            分解できる場合だけトークンとする（"IMG" はリテラル）

    Returns:
        DateToken とリテラル文字列が交互に並ぶリスト

    Raises:
        TemplateSyntaxError: 引用符が閉じられていない場合
    """
    parts: List[Part] = []
    literal: List[str] = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "'":
            end = i + 1
            quoted: List[str] = []
            while True:
                if end >= len(pattern):
                    raise TemplateSyntaxError(f"引用符が閉じられていません: {pattern}")
                if pattern[end] == "'":
                    if end + 1 < len(pattern) and pattern[end + 1] == "'":
                        quoted.append("'")
                        end += 2
                        continue
                    break
                quoted.append(pattern[end])
                end += 1
            # '' は引用符そのもの
            literal.append(''.join(quoted) if end > i + 1 else "'")
            i = end + 1
            continue

        if words and _is_word_char(c):
            j = i
            while j < len(pattern) and _is_word_char(pattern[j]):
                j += 1
            tokens = _split_word(pattern[i:j])
            if tokens is None:
                literal.append(pattern[i:j])
            else:
                if literal:
                    parts.append(''.join(literal))
                    literal = []
                parts.extend(tokens)
            i = j
            continue

        if c in TOKEN_LETTERS:
            j = i
            while j < len(pattern) and pattern[j] == c:
                j += 1
            run = pattern[i:j]
            if run in TOKENS:
                if literal:
                    parts.append(''.join(literal))
                    literal = []
                parts.append(TOKENS[run])
            else:
                literal.append(run)
            i = j
            continue

        literal.append(c)
        i += 1

    if literal:
        parts.append(''.join(literal))
    return parts


def build_partial_date(values: Iterable[Tuple[DateToken, str]],
                       default: datetime) -> Optional[PartialDate]:
    """
    トークンと対応する文字列から部分日時を構築

    同じフィールドが複数回現れて値が食い違う場合や、存在しない日時に
    なる場合はNoneを返します。
    """
    fields: Dict[str, int] = {}
    for token, text in values:
        v = token.to_value(text)
        if fields.get(token.field, v) != v:
            return None
        fields[token.field] = v
    if not fields:
        return None
    try:
        value = replace_fields(default, fields)
    except ValueError:
        return None
    if not is_representable(value):
        return None
    return PartialDate(value=value, fields=frozenset(fields))


class DateFormat:
    """コンパイル済みの日時書式"""

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.parts = tokenize(pattern)
        self.tokens: List[DateToken] = [p for p in self.parts if isinstance(p, DateToken)]
        self.fields: FrozenSet[str] = frozenset(t.field for t in self.tokens)
        self._regex = re.compile(self.regex_source())

    def __repr__(self) -> str:
        return f"DateFormat({self.pattern!r})"

    def regex_source(self) -> str:
        """各トークンを1つのグループとする正規表現を返す"""
        return ''.join(
            f'({p.regex})' if isinstance(p, DateToken) else re.escape(p)
            for p in self.parts
        )

    def parse(self, text: str, default: datetime) -> Optional[PartialDate]:
        """
        文字列全体を書式に従って解析

        Args:
            text: 解析する文字列
            default: 書式に含まれないフィールドの値に使う日時

        Returns:
            部分日時（一致しない、または日時として無効な場合はNone）
        """
        if not self.tokens:
            return None
        m = self._regex.fullmatch(text)
        if not m:
            return None
        return build_partial_date(zip(self.tokens, m.groups()), default)

    def format(self, value: datetime) -> str:
        """日時を書式に従って文字列化"""
        return ''.join(
            p.render(value) if isinstance(p, DateToken) else p
            for p in self.parts
        )


def to_iso(value: datetime) -> str:
    """ログ表示用のISO-8601文字列（ミリ秒とローカルのオフセット付き）"""
    return value.astimezone().isoformat(timespec='milliseconds')
