"""
エッジケースのユニットテスト

mediadateの各コンポーネントのエッジケースをテストします。
"""

import shutil
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from mediadate.aligner import align
from mediadate.date_format import DateFormat
from mediadate.date_merger import guess_path_date, merge
from mediadate.exceptions import TemplateSyntaxError, ValidationError
from mediadate.models import DEFAULT_DATE, TimeSource
from mediadate.path_validator import PathValidator
from mediadate.processor import normalize_extension
from mediadate.renderer import TargetRenderer
from mediadate.template import (
    ExplicitSourceSegment, LiteralTargetSegment, SourceSegment,
    compile_source_template, compile_target_template, split_brackets
)


class TestMalformedTemplates(unittest.TestCase):
    """構文が不正なテンプレート"""

    def test_unbalanced_source_bracket_has_no_pattern(self):
        """閉じられていない括弧のソースセグメントはパターンなしになる"""
        with self.assertLogs('mediadate.template', level='WARNING'):
            template = compile_source_template('yyyyMMdd/[.*')

        self.assertFalse(template[1].has_pattern)
        self.assertEqual(type(template[1]), SourceSegment)
        self.assertEqual(template[1].extract('IMG_001.jpg', DEFAULT_DATE), ((), None))

    def test_invalid_regex_has_no_pattern(self):
        with self.assertLogs('mediadate.template', level='WARNING'):
            template = compile_source_template('[(]')

        self.assertFalse(template[0].has_pattern)

    def test_explicit_form_with_missing_fields(self):
        with self.assertLogs('mediadate.template', level='WARNING'):
            template = compile_source_template('~(\\d+)~$1')

        self.assertFalse(template[0].has_pattern)

    def test_explicit_form_with_unknown_group(self):
        with self.assertRaises(TemplateSyntaxError):
            ExplicitSourceSegment('~(\\d+)~$2~yyyyMMdd')

    def test_unterminated_quote(self):
        with self.assertRaises(TemplateSyntaxError):
            DateFormat("yyyy'MM")

    def test_malformed_target_is_literal(self):
        """不正なターゲットセグメントはそのまま出力される"""
        with self.assertLogs('mediadate.template', level='WARNING'):
            template = compile_target_template('yyyy/[$1')

        self.assertIsInstance(template[1], LiteralTargetSegment)
        self.assertEqual(template[1].render(datetime(2012, 8, 4), 'a.jpg', ('a.jpg',)), '[$1')

    def test_stray_closing_bracket(self):
        with self.assertRaises(TemplateSyntaxError):
            split_brackets('yyyy]')

    def test_quoted_brackets_are_literal(self):
        self.assertEqual(split_brackets("'['yyyy"), [(False, "'['yyyy")])


class TestShallowPath(unittest.TestCase):
    """テンプレートより浅いパス"""

    def test_alignment_stops_at_path_root(self):
        template = compile_source_template('yyyy/MM/dd/[.*]')

        matches = align(['20', 'a.jpg'], template)

        self.assertEqual([m.depth for m in matches], [1, 0])
        self.assertEqual(matches[0].segment, '20')

    def test_target_deeper_than_path(self):
        """パスより深いターゲットテンプレートでもキャプチャ以外は描画される"""
        source = compile_source_template('[.*]')
        target = compile_target_template('yyyy/MM/[$1]')
        matches = align(['a.jpg'], source)
        renderer = TargetRenderer(target, Path('/out'))

        self.assertEqual(renderer.render_segments(['a.jpg'], matches, datetime(2012, 8, 4)),
                         ['2012', '08', 'a.jpg'])

    def test_empty_target_segment_without_path_segment_is_dropped(self):
        target = compile_target_template('/yyyy/[$1]')
        source = compile_source_template('[.*]')
        matches = align(['a.jpg'], source)
        renderer = TargetRenderer(target, Path('/out'))

        self.assertEqual(renderer.render(['a.jpg'], matches, datetime(2012, 8, 4)),
                         Path('/out/2012/a.jpg'))


class TestDateValues(unittest.TestCase):
    """日付値のエッジケース"""

    def test_year_equal_to_default_is_still_set(self):
        """既定日時と同じ年でも、書式に含まれていれば設定されたものとして扱う"""
        template = compile_source_template('yyyy/[.*]')
        matches = align(['2000', 'a.jpg'], template, datetime(2000, 1, 1))

        self.assertEqual(merge(matches, datetime(2000, 1, 1)), datetime(2000, 1, 1))

    def test_no_date_fields_means_no_path_date(self):
        template = compile_source_template('[.*]/[.*]')
        matches = align(['misc', 'a.jpg'], template)

        self.assertIsNone(guess_path_date(matches, None, datetime(2015, 3, 2, 13, 14, 15)))

    def test_two_digit_year(self):
        fmt = DateFormat('yyMMdd')

        self.assertEqual(fmt.parse('590101', DEFAULT_DATE).value.year, 2059)
        self.assertEqual(fmt.parse('600101', DEFAULT_DATE).value.year, 1960)

    def test_invalid_calendar_date(self):
        self.assertIsNone(DateFormat('yyyyMMdd').parse('20120230', DEFAULT_DATE))

    def test_invalid_combination_across_segments(self):
        """階層ごとには有効でも組み合わせると存在しない日付はNoneになる"""
        template = compile_source_template('MM/dd/[.*]')
        matches = align(['02', '30', 'a.jpg'], template)

        self.assertIsNone(merge(matches))

    def test_millisecond_truncation(self):
        matches = align(['20120804', 'a.jpg'], compile_source_template('yyyyMMdd/[.*]'))
        modify = datetime(2015, 3, 2, 13, 14, 15, 678901)

        self.assertEqual(guess_path_date(matches, None, modify),
                         datetime(2012, 8, 4, 13, 14, 15, 678000))

    def test_explicit_date_time_is_not_replaced(self):
        matches = align(['20120804_101112.jpg'],
                        compile_source_template("yyyyMMdd'_'HHmmss'.jpg'"))

        self.assertEqual(guess_path_date(matches, datetime(2011, 1, 1, 9, 9, 9), datetime.now()),
                         datetime(2012, 8, 4, 10, 11, 12))


class TestExplicitIdentity(unittest.TestCase):
    """明示形式の正規表現が一致しない場合"""

    def test_unmatched_regex_parses_segment_as_is(self):
        segment = ExplicitSourceSegment('~IMG_(\\d+)\\.jpg~$1~yyyyMMdd')

        captures, date = segment.extract('20120804', DEFAULT_DATE)

        self.assertEqual(captures, ())
        self.assertEqual(date.value, datetime(2012, 8, 4))

    def test_dollar_escape_and_whole_match(self):
        segment = ExplicitSourceSegment('~(\\d{4})(\\d{2})~$$$&~')

        self.assertEqual(segment.substitution.expand('201208', ('2012', '08')), '$201208')
        self.assertIsNone(segment.date_format)


class TestAliasesAndExtensions(unittest.TestCase):
    """別名と拡張子の正規化"""

    def test_source_aliases(self):
        self.assertIs(TimeSource.parse('EXIF'), TimeSource.METADATA)
        self.assertIs(TimeSource.parse('modify_time'), TimeSource.MODIFY_TIME)

    def test_normalize_extension(self):
        self.assertEqual(normalize_extension('JPG'), '.jpg')
        self.assertEqual(normalize_extension('.Mp4'), '.mp4')
        self.assertEqual(normalize_extension(' thm '), '.thm')
        self.assertEqual(normalize_extension(''), '')


class TestPathValidatorEdgeCases(unittest.TestCase):
    """PathValidatorのエッジケーステスト"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_output_root_below_file(self):
        """既存のファイルの下には出力先を作れない"""
        blocker = self.temp_dir / "file.txt"
        blocker.write_text("x")

        with self.assertRaises(ValidationError):
            PathValidator.validate_output_root(blocker / "out")

    def test_nonexistent_output_root_is_allowed(self):
        PathValidator.validate_output_root(self.temp_dir / "a" / "b")


if __name__ == '__main__':
    unittest.main()
