"""
カスタム例外クラス定義

mediadateで使用する例外クラスを定義します。
"""


class ProcessingError(Exception):
    """処理エラーの基底クラス"""
    pass


class ValidationError(ProcessingError):
    """検証エラー"""
    pass


class FileOperationError(ProcessingError):
    """ファイル操作エラー"""
    pass


class MetadataReadError(ProcessingError):
    """メタデータ読取エラー"""
    pass


class MetadataWriteError(ProcessingError):
    """メタデータ書込エラー"""
    pass


class TemplateSyntaxError(ProcessingError):
    """テンプレート構文エラー"""
    pass
