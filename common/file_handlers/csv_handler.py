"""
統一CSVハンドラー
"""
from pathlib import Path
from typing import List, Optional, Dict, Any
from ..utils.encoding_detector import EncodingDetector
from ..error_handling.exceptions import FileProcessingError, EncodingDetectionError


AUTO_ENCODING = 'auto'


class CSVHandler:
    """CSVファイルの統一処理クラス（テキスト全体の読み書き）"""

    def __init__(self, logger=None, error_handler=None, encoding: str = 'utf-8'):
        self.logger = logger
        self.error_handler = error_handler
        self.encoding = encoding
        self.encoding_detector = EncodingDetector(logger)

    def read_text(self, file_path: Path, encoding: Optional[str] = None) -> str:
        """CSVファイルのテキスト全体を読み込み"""
        file_path = Path(file_path)
        encoding = encoding or self.encoding

        if encoding == AUTO_ENCODING:
            return self.read_text_with_encoding_detection(file_path)
        return self._read_text_with_encoding(file_path, encoding)

    def read_text_with_encoding_detection(self, file_path: Path) -> str:
        """エンコーディング自動検出でCSVファイルを読み込み"""
        try:
            # まずエンコーディングを検出
            encoding = self.encoding_detector.detect_encoding(file_path)
            return self._read_text_with_encoding(file_path, encoding)

        except (EncodingDetectionError, FileProcessingError):
            # 検出失敗時は複数エンコーディングを試行
            return self.try_multiple_encodings(file_path)

    def try_multiple_encodings(self, file_path: Path, encodings: Optional[List[str]] = None) -> str:
        """複数のエンコーディングを順次試行してCSVを読み込み"""
        if encodings is None:
            encodings = EncodingDetector.DEFAULT_ENCODINGS

        last_error = None

        for encoding in encodings:
            try:
                text = self._read_text_with_encoding(file_path, encoding)
                if self.logger:
                    self.logger.info(f"CSV読み込み成功: {file_path.name} ({encoding})")
                return text

            except FileProcessingError as e:
                last_error = e
                if self.logger:
                    self.logger.debug(f"CSV読み込み失敗: {file_path.name} ({encoding}) - {str(e)}")
                continue

        # すべて失敗
        error_msg = f"すべてのエンコーディングでCSV読み込みに失敗: {file_path.name}"
        if self.logger:
            self.logger.error(error_msg)
        raise FileProcessingError(f"{error_msg} - 最後のエラー: {str(last_error)}") from last_error

    def _read_text_with_encoding(self, file_path: Path, encoding: str) -> str:
        """指定されたエンコーディングでCSVを読み込み"""
        try:
            with open(file_path, 'r', encoding=encoding, newline='') as f:
                return f.read()
        except (OSError, UnicodeError, LookupError) as e:
            raise FileProcessingError(f"CSV読み込みエラー: {file_path.name} ({encoding}) - {str(e)}") from e

    def write_text(self, file_path: Path, text: str, encoding: Optional[str] = None) -> None:
        """CSVテキストをファイルに書き込み（上書き）"""
        file_path = Path(file_path)
        encoding = encoding or self.encoding
        if encoding == AUTO_ENCODING:
            encoding = 'utf-8'

        try:
            # 改行コードはテキスト側で決定済みのため変換しない
            with open(file_path, 'w', encoding=encoding, newline='') as f:
                f.write(text)
        except (OSError, UnicodeError, LookupError) as e:
            raise FileProcessingError(f"CSV書き込みエラー: {file_path} ({encoding}) - {str(e)}") from e

    def get_file_info(self, file_path: Path) -> Dict[str, Any]:
        """CSVファイルの基本情報を取得"""
        file_path = Path(file_path)
        try:
            encoding = self.encoding_detector.detect_encoding(file_path)
            return {
                'file_name': file_path.name,
                'encoding': encoding,
                'file_size': file_path.stat().st_size
            }
        except (EncodingDetectionError, OSError) as e:
            if self.logger:
                self.logger.error(f"CSVファイル情報取得エラー: {file_path.name} - {str(e)}")
            return {}
