"""
カスタム例外クラス定義

コミッションレポート生成で使用するカスタム例外を定義します。
"""

from common.error_handling.exceptions import DataValidationError


class CommissionReportError(Exception):
    """コミッションレポートシステムの基本例外クラス"""
    pass


class UnsupportedCurrencyError(CommissionReportError, DataValidationError):
    """換算テーブルに存在しない通貨記号の例外"""
    pass


class MalformedAmountError(CommissionReportError, DataValidationError):
    """金額が数値として解釈できない場合の例外"""
    pass


class ReportStructureError(CommissionReportError, DataValidationError):
    """CSVの列構成がレポート形式と一致しない場合の例外"""
    pass
