"""
保険ブローカー コミッションレポート生成パッケージ
"""

from .csv_codec import parse_csv, serialize_csv
from .currency_converter import convert_amount, convert_cases_to_reporting_currency
from .commission_calculator import calculate_bonus, calculate_tier_bonus, calculate_tiers_bonus
from .report_generator import (
    ReportType,
    build_report_function,
    get_commission_data,
    get_commission_summary_data,
)
from .main_controller import MainController, generate_report, write_report_to_file
from .data_models import (
    BonusStructure,
    BonusTier,
    CaseRecord,
    CommissionRecord,
    CommissionSettings,
    MonetaryAmount,
    SummaryRecord,
)
from .exceptions import (
    CommissionReportError,
    MalformedAmountError,
    ReportStructureError,
    UnsupportedCurrencyError,
)

__all__ = [
    'parse_csv',
    'serialize_csv',
    'convert_amount',
    'convert_cases_to_reporting_currency',
    'calculate_bonus',
    'calculate_tier_bonus',
    'calculate_tiers_bonus',
    'ReportType',
    'build_report_function',
    'get_commission_data',
    'get_commission_summary_data',
    'MainController',
    'generate_report',
    'write_report_to_file',
    'BonusStructure',
    'BonusTier',
    'CaseRecord',
    'CommissionRecord',
    'CommissionSettings',
    'MonetaryAmount',
    'SummaryRecord',
    'CommissionReportError',
    'MalformedAmountError',
    'ReportStructureError',
    'UnsupportedCurrencyError',
]
