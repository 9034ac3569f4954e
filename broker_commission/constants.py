"""
定数定義モジュール
コミッション計算・レポート出力で使用する固定値を定義
"""

from typing import Dict, List, Tuple


# コミッション計算関連定数
class CommissionConstants:
    """コミッション計算に関する定数"""
    BASE_COMMISSION = 125  # 全案件共通の基本コミッション
    BONUS_AMOUNT = 10  # ターゲット達成1回あたりのボーナス額

    # ボーナス体系1: 閾値と目標額
    THRESHOLD_AMOUNT_1 = 100000
    TARGET_AMOUNT_1 = 10000

    # ボーナス体系2: 閾値と目標額（体系1のボーナスに加算）
    THRESHOLD_AMOUNT_2 = 250000
    TARGET_AMOUNT_2 = 50000


# 通貨関連定数
class CurrencyConstants:
    """通貨換算に関する定数"""
    REPORTING_CURRENCY = "£"
    DEFAULT_DECIMAL_PLACES = 2

    # 外貨記号 -> 報告通貨への換算レート
    CURRENCY_LOOKUP: Dict[str, float] = {
        "$": 0.8,
    }


# CSV関連定数
class CSVConstants:
    """CSV入出力に関する定数"""
    LINE_SEPARATOR = "\r\n"
    FIELD_SEPARATOR = ","

    CASE_HEADER: List[str] = ["BrokerName", "CaseId", "CaseValue"]
    COMMISSION_HEADER: List[str] = ["BrokerName", "CaseId", "BaseCommission"]
    BONUS_COLUMN = "BonusCommission"
    SUMMARY_HEADER: List[str] = ["BrokerName", "TotalCommission"]

    CASE_COLUMN_COUNT = 3
    COMMISSION_COLUMN_COUNT = 4


# 一括出力関連定数
class OutputConstants:
    """一括レポート出力に関する定数"""
    # (レポート名, ボーナス体系値)
    COMMISSION_REPORTS: List[Tuple[str, int]] = [
        ("commission_none", 0),
        ("commission_structure1", 1),
        ("commission_structure2", 2),
    ]
    # (レポート名, 入力となるコミッションレポート名)
    SUMMARY_REPORTS: List[Tuple[str, str]] = [
        ("summary_structure1", "commission_structure1"),
        ("summary_structure2", "commission_structure2"),
    ]
    FILE_EXTENSION = ".csv"


class LogConstants:
    """ログ関連の定数"""
    # パッケージロガー（各モジュールのロガーはこの子になる）
    LOGGER_NAME = "broker_commission"


# 設定ファイルのデフォルト値
DEFAULT_CONFIG = {
    'base_commission': CommissionConstants.BASE_COMMISSION,
    'bonus_amount': CommissionConstants.BONUS_AMOUNT,
    'reporting_currency': CurrencyConstants.REPORTING_CURRENCY,
    'currency_lookup': dict(CurrencyConstants.CURRENCY_LOOKUP),
    'bonus_tiers': {
        "1": [[CommissionConstants.THRESHOLD_AMOUNT_1, CommissionConstants.TARGET_AMOUNT_1]],
        "2": [
            [CommissionConstants.THRESHOLD_AMOUNT_1, CommissionConstants.TARGET_AMOUNT_1],
            [CommissionConstants.THRESHOLD_AMOUNT_2, CommissionConstants.TARGET_AMOUNT_2],
        ],
    },
    'strict_validation': True,
    'line_separator': CSVConstants.LINE_SEPARATOR,
}
