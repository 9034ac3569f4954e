"""
通貨換算モジュール

案件金額を換算テーブルに従って報告通貨（デフォルト: £）に揃える。
"""

import logging
import math
from typing import List, Mapping, Optional, Sequence

from .constants import CurrencyConstants
from .data_models import CaseRecord, MonetaryAmount
from .exceptions import MalformedAmountError, UnsupportedCurrencyError

logger = logging.getLogger(__name__)


def convert_amount(case_value: str, currency_lookup: Mapping[str, float],
                   reporting_currency: str = CurrencyConstants.REPORTING_CURRENCY,
                   strict: bool = True) -> str:
    """
    金額文字列1件を報告通貨に換算

    Args:
        case_value: "$100.00" 形式の金額文字列
        currency_lookup: 通貨記号 -> 換算レート
        reporting_currency: 報告通貨の記号
        strict: Trueの場合、未対応通貨・不正な金額は例外

    Returns:
        str: 報告通貨の金額文字列（小数2桁）。報告通貨の場合はそのまま返す
    """
    if case_value.startswith(reporting_currency):
        return case_value

    amount = MonetaryAmount.parse(case_value, strict=False)
    rate = currency_lookup.get(amount.currency)
    if rate is None:
        if strict:
            raise UnsupportedCurrencyError(
                f"換算テーブルに存在しない通貨記号です: {amount.currency!r} ({case_value!r})"
            )
        logger.warning(f"未対応の通貨記号のため金額をNaNとして出力: {case_value!r}")
        rate = math.nan
    elif amount.is_nan:
        if strict:
            raise MalformedAmountError(f"金額を数値に変換できません: {case_value!r}")
        logger.warning(f"数値でない金額をNaNとして出力: {case_value!r}")

    converted = MonetaryAmount(amount=amount.amount * rate, currency=reporting_currency)
    return converted.format(CurrencyConstants.DEFAULT_DECIMAL_PLACES)


def convert_cases_to_reporting_currency(rows: Sequence[Sequence[str]],
                                        currency_lookup: Optional[Mapping[str, float]] = None,
                                        reporting_currency: str = CurrencyConstants.REPORTING_CURRENCY,
                                        strict: bool = True) -> List[List[str]]:
    """
    案件行の金額を報告通貨に換算（先頭行はヘッダーとしてそのまま出力）

    Args:
        rows: ヘッダー付きの案件行
        currency_lookup: 通貨記号 -> 換算レート（未指定時はデフォルトテーブル）
        reporting_currency: 報告通貨の記号
        strict: Trueの場合、未対応通貨・不正な金額は例外

    Returns:
        List[List[str]]: 換算後の新しい行リスト
    """
    if not rows:
        return []
    if currency_lookup is None:
        currency_lookup = CurrencyConstants.CURRENCY_LOOKUP

    converted = [list(rows[0])]
    for line_no, row in enumerate(rows[1:], start=2):
        case = CaseRecord.from_row(row, line_no=line_no)
        case_value = convert_amount(case.case_value, currency_lookup, reporting_currency, strict=strict)
        converted.append([case.broker_name, case.case_id, case_value])

    return converted
