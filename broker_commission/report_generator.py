"""
レポート生成モジュール

案件データから案件別コミッションレポートを、コミッションレポートから
ブローカー別合計レポートを生成する。入出力はいずれも行データ（ヘッダー付き）。
"""

import logging
from enum import Enum
from functools import partial
from typing import Callable, List, Optional, Sequence, Union

import pandas as pd

from .commission_calculator import calculate_tiers_bonus
from .constants import CSVConstants
from .currency_converter import convert_cases_to_reporting_currency
from .data_models import (
    BonusStructure,
    CaseRecord,
    CommissionRecord,
    CommissionSettings,
    MonetaryAmount,
    SummaryRecord,
)

logger = logging.getLogger(__name__)

Rows = List[List[str]]
ReportFunction = Callable[[Sequence[Sequence[str]]], Rows]


class ReportType(Enum):
    """レポート種別"""
    COMMISSION = "commission"
    SUMMARY = "summary"


def get_commission_data(rows: Sequence[Sequence[str]],
                        structure: Union[BonusStructure, int, str] = BonusStructure.NONE,
                        settings: Optional[CommissionSettings] = None) -> Rows:
    """
    案件別コミッションレポートを生成

    金額は報告通貨に換算してから計算する。ボーナス体系が指定されていない場合は
    BonusCommission列を出力しない。行の順序は入力と同じ。

    Args:
        rows: ヘッダー付きの案件行（BrokerName,CaseId,CaseValue）
        structure: ボーナス体系
        settings: コミッション計算設定

    Returns:
        Rows: ヘッダー付きのコミッション行
    """
    settings = settings or CommissionSettings()
    structure = BonusStructure.from_value(structure)
    tiers = settings.tiers_for(structure)

    cases = convert_cases_to_reporting_currency(
        rows,
        settings.currency_lookup,
        settings.reporting_currency,
        strict=settings.strict,
    )

    header = list(CSVConstants.COMMISSION_HEADER)
    if structure.has_bonus:
        header.append(CSVConstants.BONUS_COLUMN)

    base_commission = MonetaryAmount(settings.base_commission, settings.reporting_currency)
    report = [header]
    for line_no, row in enumerate(cases[1:], start=2):
        case = CaseRecord.from_row(row, line_no=line_no)

        bonus_commission = None
        if structure.has_bonus:
            bonus = calculate_tiers_bonus(
                case.amount(strict=settings.strict),
                tiers,
                settings.bonus_amount,
                strict=settings.strict,
            )
            bonus_commission = MonetaryAmount(bonus, settings.reporting_currency)

        record = CommissionRecord(
            broker_name=case.broker_name,
            case_id=case.case_id,
            base_commission=base_commission,
            bonus_commission=bonus_commission,
        )
        report.append(record.to_row())

    logger.debug(f"案件別コミッション生成: {len(report) - 1}件 ({structure.name})")
    return report


def get_commission_summary_data(rows: Sequence[Sequence[str]],
                                settings: Optional[CommissionSettings] = None) -> Rows:
    """
    ブローカー別のコミッション合計レポートを生成

    入力はボーナス列付き（4列）のコミッションレポート。出力順は
    ブローカー名の初出順。

    Args:
        rows: ヘッダー付きのコミッション行
        settings: コミッション計算設定

    Returns:
        Rows: ヘッダー付きの合計行（BrokerName,TotalCommission）
    """
    settings = settings or CommissionSettings()
    header = list(CSVConstants.SUMMARY_HEADER)

    records = [
        CommissionRecord.from_row(row, strict=settings.strict, line_no=line_no)
        for line_no, row in enumerate(rows[1:], start=2)
    ]
    if not records:
        return [header]

    df = pd.DataFrame({
        'BrokerName': [record.broker_name for record in records],
        'TotalCommission': [record.total for record in records],
    })

    # 数値でない値は合計もNaNとして伝播させる
    totals = df.groupby('BrokerName', sort=False)['TotalCommission'].agg(
        lambda values: values.sum(skipna=False)
    )

    nan_brokers = [name for name, total in totals.items() if pd.isna(total)]
    if nan_brokers:
        logger.warning(f"合計が数値でないブローカー: {nan_brokers}")

    summary = [header]
    for broker_name, total in totals.items():
        record = SummaryRecord(
            broker_name=broker_name,
            total_commission=MonetaryAmount(float(total), settings.reporting_currency),
        )
        summary.append(record.to_row())

    logger.debug(f"ブローカー別合計生成: {len(summary) - 1}件")
    return summary


def build_report_function(report_type: Union[ReportType, str],
                          structure: Union[BonusStructure, int, str] = BonusStructure.NONE,
                          settings: Optional[CommissionSettings] = None) -> ReportFunction:
    """レポート種別から行データ変換関数を作成"""
    report_type = ReportType(report_type)
    if report_type is ReportType.COMMISSION:
        return partial(get_commission_data, structure=BonusStructure.from_value(structure), settings=settings)
    return partial(get_commission_summary_data, settings=settings)
