"""
コミッション計算モジュール

ボーナスは按分しない。閾値を超えた金額のうち、目標額の整数倍ごとに
ボーナス額を加算する（例: 体系1では£100,000超過分の£10,000ごとに£10）。
"""

import math
from typing import Iterable, Optional, Union

from .constants import CommissionConstants
from .data_models import (
    DEFAULT_BONUS_TIERS,
    BonusStructure,
    BonusTier,
    MonetaryAmount,
)
from .exceptions import MalformedAmountError

CaseValue = Union[str, MonetaryAmount]


def _magnitude(case_value: CaseValue, strict: bool) -> float:
    if isinstance(case_value, MonetaryAmount):
        amount = case_value
    else:
        amount = MonetaryAmount.parse(case_value, strict=strict)
    if strict and amount.is_nan:
        raise MalformedAmountError(f"金額を数値に変換できません: {case_value!s}")
    return amount.amount


def calculate_tier_bonus(case_value: CaseValue, threshold: float, target: float,
                         bonus_amount: float = CommissionConstants.BONUS_AMOUNT,
                         strict: bool = True):
    """
    1段階分のボーナスを計算

    Args:
        case_value: 案件金額（"£10000.00" 形式またはMonetaryAmount）
        threshold: ボーナス対象となる閾値
        target: ボーナス1回分の目標額
        bonus_amount: 目標額1回あたりのボーナス額
        strict: Falseの場合、数値でない金額のボーナスは0

    Returns:
        ボーナス額
    """
    magnitude = _magnitude(case_value, strict)

    # NaNは閾値を超えないためボーナス0
    if not magnitude > threshold:
        return 0

    return math.floor((magnitude - threshold) / target) * bonus_amount


def calculate_tiers_bonus(case_value: CaseValue, tiers: Iterable[BonusTier],
                          bonus_amount: float = CommissionConstants.BONUS_AMOUNT,
                          strict: bool = True):
    """複数段階のボーナスを合計（各段階とも元の金額に対して計算）"""
    return sum(
        calculate_tier_bonus(case_value, tier.threshold, tier.target, bonus_amount, strict=strict)
        for tier in tiers
    )


def calculate_bonus(case_value: CaseValue, structure: BonusStructure,
                    tiers: Optional[Iterable[BonusTier]] = None,
                    bonus_amount: float = CommissionConstants.BONUS_AMOUNT,
                    strict: bool = True):
    """
    ボーナス体系に応じたボーナスを計算

    体系2は体系1のボーナスに体系2の段階分を加算した額になる。
    """
    structure = BonusStructure.from_value(structure)
    if tiers is None:
        tiers = DEFAULT_BONUS_TIERS[structure]
    return calculate_tiers_bonus(case_value, tiers, bonus_amount, strict=strict)

