"""
データモデル定義

コミッション計算で使用する値型・レコード・設定を定義します。
CSV上の金額は「通貨記号1文字 + 数値」の文字列で表現され、
内部ではMonetaryAmountとして扱います。
"""

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from common.error_handling.exceptions import ConfigurationError

from .constants import CommissionConstants, CurrencyConstants, CSVConstants
from .exceptions import MalformedAmountError, ReportStructureError


def format_number(value: float, places: Optional[int] = None) -> str:
    """数値を文字列化（places指定時は固定小数点、未指定時は最短表記）"""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if places is not None:
        # 2進値のまま丸め、ちょうど中間の値は0から遠い方へ（-0.0は0.0として扱う）
        with localcontext() as ctx:
            ctx.prec = 400
            quantized = Decimal(value + 0.0).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
        return f"{quantized:f}"
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class MonetaryAmount:
    """通貨記号付き金額の値型"""
    amount: float
    currency: str = CurrencyConstants.REPORTING_CURRENCY

    @classmethod
    def parse(cls, text: str, strict: bool = True) -> "MonetaryAmount":
        """
        "£10000.00" 形式の文字列を解析

        Args:
            text: 先頭1文字が通貨記号の金額文字列
            strict: Trueの場合、数値でない金額は例外

        Returns:
            MonetaryAmount: 解析結果（strict=Falseで数値でない場合はNaN）
        """
        symbol, magnitude = text[:1], text[1:]
        try:
            amount = float(magnitude)
        except ValueError:
            amount = math.nan
        if not math.isfinite(amount):
            if strict:
                raise MalformedAmountError(f"金額を数値に変換できません: {text!r}")
            amount = math.nan
        return cls(amount=amount, currency=symbol)

    @property
    def is_nan(self) -> bool:
        return math.isnan(self.amount)

    def format(self, places: Optional[int] = None) -> str:
        """CSV出力用の文字列に変換"""
        return f"{self.currency}{format_number(self.amount, places)}"

    def __str__(self) -> str:
        return self.format()


class BonusStructure(Enum):
    """ボーナス体系"""
    NONE = 0
    STRUCTURE_1 = 1
    STRUCTURE_2 = 2

    @classmethod
    def from_value(cls, value: Union[int, str, "BonusStructure"]) -> "BonusStructure":
        """整数・数字文字列・名称からボーナス体系を取得"""
        if isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text]
        except KeyError:
            raise ValueError(f"未知のボーナス体系です: {value!r}") from None

    @property
    def has_bonus(self) -> bool:
        return self is not BonusStructure.NONE


@dataclass(frozen=True)
class BonusTier:
    """ボーナス段階（閾値を超えた目標額ごとにボーナス加算）"""
    threshold: float
    target: float


DEFAULT_BONUS_TIERS: Dict[BonusStructure, Tuple[BonusTier, ...]] = {
    BonusStructure.NONE: (),
    BonusStructure.STRUCTURE_1: (
        BonusTier(CommissionConstants.THRESHOLD_AMOUNT_1, CommissionConstants.TARGET_AMOUNT_1),
    ),
    BonusStructure.STRUCTURE_2: (
        BonusTier(CommissionConstants.THRESHOLD_AMOUNT_1, CommissionConstants.TARGET_AMOUNT_1),
        BonusTier(CommissionConstants.THRESHOLD_AMOUNT_2, CommissionConstants.TARGET_AMOUNT_2),
    ),
}


def _require_columns(row: Sequence[str], count: int, line_no: Optional[int], kind: str) -> None:
    if len(row) < count:
        location = f"{line_no}行目" if line_no is not None else "行"
        raise ReportStructureError(
            f"{kind}の列数が不足しています: {location} 必要{count}列、実際{len(row)}列 {list(row)!r}"
        )


@dataclass(frozen=True)
class CaseRecord:
    """案件レコード"""
    broker_name: str
    case_id: str
    case_value: str

    @classmethod
    def from_row(cls, row: Sequence[str], line_no: Optional[int] = None) -> "CaseRecord":
        _require_columns(row, CSVConstants.CASE_COLUMN_COUNT, line_no, "案件データ")
        broker_name, case_id, case_value = row[:CSVConstants.CASE_COLUMN_COUNT]
        return cls(broker_name=broker_name, case_id=case_id, case_value=case_value)

    def amount(self, strict: bool = True) -> MonetaryAmount:
        return MonetaryAmount.parse(self.case_value, strict=strict)

    def to_row(self) -> List[str]:
        return [self.broker_name, self.case_id, self.case_value]


@dataclass(frozen=True)
class CommissionRecord:
    """案件別コミッションレコード"""
    broker_name: str
    case_id: str
    base_commission: MonetaryAmount
    bonus_commission: Optional[MonetaryAmount] = None

    @classmethod
    def from_row(cls, row: Sequence[str], strict: bool = True,
                 line_no: Optional[int] = None) -> "CommissionRecord":
        """ボーナス列付き（4列）のコミッション行から生成"""
        _require_columns(row, CSVConstants.COMMISSION_COLUMN_COUNT, line_no, "コミッションデータ")
        broker_name, case_id, base, bonus = row[:CSVConstants.COMMISSION_COLUMN_COUNT]
        return cls(
            broker_name=broker_name,
            case_id=case_id,
            base_commission=MonetaryAmount.parse(base, strict=strict),
            bonus_commission=MonetaryAmount.parse(bonus, strict=strict),
        )

    @property
    def total(self) -> float:
        bonus = self.bonus_commission.amount if self.bonus_commission else 0
        return self.base_commission.amount + bonus

    def to_row(self) -> List[str]:
        row = [self.broker_name, self.case_id, self.base_commission.format()]
        if self.bonus_commission is not None:
            row.append(self.bonus_commission.format())
        return row


@dataclass(frozen=True)
class SummaryRecord:
    """ブローカー別合計レコード"""
    broker_name: str
    total_commission: MonetaryAmount

    def to_row(self) -> List[str]:
        return [self.broker_name, self.total_commission.format()]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_bonus_tiers(raw: Mapping[str, Any]) -> Dict[BonusStructure, Tuple[BonusTier, ...]]:
    tiers = dict(DEFAULT_BONUS_TIERS)
    for key, entries in raw.items():
        try:
            structure = BonusStructure.from_value(key)
        except ValueError as e:
            raise ConfigurationError(f"bonus_tiersのキーが無効です: {key!r}") from e
        if structure is BonusStructure.NONE:
            continue

        if not isinstance(entries, list):
            raise ConfigurationError(f"bonus_tiersの値はリストである必要があります: {key}={entries!r}")

        parsed = []
        for entry in entries:
            if not isinstance(entry, list) or len(entry) != 2 or not all(_is_number(v) for v in entry):
                raise ConfigurationError(f"bonus_tiersの要素は[閾値, 目標額]である必要があります: {entry!r}")
            threshold, target = entry
            if threshold < 0 or target <= 0:
                raise ConfigurationError(f"bonus_tiersの値が無効です: 閾値={threshold}, 目標額={target}")
            parsed.append(BonusTier(float(threshold), float(target)))
        tiers[structure] = tuple(parsed)
    return tiers


@dataclass(frozen=True)
class CommissionSettings:
    """コミッション計算設定"""
    base_commission: float = CommissionConstants.BASE_COMMISSION
    bonus_amount: float = CommissionConstants.BONUS_AMOUNT
    reporting_currency: str = CurrencyConstants.REPORTING_CURRENCY
    currency_lookup: Dict[str, float] = field(
        default_factory=lambda: dict(CurrencyConstants.CURRENCY_LOOKUP)
    )
    bonus_tiers: Dict[BonusStructure, Tuple[BonusTier, ...]] = field(
        default_factory=lambda: dict(DEFAULT_BONUS_TIERS)
    )
    strict: bool = True
    line_separator: str = CSVConstants.LINE_SEPARATOR

    def tiers_for(self, structure: BonusStructure) -> Tuple[BonusTier, ...]:
        return self.bonus_tiers.get(structure, ())

    @classmethod
    def from_config(cls, config_manager) -> "CommissionSettings":
        """ConfigManagerの設定からコミッション設定を構築"""
        raw = config_manager.get_commission_settings()
        defaults = cls()

        base_commission = raw.get('base_commission', defaults.base_commission)
        bonus_amount = raw.get('bonus_amount', defaults.bonus_amount)
        for name, value in (('base_commission', base_commission), ('bonus_amount', bonus_amount)):
            if not _is_number(value) or value < 0:
                raise ConfigurationError(f"{name}は0以上の数値である必要があります: {value!r}")

        reporting_currency = raw.get('reporting_currency', defaults.reporting_currency)
        if not isinstance(reporting_currency, str) or len(reporting_currency) != 1:
            raise ConfigurationError(f"reporting_currencyは1文字の通貨記号である必要があります: {reporting_currency!r}")

        currency_lookup = raw.get('currency_lookup', defaults.currency_lookup)
        if not isinstance(currency_lookup, dict):
            raise ConfigurationError("currency_lookupはオブジェクトである必要があります")
        for symbol, rate in currency_lookup.items():
            if len(symbol) != 1:
                raise ConfigurationError(f"通貨記号は1文字である必要があります: {symbol!r}")
            if not _is_number(rate) or rate <= 0:
                raise ConfigurationError(f"換算レートは正の数値である必要があります: {symbol}={rate!r}")

        bonus_tiers = _parse_bonus_tiers(raw.get('bonus_tiers', {}))

        line_separator = raw.get('line_separator', defaults.line_separator)
        if not isinstance(line_separator, str) or not line_separator:
            raise ConfigurationError("line_separatorは空でない文字列である必要があります")

        return cls(
            base_commission=base_commission,
            bonus_amount=bonus_amount,
            reporting_currency=reporting_currency,
            currency_lookup={symbol: float(rate) for symbol, rate in currency_lookup.items()},
            bonus_tiers=bonus_tiers,
            strict=bool(raw.get('strict_validation', defaults.strict)),
            line_separator=line_separator,
        )
