"""
CSV文字列と行データの相互変換

クォート・エスケープには対応しない。フィールド内のカンマや改行は
そのまま区切りとして扱われる。
"""

from typing import List, Sequence

from .constants import CSVConstants


def parse_csv(text: str, line_separator: str = CSVConstants.LINE_SEPARATOR) -> List[List[str]]:
    """
    CSV文字列を行データに変換

    Args:
        text: CSV文字列
        line_separator: 行区切り文字列

    Returns:
        List[List[str]]: 行ごとのフィールドリスト
    """
    return [line.split(CSVConstants.FIELD_SEPARATOR) for line in text.split(line_separator)]


def serialize_csv(rows: Sequence[Sequence[str]], line_separator: str = CSVConstants.LINE_SEPARATOR) -> str:
    """行データをCSV文字列に変換（末尾に改行は付けない）"""
    return line_separator.join(CSVConstants.FIELD_SEPARATOR.join(row) for row in rows)
