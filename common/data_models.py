"""
標準化されたデータモデル
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from datetime import datetime


@dataclass
class ReportResult:
    """レポート生成結果の統一データモデル"""
    report_name: str
    input_file: str
    output_file: str
    success: bool
    row_count: int = 0
    errors: List[str] = field(default_factory=list)
    processing_time: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_error(self, error: str) -> None:
        """エラーを追加"""
        self.errors.append(error)
        self.success = False

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return {
            'report_name': self.report_name,
            'input_file': self.input_file,
            'output_file': self.output_file,
            'success': self.success,
            'row_count': self.row_count,
            'errors_count': len(self.errors),
            'processing_time': self.processing_time,
            'metadata': self.metadata
        }


@dataclass
class ProcessingSummary:
    """処理サマリーの統一データモデル"""
    total_reports: int = 0
    successful_reports: int = 0
    failed_reports: int = 0
    processing_start: Optional[datetime] = None
    processing_end: Optional[datetime] = None
    report_results: Dict[str, ReportResult] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """成功率を計算"""
        if self.total_reports == 0:
            return 0.0
        return (self.successful_reports / self.total_reports) * 100

    @property
    def processing_duration(self) -> Optional[float]:
        """処理時間を計算（秒）"""
        if self.processing_start and self.processing_end:
            return (self.processing_end - self.processing_start).total_seconds()
        return None

    def add_result(self, result: ReportResult) -> None:
        """処理結果を追加"""
        self.report_results[result.report_name] = result
        self.total_reports += 1

        if result.success:
            self.successful_reports += 1
        else:
            self.failed_reports += 1
            self.errors.extend(result.errors)

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式で出力"""
        return {
            'total_reports': self.total_reports,
            'successful_reports': self.successful_reports,
            'failed_reports': self.failed_reports,
            'success_rate': self.success_rate,
            'processing_duration': self.processing_duration,
            'processing_start': self.processing_start.isoformat() if self.processing_start else None,
            'processing_end': self.processing_end.isoformat() if self.processing_end else None,
            'total_errors': len(self.errors)
        }
