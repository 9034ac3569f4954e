"""
メインコントローラーモジュール

CSV読み込み → レポート生成 → CSV書き込みの処理フローを統合管理します。
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from common import (
    CSVHandler,
    ConfigManager,
    ErrorHandler,
    ProcessingSummary,
    ReportResult,
    UnifiedLogger,
)
from common.error_handling.exceptions import DataValidationError, FileProcessingError

from .constants import CSVConstants, DEFAULT_CONFIG, LogConstants, OutputConstants
from .csv_codec import parse_csv, serialize_csv
from .data_models import BonusStructure, CommissionSettings
from .report_generator import ReportFunction, ReportType, build_report_function


def generate_report(input_text: str, report_fn: ReportFunction,
                    line_separator: str = CSVConstants.LINE_SEPARATOR) -> str:
    """CSV文字列を解析し、レポート関数を適用してCSV文字列に戻す"""
    rows = parse_csv(input_text, line_separator)
    return serialize_csv(report_fn(rows), line_separator)


def write_report_to_file(input_path: Union[str, Path], output_path: Union[str, Path],
                         report_fn: ReportFunction,
                         file_handler: Optional[CSVHandler] = None,
                         line_separator: str = CSVConstants.LINE_SEPARATOR) -> str:
    """
    入力CSVファイルからレポートを生成して出力ファイルに書き込み（上書き）

    Args:
        input_path: 入力CSVファイルのパス
        output_path: 出力CSVファイルのパス
        report_fn: 行データ変換関数
        file_handler: ファイル読み書きに使用するハンドラー
        line_separator: 行区切り文字列

    Returns:
        str: 書き込んだCSV文字列

    Raises:
        FileProcessingError: 読み込み・書き込みに失敗した場合
    """
    file_handler = file_handler or CSVHandler()

    input_text = file_handler.read_text(Path(input_path)).strip()
    output_text = generate_report(input_text, report_fn, line_separator)
    file_handler.write_text(Path(output_path), output_text)

    return output_text


class MainController:
    """メインコントローラークラス"""

    def __init__(self, config_path: Optional[Path] = None, log_level: Optional[str] = None,
                 strict: Optional[bool] = None):
        """メインコントローラーを初期化"""
        # 設定を読み込み（ログ設定を決めるため先に読む）
        self.config = ConfigManager(config_path, defaults=DEFAULT_CONFIG)
        if strict is not None:
            self.config.update_config({'strict_validation': strict})

        logging_settings = self.config.get_logging_settings()
        log_file = logging_settings['log_file']
        self.logger = UnifiedLogger(
            LogConstants.LOGGER_NAME,
            level=log_level or logging_settings['log_level'],
            log_file=Path(log_file) if log_file else None,
        )
        self.config.logger = self.logger.logger
        self.config.validate_configuration()

        self.error_handler = ErrorHandler(self.logger.logger)
        self.csv_handler = CSVHandler(
            self.logger.logger,
            self.error_handler,
            encoding=self.config.get('encoding', 'utf-8'),
        )
        self.settings = CommissionSettings.from_config(self.config)

        self.logger.log_configuration_info(self.config.get_commission_settings())
        self.last_summary: Optional[ProcessingSummary] = None

    def create_commission_report(self, input_path: Path, output_path: Path,
                                 structure: Union[BonusStructure, int, str] = BonusStructure.NONE,
                                 report_name: Optional[str] = None,
                                 summary: Optional[ProcessingSummary] = None) -> ReportResult:
        """案件別コミッションレポートを作成"""
        structure = BonusStructure.from_value(structure)
        report_fn = build_report_function(ReportType.COMMISSION, structure, self.settings)
        return self._run_report(
            report_name or f"commission_{structure.name.lower()}",
            input_path,
            output_path,
            report_fn,
            metadata={'bonus_structure': structure.name},
            summary=summary,
        )

    def create_summary_report(self, input_path: Path, output_path: Path,
                              report_name: Optional[str] = None,
                              summary: Optional[ProcessingSummary] = None) -> ReportResult:
        """ブローカー別合計レポートを作成（入力はボーナス列付きコミッションレポート）"""
        report_fn = build_report_function(ReportType.SUMMARY, settings=self.settings)
        return self._run_report(report_name or "summary", input_path, output_path, report_fn,
                                summary=summary)

    def create_all_reports(self, input_path: Path, output_dir: Path) -> ProcessingSummary:
        """
        全ボーナス体系のコミッションレポートと合計レポートを一括作成

        失敗したレポートがあればその時点で中断し、失敗分を含むサマリーを
        ログ出力してから例外を再送出する。サマリーは last_summary からも参照できる。
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        summary = ProcessingSummary()
        summary.processing_start = datetime.now()
        self.last_summary = summary
        self.logger.info(f"一括レポート作成を開始: {Path(input_path).name} -> {output_dir}")

        total = len(OutputConstants.COMMISSION_REPORTS) + len(OutputConstants.SUMMARY_REPORTS)
        current = 0
        outputs = {}

        try:
            for report_name, structure_value in OutputConstants.COMMISSION_REPORTS:
                current += 1
                self.logger.log_processing_progress(current, total, report_name)
                output_path = output_dir / f"{report_name}{OutputConstants.FILE_EXTENSION}"
                self.create_commission_report(input_path, output_path, structure_value, report_name,
                                              summary=summary)
                outputs[report_name] = output_path

            for report_name, source_name in OutputConstants.SUMMARY_REPORTS:
                current += 1
                self.logger.log_processing_progress(current, total, report_name)
                output_path = output_dir / f"{report_name}{OutputConstants.FILE_EXTENSION}"
                self.create_summary_report(outputs[source_name], output_path, report_name,
                                           summary=summary)
        finally:
            summary.processing_end = datetime.now()
            self.logger.log_processing_summary(
                summary.total_reports,
                summary.successful_reports,
                summary.failed_reports,
                summary.processing_duration or 0
            )
            if summary.errors:
                self.logger.error(f"エラー内容: {summary.errors}")

        return summary

    def _run_report(self, report_name: str, input_path: Path, output_path: Path,
                    report_fn: ReportFunction, metadata: Optional[dict] = None,
                    summary: Optional[ProcessingSummary] = None) -> ReportResult:
        """レポート1件を作成してファイルに書き込み（summary指定時は成否を記録）"""
        input_path = Path(input_path)
        output_path = Path(output_path)
        result = ReportResult(
            report_name=report_name,
            input_file=str(input_path),
            output_file=str(output_path),
            success=False,
            metadata=dict(metadata or {}),
        )

        start_time = datetime.now()
        try:
            output_text = write_report_to_file(
                input_path,
                output_path,
                report_fn,
                file_handler=self.csv_handler,
                line_separator=self.settings.line_separator,
            )
            self.logger.log_file_operation("書き込み", output_path, True)

            # ヘッダー行を除いた件数
            result.row_count = max(len(output_text.split(self.settings.line_separator)) - 1, 0)
            result.success = True
            self.logger.log_report_results(report_name, {
                '入力ファイル': input_path.name,
                '出力ファイル': output_path.name,
                '出力件数': result.row_count,
            })

        except FileProcessingError as e:
            result.add_error(str(e))
            self.error_handler.handle_file_processing_error(e, input_path)
            self.error_handler.log_and_raise(e, f"レポート作成: {report_name}")

        except DataValidationError as e:
            result.add_error(str(e))
            self.error_handler.handle_data_validation_error(e, f"{report_name}: {input_path.name}")
            self.error_handler.log_and_raise(e, f"レポート作成: {report_name}")

        finally:
            end_time = datetime.now()
            result.processing_time = (end_time - start_time).total_seconds()
            if summary is not None:
                summary.add_result(result)

        return result
