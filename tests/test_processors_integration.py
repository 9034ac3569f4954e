"""
レポート生成処理の統合テスト
"""
import json
import logging
import unittest
import tempfile
from pathlib import Path
import sys

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from broker_commission.data_models import BonusStructure
from broker_commission.exceptions import ReportStructureError, UnsupportedCurrencyError
from broker_commission.main_controller import MainController, generate_report, write_report_to_file
from broker_commission.report_generator import get_commission_data, get_commission_summary_data
from common import ConfigurationError, FileProcessingError, ProcessingSummary, ReportResult
import run_commission_report


CASES_TEXT = (
    "BrokerName,CaseId,CaseValue\r\n"
    "Alice,1,£110000.00\r\n"
    "Bob,2,$100.00\r\n"
    "Alice,3,£310000.00"
)


class TestPipeline(unittest.TestCase):
    """パイプライン関数の統合テスト"""

    def setUp(self):
        """テスト前の準備"""
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        """テスト後のクリーンアップ"""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_generate_report(self):
        output = generate_report(CASES_TEXT, lambda rows: get_commission_data(rows, BonusStructure.STRUCTURE_1))
        self.assertEqual(output, (
            "BrokerName,CaseId,BaseCommission,BonusCommission\r\n"
            "Alice,1,£125,£10\r\n"
            "Bob,2,£125,£0\r\n"
            "Alice,3,£125,£210"
        ))

    def test_write_report_to_file_trims_and_overwrites(self):
        input_file = self.temp_dir / "cases.csv"
        output_file = self.temp_dir / "commission.csv"
        input_file.write_bytes((CASES_TEXT + "\r\n").encode('utf-8'))
        output_file.write_text("old content that must disappear", encoding='utf-8')

        write_report_to_file(input_file, output_file, get_commission_data)

        self.assertEqual(output_file.read_bytes().decode('utf-8'), (
            "BrokerName,CaseId,BaseCommission\r\n"
            "Alice,1,£125\r\n"
            "Bob,2,£125\r\n"
            "Alice,3,£125"
        ))

    def test_missing_input_is_fatal(self):
        with self.assertRaises(FileProcessingError):
            write_report_to_file(self.temp_dir / "missing.csv", self.temp_dir / "out.csv", get_commission_data)
        self.assertFalse((self.temp_dir / "out.csv").exists())

    def test_chained_summary(self):
        input_file = self.temp_dir / "cases.csv"
        commission_file = self.temp_dir / "commission.csv"
        summary_file = self.temp_dir / "summary.csv"
        input_file.write_bytes(CASES_TEXT.encode('utf-8'))

        write_report_to_file(input_file, commission_file,
                             lambda rows: get_commission_data(rows, BonusStructure.STRUCTURE_2))
        write_report_to_file(commission_file, summary_file, get_commission_summary_data)

        self.assertEqual(summary_file.read_bytes().decode('utf-8'),
                         "BrokerName,TotalCommission\r\nAlice,£480\r\nBob,£125")


class TestMainController(unittest.TestCase):
    """MainControllerの統合テスト"""

    def setUp(self):
        """テスト前の準備"""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.config_file = self.temp_dir / "commission_config.json"
        self.config_file.write_text(json.dumps({'log_level': 'WARNING'}), encoding='utf-8')
        self.input_file = self.temp_dir / "cases.csv"
        self.input_file.write_bytes(CASES_TEXT.encode('utf-8'))
        self.controller = MainController(config_path=self.config_file)

    def tearDown(self):
        """テスト後のクリーンアップ"""
        package_logger = logging.getLogger("broker_commission")
        for handler in list(package_logger.handlers):
            handler.close()
            package_logger.removeHandler(handler)
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_create_commission_report(self):
        output_file = self.temp_dir / "commission.csv"

        result = self.controller.create_commission_report(self.input_file, output_file, 1)

        self.assertIsInstance(result, ReportResult)
        self.assertTrue(result.success)
        self.assertEqual(result.row_count, 3)
        self.assertEqual(result.metadata['bonus_structure'], "STRUCTURE_1")
        self.assertIsNotNone(result.processing_time)
        self.assertTrue(output_file.read_bytes().decode('utf-8').startswith(
            "BrokerName,CaseId,BaseCommission,BonusCommission\r\n"))

    def test_create_all_reports(self):
        output_dir = self.temp_dir / "reports"

        summary = self.controller.create_all_reports(self.input_file, output_dir)

        self.assertIsInstance(summary, ProcessingSummary)
        self.assertEqual(summary.total_reports, 5)
        self.assertEqual(summary.successful_reports, 5)
        self.assertEqual(
            sorted(path.name for path in output_dir.iterdir()),
            sorted([
                "commission_none.csv",
                "commission_structure1.csv",
                "commission_structure2.csv",
                "summary_structure1.csv",
                "summary_structure2.csv",
            ])
        )
        self.assertEqual((output_dir / "summary_structure1.csv").read_bytes().decode('utf-8'),
                         "BrokerName,TotalCommission\r\nAlice,£470\r\nBob,£125")
        self.assertEqual((output_dir / "summary_structure2.csv").read_bytes().decode('utf-8'),
                         "BrokerName,TotalCommission\r\nAlice,£480\r\nBob,£125")

    def test_summary_of_report_without_bonus_raises(self):
        commission_file = self.temp_dir / "commission.csv"
        self.controller.create_commission_report(self.input_file, commission_file, BonusStructure.NONE)

        with self.assertRaises(ReportStructureError):
            self.controller.create_summary_report(commission_file, self.temp_dir / "summary.csv")

    def test_missing_input_raises(self):
        with self.assertRaises(FileProcessingError):
            self.controller.create_commission_report(self.temp_dir / "missing.csv", self.temp_dir / "out.csv")

    def test_currency_lookup_from_config(self):
        self.config_file.write_text(json.dumps({
            'log_level': 'WARNING',
            'currency_lookup': {'$': 0.8, '€': 0.5},
            'base_commission': 100,
        }), encoding='utf-8')
        self.input_file.write_bytes("BrokerName,CaseId,CaseValue\r\nCarol,9,€240000".encode('utf-8'))
        controller = MainController(config_path=self.config_file)

        output_file = self.temp_dir / "commission.csv"
        controller.create_commission_report(self.input_file, output_file, BonusStructure.STRUCTURE_1)

        # €240000 -> £120000 -> ボーナス20
        self.assertEqual(output_file.read_bytes().decode('utf-8'),
                         "BrokerName,CaseId,BaseCommission,BonusCommission\r\nCarol,9,£100,£20")

    def test_unknown_currency_strict_and_legacy(self):
        self.input_file.write_bytes("BrokerName,CaseId,CaseValue\r\nCarol,9,€240000".encode('utf-8'))
        output_file = self.temp_dir / "commission.csv"

        with self.assertRaises(UnsupportedCurrencyError):
            self.controller.create_commission_report(self.input_file, output_file, 1)

        legacy = MainController(config_path=self.config_file, strict=False)
        legacy.create_commission_report(self.input_file, output_file, 1)
        self.assertEqual(output_file.read_bytes().decode('utf-8'),
                         "BrokerName,CaseId,BaseCommission,BonusCommission\r\nCarol,9,£125,£0")

    def test_legacy_warnings_reach_log_file(self):
        """非strictの警告（£NaN出力）が設定したログファイルに記録される"""
        log_file = self.temp_dir / "logs" / "commission.log"
        self.config_file.write_text(json.dumps({
            'log_level': 'INFO',
            'log_file': str(log_file),
            'strict_validation': False,
        }), encoding='utf-8')
        self.input_file.write_bytes("BrokerName,CaseId,CaseValue\r\nCarol,9,€100.00".encode('utf-8'))
        controller = MainController(config_path=self.config_file)

        controller.create_commission_report(self.input_file, self.temp_dir / "commission.csv", 1)
        for handler in controller.logger.logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding='utf-8')
        self.assertIn("broker_commission.currency_converter", content)
        self.assertIn("未対応の通貨記号のため金額をNaNとして出力", content)
        # 設定値の改行コードはエスケープされ1行に収まる
        self.assertIn("line_separator: '\\r\\n'", content)

    def test_debug_level_reaches_module_loggers(self):
        """ログレベルDEBUGでレポート生成モジュールのデバッグログも出力される"""
        controller = MainController(config_path=self.config_file, log_level='DEBUG')
        with self.assertLogs("broker_commission", level="DEBUG") as captured:
            controller.create_commission_report(self.input_file, self.temp_dir / "commission.csv", 1)
        self.assertTrue(any(record.name == "broker_commission.report_generator" and
                            record.levelname == "DEBUG" for record in captured.records))

    def test_create_all_reports_records_failure(self):
        """一括作成で失敗したレポートはサマリーに記録されてから例外が再送出される"""
        self.input_file.write_bytes("BrokerName,CaseId,CaseValue\r\nCarol,9,€100.00".encode('utf-8'))
        output_dir = self.temp_dir / "reports"

        with self.assertLogs("broker_commission", level="INFO") as captured:
            with self.assertRaises(UnsupportedCurrencyError):
                self.controller.create_all_reports(self.input_file, output_dir)

        summary = self.controller.last_summary
        self.assertEqual(summary.total_reports, 1)
        self.assertEqual(summary.successful_reports, 0)
        self.assertEqual(summary.failed_reports, 1)
        self.assertEqual(len(summary.errors), 1)
        self.assertIn("€", summary.errors[0])
        self.assertFalse(summary.report_results["commission_none"].success)
        self.assertIsNotNone(summary.processing_duration)

        messages = [record.getMessage() for record in captured.records]
        self.assertIn("エラー数: 1", messages)
        self.assertIn("成功数: 0", messages)

    def test_create_all_reports_keeps_summary(self):
        summary = self.controller.create_all_reports(self.input_file, self.temp_dir / "reports")
        self.assertIs(self.controller.last_summary, summary)
        self.assertEqual(summary.failed_reports, 0)
        self.assertEqual(summary.errors, [])

    def test_invalid_config(self):
        self.config_file.write_text(json.dumps({'currency_lookup': {'US$': 0.8}}), encoding='utf-8')
        with self.assertRaises(ConfigurationError):
            MainController(config_path=self.config_file)

        self.config_file.write_text(json.dumps({'bonus_tiers': {'1': [[100000, 0]]}}), encoding='utf-8')
        with self.assertRaises(ConfigurationError):
            MainController(config_path=self.config_file)


class TestCommandLine(unittest.TestCase):
    """実行スクリプトのテスト"""

    def setUp(self):
        """テスト前の準備"""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.config_file = self.temp_dir / "commission_config.json"
        self.config_file.write_text(json.dumps({'log_level': 'WARNING'}), encoding='utf-8')
        self.input_file = self.temp_dir / "cases.csv"
        self.input_file.write_bytes(CASES_TEXT.encode('utf-8'))

    def tearDown(self):
        """テスト後のクリーンアップ"""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_commission_command(self):
        output_file = self.temp_dir / "commission.csv"
        exit_code = run_commission_report.main([
            'commission', str(self.input_file), str(output_file),
            '--bonus-structure', '2', '--config', str(self.config_file),
        ])
        self.assertEqual(exit_code, 0)
        self.assertTrue(output_file.read_bytes().decode('utf-8').endswith("Alice,3,£125,£220"))

    def test_summary_command(self):
        commission_file = self.temp_dir / "commission.csv"
        summary_file = self.temp_dir / "summary.csv"
        run_commission_report.main([
            'commission', str(self.input_file), str(commission_file),
            '--bonus-structure', '1', '--config', str(self.config_file),
        ])
        exit_code = run_commission_report.main([
            'summary', str(commission_file), str(summary_file), '--config', str(self.config_file),
        ])
        self.assertEqual(exit_code, 0)
        self.assertEqual(summary_file.read_bytes().decode('utf-8'),
                         "BrokerName,TotalCommission\r\nAlice,£470\r\nBob,£125")

    def test_all_command(self):
        output_dir = self.temp_dir / "reports"
        exit_code = run_commission_report.main([
            'all', str(self.input_file), str(output_dir), '--config', str(self.config_file),
        ])
        self.assertEqual(exit_code, 0)
        self.assertEqual(len(list(output_dir.glob("*.csv"))), 5)

    def test_missing_input_exit_code(self):
        exit_code = run_commission_report.main([
            'commission', str(self.temp_dir / "missing.csv"), str(self.temp_dir / "out.csv"),
            '--config', str(self.config_file),
        ])
        self.assertEqual(exit_code, 1)

    def test_legacy_flag(self):
        self.input_file.write_bytes("BrokerName,CaseId,CaseValue\r\nCarol,9,€240000".encode('utf-8'))
        output_file = self.temp_dir / "commission.csv"
        args = ['commission', str(self.input_file), str(output_file), '--config', str(self.config_file)]

        self.assertEqual(run_commission_report.main(args), 1)
        self.assertEqual(run_commission_report.main(args + ['--legacy']), 0)


if __name__ == '__main__':
    unittest.main()
