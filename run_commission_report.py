#!/usr/bin/env python3
"""
ブローカー コミッションレポート生成 メイン実行スクリプト

使用方法:
    python run_commission_report.py commission cases.csv commission.csv --bonus-structure 1
    python run_commission_report.py summary commission.csv summary.csv
    python run_commission_report.py all cases.csv output/
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent))

from broker_commission.main_controller import MainController
from broker_commission.exceptions import CommissionReportError
from common.error_handling.exceptions import (
    ConfigurationError,
    DataValidationError,
    FileProcessingError,
)


def parse_arguments(argv: Optional[List[str]] = None):
    """コマンドライン引数を解析"""
    parser = argparse.ArgumentParser(
        description="保険ブローカー コミッションレポート生成システム",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用例:
  %(prog)s commission cases.csv commission.csv                       # 基本コミッションのみ
  %(prog)s commission cases.csv commission.csv --bonus-structure 2   # ボーナス体系2
  %(prog)s summary commission.csv summary.csv                        # ブローカー別合計
  %(prog)s all cases.csv output/                                     # 全レポートを一括作成
  %(prog)s all cases.csv output/ --legacy                            # 不正な金額をNaNとして出力
        """
    )

    common_parser = argparse.ArgumentParser(add_help=False)
    common_parser.add_argument(
        '--config',
        type=str,
        help='設定ファイル（JSON）のパス'
    )
    common_parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='ログレベル（デフォルト: 設定ファイルの値、未指定時はINFO）'
    )
    common_parser.add_argument(
        '--legacy',
        action='store_true',
        help='未対応通貨・不正な金額をエラーにせずNaNとして出力'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    commission = subparsers.add_parser(
        'commission',
        parents=[common_parser],
        help='案件別コミッションレポートを作成'
    )
    commission.add_argument('input', type=str, help='案件CSVファイル')
    commission.add_argument('output', type=str, help='出力CSVファイル')
    commission.add_argument(
        '--bonus-structure',
        choices=['0', '1', '2'],
        default='0',
        help='ボーナス体系（0: なし、1: 体系1、2: 体系2）'
    )

    summary = subparsers.add_parser(
        'summary',
        parents=[common_parser],
        help='ブローカー別合計レポートを作成（入力はボーナス列付きコミッションレポート）'
    )
    summary.add_argument('input', type=str, help='コミッションCSVファイル')
    summary.add_argument('output', type=str, help='出力CSVファイル')

    all_reports = subparsers.add_parser(
        'all',
        parents=[common_parser],
        help='全ボーナス体系のレポートを一括作成'
    )
    all_reports.add_argument('input', type=str, help='案件CSVファイル')
    all_reports.add_argument('output_dir', type=str, help='出力ディレクトリ')

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """メイン関数"""
    args = parse_arguments(argv)

    print("=" * 60)
    print("保険ブローカー コミッションレポート生成システム")
    print(f"処理内容: {args.command}")
    print(f"入力ファイル: {args.input}")
    print("=" * 60)

    try:
        controller = MainController(
            config_path=Path(args.config) if args.config else None,
            log_level=args.log_level,
            strict=False if args.legacy else None,
        )

        if args.command == 'commission':
            result = controller.create_commission_report(
                Path(args.input), Path(args.output), args.bonus_structure
            )
            print(f"✓ {result.output_file} に {result.row_count}件出力しました。")
        elif args.command == 'summary':
            result = controller.create_summary_report(Path(args.input), Path(args.output))
            print(f"✓ {result.output_file} に {result.row_count}件出力しました。")
        else:
            summary = controller.create_all_reports(Path(args.input), Path(args.output_dir))
            for name, result in summary.report_results.items():
                print(f"✓ {name}: {result.output_file} ({result.row_count}件)")

    except ConfigurationError as e:
        print(f"\n設定エラー: {e}", file=sys.stderr)
        return 1
    except FileProcessingError as e:
        print(f"\nファイル処理エラー: {e}", file=sys.stderr)
        return 1
    except (DataValidationError, CommissionReportError) as e:
        print(f"\nデータエラー: {e}", file=sys.stderr)
        return 1

    print("\n処理が正常に完了しました。")
    return 0


if __name__ == '__main__':
    sys.exit(main())
