"""
中央集約設定管理システム
"""
import copy
import json
from pathlib import Path
from typing import Dict, Any, Optional, List
from ..error_handling.exceptions import ConfigurationError


class ConfigManager:
    """設定管理の統一クラス"""

    DEFAULT_CONFIG_FILES = [
        'commission_config.json',
        'config.json',
        'settings.json'
    ]

    def __init__(self, config_path: Optional[Path] = None, logger=None,
                 defaults: Optional[Dict[str, Any]] = None,
                 search_dir: Optional[Path] = None):
        self.logger = logger
        self.config_path = config_path
        self.defaults = defaults or {}
        self.search_dir = Path(search_dir) if search_dir else Path.cwd()
        self.config_data = {}
        self.load_config(config_path)

    def load_config(self, config_path: Optional[Path] = None) -> Dict[str, Any]:
        """設定ファイルを読み込み（デフォルト設定に上書きマージ）"""
        self.config_data = self._get_default_config()

        if config_path:
            self.config_data.update(self._load_single_config(Path(config_path)))
            return self.config_data

        # デフォルトの設定ファイルを順次試行
        for config_file in self.DEFAULT_CONFIG_FILES:
            candidate = self.search_dir / config_file
            if not candidate.exists():
                continue
            try:
                self.config_data.update(self._load_single_config(candidate))
                self.config_path = candidate
                break
            except ConfigurationError as e:
                if self.logger:
                    self.logger.debug(f"設定ファイル読み込み失敗: {config_file} - {str(e)}")
                continue
        else:
            if self.logger:
                self.logger.warning("設定ファイルが見つかりません。デフォルト設定を使用します。")

        return self.config_data

    def _load_single_config(self, config_path: Path) -> Dict[str, Any]:
        """単一の設定ファイルを読み込み"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"設定ファイルが見つかりません: {config_path}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"設定ファイルの形式が無効です: {config_path} - {str(e)}") from e
        except OSError as e:
            raise ConfigurationError(f"設定ファイル読み込みエラー: {config_path} - {str(e)}") from e

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"設定ファイルはJSONオブジェクトである必要があります: {config_path}")

        if self.logger:
            self.logger.info(f"設定ファイル読み込み成功: {config_path.name}")

        return config_data

    def _get_default_config(self) -> Dict[str, Any]:
        """デフォルト設定を取得"""
        config = {
            'base_path': str(Path.cwd()),
            'encoding': 'utf-8',
            'log_level': 'INFO',
            'log_file': None
        }
        config.update(copy.deepcopy(self.defaults))
        return config

    def get(self, key: str, default: Any = None) -> Any:
        """設定値を取得"""
        return self.config_data.get(key, default)

    def get_logging_settings(self) -> Dict[str, Any]:
        """ログ関連の設定を取得"""
        return {
            'log_level': self.get('log_level', 'INFO'),
            'log_file': self.get('log_file')
        }

    def get_commission_settings(self) -> Dict[str, Any]:
        """コミッション計算関連の設定を取得"""
        keys = [
            'base_commission',
            'bonus_amount',
            'reporting_currency',
            'currency_lookup',
            'bonus_tiers',
            'strict_validation',
            'line_separator',
        ]
        return {key: self.get(key) for key in keys if self.get(key) is not None}

    def validate_configuration(self, required_fields: Optional[List[str]] = None) -> bool:
        """設定の妥当性を検証"""
        required_fields = required_fields or ['encoding', 'log_level']
        missing_fields = [field for field in required_fields if self.get(field) in (None, '')]

        if missing_fields:
            error_msg = f"必須設定項目が不足: {missing_fields}"
            if self.logger:
                self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

        log_level = str(self.get('log_level')).upper()
        if log_level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            error_msg = f"log_levelが無効です: {self.get('log_level')}"
            if self.logger:
                self.logger.error(error_msg)
            raise ConfigurationError(error_msg)

        if self.logger:
            self.logger.info("設定の妥当性検証完了")

        return True

    def update_config(self, updates: Dict[str, Any]) -> None:
        """設定を更新"""
        self.config_data.update(updates)

        if self.logger:
            self.logger.info(f"設定更新: {list(updates.keys())}")

    def get_all_settings(self) -> Dict[str, Any]:
        """すべての設定を取得"""
        return self.config_data.copy()
