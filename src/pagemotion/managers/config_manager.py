"""
Config Manager

Loads the animation layer configuration from YAML, with include support and
a packaged factory-defaults fallback.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from pagemotion.errors import ConfigError
from pagemotion.models.config import MotionConfig
from pagemotion.models.enums import LogCategory
from pagemotion.utils.logger import get_logger

log = get_logger().for_category(LogCategory.CONFIG)

PACKAGE_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
FACTORY_DEFAULTS = PACKAGE_CONFIG_DIR / "factory_defaults.yaml"


class ConfigManager:
    """
    YAML configuration loader

    Loads the main file; if it has an ``include:`` list those files are
    loaded from the same directory and merged in order (later files win per
    top-level section). Any failure falls back to factory defaults, so the
    animation layer always starts.

    Example:
        config = ConfigManager("site/motion.yaml").load()
        manager = AnimationManager(page, config=config)
    """

    def __init__(
        self,
        config_path: Union[str, Path, None] = None,
        defaults_path: Union[str, Path] = FACTORY_DEFAULTS
    ):
        self.config_path = Path(config_path) if config_path else None
        self.defaults_path = Path(defaults_path)
        self.data: Dict[str, Any] = {}
        self.config: Optional[MotionConfig] = None
        self.used_defaults = False

    def load(self) -> MotionConfig:
        """
        Load and parse configuration

        Returns:
            MotionConfig (invalid values already clamped)
        """
        self.used_defaults = False
        if self.config_path is None:
            self.data = self._load_defaults()
        else:
            try:
                main_config = self._read_yaml(self.config_path)
                if "include" in main_config:
                    log.info("Using include-based configuration", path=str(self.config_path))
                    self.data = self._load_with_includes(main_config["include"], self.config_path.parent)
                else:
                    self.data = main_config
            except ConfigError as ex:
                log.error("Failed to load config", error=ex.message)
                log.warn("Falling back to factory defaults")
                self.data = self._load_defaults()

        self.config = MotionConfig.from_dict(self.data)
        return self.config

    def _load_defaults(self) -> Dict[str, Any]:
        self.used_defaults = True
        try:
            return self._read_yaml(self.defaults_path)
        except ConfigError as ex:
            # Built-in dataclass defaults still apply
            log.error("Factory defaults unreadable, using built-in values", error=ex.message)
            return {}

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        if not isinstance(include_list, list):
            raise ConfigError(str(self.config_path), "'include' must be a list")

        merged: Dict[str, Any] = {}
        for filename in include_list:
            file_data = self._read_yaml(config_dir / filename)
            merged.update(file_data)
            log.debug(f"Loaded {filename}", keys=str(list(file_data.keys())))
        return merged

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigError(str(path), "file not found")
        except yaml.YAMLError as e:
            raise ConfigError(str(path), f"invalid YAML: {e}")
        except OSError as e:
            raise ConfigError(str(path), str(e))

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(str(path), "top level must be a mapping")
        return data
