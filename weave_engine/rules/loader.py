# ABOUTME: Loader for house-rule files stored as JSON
# ABOUTME: Reads the packaged default rules or a custom rules file into a WeaveConfig

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from weave_engine.rules.config import WeaveConfig


logger = logging.getLogger(__name__)

DEFAULT_RULES_FILE = "weave_rules.json"


class RulesLoader:
    """
    Loads spell success rules from JSON files.

    Responsible for reading a rules file from the data directory (or an
    explicit path) and turning it into a validated WeaveConfig.
    """

    def __init__(self, data_path: Optional[Path] = None):
        """
        Initialize the rules loader.

        Args:
            data_path: Path to the data directory (defaults to weave_engine/data)
        """
        if data_path is None:
            self.data_path = Path(__file__).parent.parent / "data"
        else:
            self.data_path = Path(data_path)

    def load_raw(self, rules_file: Optional[Path] = None) -> Dict[str, Any]:
        """
        Read a rules file without validating it.

        Args:
            rules_file: Explicit file path; defaults to the packaged rules

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file isn't valid JSON or isn't a JSON object
        """
        path = Path(rules_file) if rules_file else self.data_path / DEFAULT_RULES_FILE
        if not path.exists():
            raise FileNotFoundError(f"Rules file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Corrupted rules file {path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Rules file {path} must contain a JSON object")
        return data

    def load_config(self, rules_file: Optional[Path] = None) -> WeaveConfig:
        """
        Load and validate a rules file.

        Returns:
            WeaveConfig built from the file

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is malformed or the rules are inconsistent
        """
        data = self.load_raw(rules_file)
        try:
            config = WeaveConfig.from_dict(data)
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid rules file: {e}")
        logger.debug(f"Loaded rules with {len(config.thresholds)} spell level thresholds")
        return config
