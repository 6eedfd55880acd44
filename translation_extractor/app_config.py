"""Application configuration module for the translation extractor."""
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from translation_extractor.consolidation import DEFAULT_OVERLAP_THRESHOLD
from translation_extractor.extractor import DEFAULT_SELF_OWNER_ID, ExtractionOptions
from translation_extractor.injection import LocalizationHost, TranslationReloader
from translation_extractor.locale_merge import DEFAULT_SOURCE_LOCALE
from translation_extractor.logging_config import setup_logger

DEFAULT_TARGET_LOCALE = "ja-JP"


@dataclass
class AppConfig:
    """Application configuration dataclass."""
    # Core paths
    project_root: str
    output_root: str
    snapshot_path: Optional[str]

    # Locale configuration
    source_locale_id: str
    target_locale_id: str

    # Extraction settings
    self_owner_id: str
    merge_overlapping_groups: bool
    overlap_threshold: float

    # Reload settings
    enable_translation: bool

    def extraction_options(self) -> ExtractionOptions:
        return ExtractionOptions(
            source_locale_id=self.source_locale_id,
            self_owner_id=self.self_owner_id,
            merge_overlapping_groups=self.merge_overlapping_groups,
            overlap_threshold=self.overlap_threshold,
        )

    def translation_reloader(self, host: LocalizationHost) -> TranslationReloader:
        """Build the reload pass that injects the saved translations under output_root into host."""
        return TranslationReloader(
            host,
            self.output_root,
            self.target_locale_id,
            enabled=self.enable_translation,
        )


def _compute_project_root() -> str:
    """The directory above the package, where config.yaml and .env live."""
    return os.path.dirname(os.path.dirname(os.path.realpath(__file__)))


def _load_dotenv_files(project_root: str) -> Optional[str]:
    """Load the first .env found in the project root or docker/ and return its path."""
    for dotenv_path in (os.path.join(project_root, '.env'), os.path.join(project_root, 'docker', '.env')):
        if os.path.exists(dotenv_path):
            load_dotenv(dotenv_path)
            return dotenv_path
    return None


def _warn(message: str) -> None:
    # The logger is configured from this file, so problems go to stderr
    print(f"Warning: {message} Using default configuration.", file=sys.stderr)


def _load_yaml_config(project_root: str) -> Dict[str, Any]:
    """
    Read config.yaml (or EXTRACTOR_CONFIG_FILE) as a mapping.

    Any problem with the file is reported on stderr and yields an empty mapping,
    so every setting falls back to its default.
    """
    config_file = os.path.abspath(
        os.environ.get('EXTRACTOR_CONFIG_FILE', os.path.join(project_root, 'config.yaml'))
    )
    if not os.path.exists(config_file):
        _warn(f"Configuration file '{config_file}' not found (set EXTRACTOR_CONFIG_FILE to use another file).")
        return {}

    try:
        with open(config_file, 'r', encoding='utf-8') as config_stream:
            loaded = yaml.safe_load(config_stream)
    except yaml.YAMLError as yaml_exc:
        _warn(f"Invalid YAML in '{config_file}': {yaml_exc}.")
        return {}
    except OSError as read_exc:
        _warn(f"Could not read '{config_file}': {read_exc}.")
        return {}

    if loaded is None:
        _warn(f"Configuration file '{config_file}' is empty.")
        return {}
    if not isinstance(loaded, dict):
        _warn(f"Configuration file '{config_file}' must contain a YAML mapping.")
        return {}
    return loaded


def _setup_logger_from_config(config: Dict[str, Any]) -> logging.Logger:
    log_config = config.get('logging') or {}
    return setup_logger(
        str(log_config.get('log_level', 'INFO')),
        log_config.get('log_file_path', 'logs/extraction_log.log'),
        bool(log_config.get('log_to_console', True)),
    )


def _parse_threshold(value: Any, logger: logging.Logger) -> float:
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid overlap_threshold '%s'; using %.2f.", value, DEFAULT_OVERLAP_THRESHOLD)
        return DEFAULT_OVERLAP_THRESHOLD
    if not 0 < threshold <= 1:
        logger.warning("overlap_threshold %.2f outside (0, 1]; using %.2f.", threshold, DEFAULT_OVERLAP_THRESHOLD)
        return DEFAULT_OVERLAP_THRESHOLD
    return threshold


def load_app_config() -> AppConfig:
    """
    Load application configuration from YAML file and environment variables.

    Returns:
        AppConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()

    dotenv_path = _load_dotenv_files(project_root)
    config = _load_yaml_config(project_root)
    logger = _setup_logger_from_config(config)
    if dotenv_path:
        logger.info("Loaded environment variables from: %s", dotenv_path)
    else:
        logger.debug("No .env file under '%s'; using the process environment only.", project_root)

    default_output_root = os.path.join(project_root, 'translations')
    output_root = os.environ.get('EXTRACTOR_OUTPUT_ROOT', config.get('output_root', default_output_root))
    source_locale_id = os.environ.get('EXTRACTOR_SOURCE_LOCALE', config.get('source_locale_id', DEFAULT_SOURCE_LOCALE))
    snapshot_path = os.environ.get('EXTRACTOR_SNAPSHOT_PATH', config.get('snapshot_path'))

    return AppConfig(
        project_root=project_root,
        output_root=output_root,
        snapshot_path=snapshot_path,
        source_locale_id=source_locale_id,
        target_locale_id=config.get('target_locale_id', DEFAULT_TARGET_LOCALE),
        self_owner_id=config.get('self_owner_id', DEFAULT_SELF_OWNER_ID),
        merge_overlapping_groups=bool(config.get('merge_overlapping_groups', True)),
        overlap_threshold=_parse_threshold(config.get('overlap_threshold', DEFAULT_OVERLAP_THRESHOLD), logger),
        enable_translation=bool(config.get('enable_translation', True)),
    )
