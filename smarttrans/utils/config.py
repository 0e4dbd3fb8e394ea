"""
Configuration for smarttrans.

Supports:
- Environment variables
- .env file (auto-loaded)
- YAML config file (optional)

Usage:
    from smarttrans.utils.config import Config

    config = Config.load("smarttrans.yaml")
    print(config.translation.max_batch_size)

Example YAML:
    translation:
      provider: deepl
      max_batch_size: 50
      max_retries: 3
      initial_retry_delay: 1.0
      formal: false
    providers:
      deepl_server_url: https://api-free.deepl.com
      openai_model: gpt-4o-mini
    language_mappings:
      Brazilian: PT-BR
"""
import os
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigError

# =============================================================================
# PATH CONSTANTS
# =============================================================================

SCRIPT_DIR: str = os.path.dirname(os.path.abspath(__file__))
PACKAGE_DIR: str = os.path.dirname(SCRIPT_DIR)   # smarttrans/
REPO_ROOT: str = os.path.dirname(PACKAGE_DIR)

DEFAULT_CONFIG_FILE: str = "smarttrans.yaml"

load_dotenv(Path(REPO_ROOT) / ".env")
load_dotenv()  # cwd .env, never overrides already-set variables


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_PROVIDER: str = "deepl"
DEFAULT_MAX_BATCH_SIZE: int = 50     # DeepL's maximum texts per request
DEFAULT_MAX_RETRIES: int = 3
DEFAULT_RETRY_DELAY: float = 1.0     # seconds, doubled per retry
OPENAI_MODEL: str = "gpt-4o-mini"


def _env(name: str) -> str:
    return os.environ.get(name, "")


# =============================================================================
# CONFIG CLASSES
# =============================================================================

@dataclass
class TranslationConfig:
    """Translation settings."""
    provider: str = DEFAULT_PROVIDER
    source_language: str = "EN"
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    max_retries: int = DEFAULT_MAX_RETRIES
    initial_retry_delay: float = DEFAULT_RETRY_DELAY
    preserve_formatting: bool = True
    formal: bool = False
    include_context: bool = True
    translate_free_text: bool = True


@dataclass
class ProviderConfig:
    """Provider credentials and endpoints."""
    deepl_api_key: str = ""
    deepl_server_url: str = ""      # empty: SDK picks free/pro from the key
    openai_api_key: str = ""
    openai_model: str = OPENAI_MODEL
    caiyun_token: str = ""
    timeout: float = 30.0


@dataclass
class Config:
    """Main configuration class."""

    translation: TranslationConfig = field(default_factory=TranslationConfig)
    providers: ProviderConfig = field(default_factory=ProviderConfig)

    # Display name -> provider code, checked before built-in tables
    language_mappings: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load configuration from YAML file.

        API keys always come from the environment; a YAML file only
        overrides non-secret settings.

        Args:
            config_path: Path to YAML config file. If None, uses defaults.

        Returns:
            Config instance

        Raises:
            ConfigError: If the file exists but is not valid YAML or has
                values of the wrong type.
        """
        config = cls()

        config.providers.deepl_api_key = _env("DEEPL_API_KEY")
        config.providers.openai_api_key = _env("OPENAI_API_KEY")
        config.providers.caiyun_token = _env("CAIYUN_TOKEN")
        if _env("OPENAI_MODEL"):
            config.providers.openai_model = _env("OPENAI_MODEL")

        if config_path is None:
            return config

        path = Path(config_path)
        if not path.exists():
            return config

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}", cause=e)

        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {path} must be a mapping", expected_type="mapping")

        if 'translation' in data:
            _apply_section(config.translation, data['translation'], 'translation')

        if 'providers' in data:
            _apply_section(config.providers, data['providers'], 'providers')

        if 'language_mappings' in data:
            mappings = data['language_mappings'] or {}
            if not isinstance(mappings, dict):
                raise ConfigError("language_mappings must be a mapping",
                                  config_key="language_mappings", expected_type="mapping")
            config.language_mappings = {str(k): str(v) for k, v in mappings.items()}

        return config

    def save(self, config_path: str) -> None:
        """Save non-secret settings to a YAML file."""
        t = self.translation
        p = self.providers
        data = {
            'translation': {
                'provider': t.provider,
                'source_language': t.source_language,
                'max_batch_size': t.max_batch_size,
                'max_retries': t.max_retries,
                'initial_retry_delay': t.initial_retry_delay,
                'preserve_formatting': t.preserve_formatting,
                'formal': t.formal,
                'include_context': t.include_context,
                'translate_free_text': t.translate_free_text,
            },
            'providers': {
                'deepl_server_url': p.deepl_server_url,
                'openai_model': p.openai_model,
                'timeout': p.timeout,
            },
            'language_mappings': dict(self.language_mappings),
        }
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True)


def _apply_section(target: Any, values: Any, section: str) -> None:
    """Copy known keys from a YAML section onto a dataclass, checking types."""
    if not isinstance(values, dict):
        raise ConfigError(f"'{section}' must be a mapping", config_key=section, expected_type="mapping")

    for key, value in values.items():
        if not hasattr(target, key) or key.endswith("api_key") or key == "caiyun_token":
            continue
        current = getattr(target, key)
        expected = type(current)
        if expected is float and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigError(
                f"Invalid value for {section}.{key}: {value!r}",
                config_key=f"{section}.{key}",
                expected_type=expected.__name__,
            )
        setattr(target, key, value)
