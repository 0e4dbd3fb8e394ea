"""
Translation providers and the batch client.

Usage:
    from smarttrans.translators import create_provider, TranslationClient

    provider = create_provider(config)            # deepl | openai | caiyun
    client = TranslationClient(provider, max_retries=3)
"""
from typing import Optional

from .base import Batch, RequestOptions, TranslationProvider, TranslationUnit
from .caiyun import CaiyunProvider
from .client import TranslationClient
from .deepl import DeepLProvider
from .language_codes import deepl_code, iso_code, supports_formality
from .openai_translator import OpenAIProvider
from ..utils.config import Config
from ..utils.exceptions import ConfigError

PROVIDERS = {
    "deepl": DeepLProvider,
    "openai": OpenAIProvider,
    "caiyun": CaiyunProvider,
}


def create_provider(config: Config, name: Optional[str] = None) -> TranslationProvider:
    """
    Build the provider named in config (or `name`).

    Raises:
        ConfigError: If the provider name is unknown.
    """
    name = (name or config.translation.provider).lower()
    p = config.providers

    if name == "deepl":
        return DeepLProvider(
            api_key=p.deepl_api_key,
            server_url=p.deepl_server_url,
            source_lang=config.translation.source_language,
            custom_mappings=config.language_mappings,
        )
    if name == "openai":
        return OpenAIProvider(api_key=p.openai_api_key, model=p.openai_model, timeout=p.timeout)
    if name == "caiyun":
        return CaiyunProvider(token=p.caiyun_token, timeout=p.timeout)

    raise ConfigError(
        f"Unknown provider '{name}'. Choose from: {', '.join(PROVIDERS)}",
        config_key="translation.provider",
    )


__all__ = [
    'Batch',
    'RequestOptions',
    'TranslationProvider',
    'TranslationUnit',
    'TranslationClient',
    'DeepLProvider',
    'OpenAIProvider',
    'CaiyunProvider',
    'PROVIDERS',
    'create_provider',
    'deepl_code',
    'iso_code',
    'supports_formality',
]
