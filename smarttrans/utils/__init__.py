"""Utility modules for smarttrans."""
from .config import Config, TranslationConfig, ProviderConfig
from .logger import get_logger, setup_logging, set_level
from .exceptions import (
    SmartTransError,
    ParseFailure,
    ConfigError,
    ProviderError,
    ProviderAuthFailure,
    ProviderRateLimited,
    ProviderBadResponse,
    ProviderNetworkError,
    ReconstructionMismatch,
)

__all__ = [
    # Config
    'Config',
    'TranslationConfig',
    'ProviderConfig',
    # Logger
    'get_logger',
    'setup_logging',
    'set_level',
    # Exceptions
    'SmartTransError',
    'ParseFailure',
    'ConfigError',
    'ProviderError',
    'ProviderAuthFailure',
    'ProviderRateLimited',
    'ProviderBadResponse',
    'ProviderNetworkError',
    'ReconstructionMismatch',
]
