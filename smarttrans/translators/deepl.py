"""
DeepL provider.

Supports: DeepL API Free, DeepL API Pro (picked from the key by the SDK,
or set explicitly with ``providers.deepl_server_url``).

Usage:
    from smarttrans.translators.deepl import DeepLProvider

    provider = DeepLProvider(api_key=os.environ["DEEPL_API_KEY"])
    provider.translate_texts(["Hello"], "DE")
"""
from typing import Any, Dict, List, Mapping, Optional

import deepl

from .base import RequestOptions, TranslationProvider
from .language_codes import deepl_code, supports_formality
from ..utils.exceptions import (
    ProviderAuthFailure,
    ProviderBadResponse,
    ProviderError,
    ProviderNetworkError,
    ProviderRateLimited,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Retries belong to TranslationClient; the SDK must fail fast.
deepl.http_client.max_network_retries = 0


class DeepLProvider(TranslationProvider):
    """DeepL text translation, one request per batch."""

    name = "deepl"

    def __init__(
        self,
        api_key: str = "",
        server_url: Optional[str] = None,
        source_lang: Optional[str] = None,
        custom_mappings: Optional[Mapping[str, str]] = None,
        client: Optional[deepl.Translator] = None,
    ):
        self.api_key = api_key
        self.server_url = server_url or None
        self.source_lang = source_lang or None
        self.custom_mappings = dict(custom_mappings or {})
        self._client = client

    def get_client(self) -> deepl.Translator:
        """Get DeepL client."""
        if self._client is None:
            if not self.api_key:
                raise ProviderAuthFailure("DEEPL_API_KEY not set. Add to .env file.", api_name=self.name)
            self._client = deepl.Translator(self.api_key, server_url=self.server_url)
        return self._client

    def language_code(self, language: str) -> Optional[str]:
        return deepl_code(language, self.custom_mappings)

    def build_request(self, texts: List[str], target_code: str, options: RequestOptions) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            'text': list(texts),
            'target_lang': target_code,
            'preserve_formatting': options.preserve_formatting,
        }
        if self.source_lang:
            request['source_lang'] = self.source_lang
        if options.context:
            request['context'] = options.context
        if supports_formality(target_code):
            request['formality'] = "more" if options.formal else "less"
        return request

    def send(self, request: Dict[str, Any]) -> Any:
        client = self.get_client()
        try:
            return client.translate_text(**request)
        except deepl.TooManyRequestsException as e:
            raise ProviderRateLimited(str(e), api_name=self.name, status_code=429, cause=e)
        except deepl.AuthorizationException as e:
            raise ProviderAuthFailure(str(e), api_name=self.name, status_code=403, cause=e)
        except deepl.ConnectionException as e:
            raise ProviderNetworkError(str(e), api_name=self.name, cause=e)
        except deepl.DeepLException as e:
            raise ProviderError(
                str(e),
                api_name=self.name,
                status_code=getattr(e, "http_status_code", None),
                cause=e,
            )

    def parse_response(self, response: Any) -> List[str]:
        results = response if isinstance(response, list) else [response]
        try:
            return [r.text for r in results]
        except AttributeError as e:
            raise ProviderBadResponse("DeepL result without text", api_name=self.name, cause=e)

    def check_connection(self) -> bool:
        """Check the key against the usage endpoint."""
        try:
            usage = self.get_client().get_usage()
        except (deepl.DeepLException, ProviderAuthFailure) as e:
            logger.error(f"DeepL connection failed: {e}", extra={"provider": self.name})
            return False
        if usage.character.valid:
            logger.info(
                f"DeepL usage: {usage.character.count:,} / {usage.character.limit:,} characters",
                extra={"provider": self.name},
            )
        return True
