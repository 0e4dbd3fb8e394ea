"""
Provider abstraction shared by all translation backends.

A provider turns a list of texts into a list of translations in the same
order. Concrete providers only fill in the three hooks; ``translate_texts``
ties them together and checks the answer length.

Providers map their SDK/HTTP failures onto the exceptions in
``smarttrans.utils.exceptions``:

    ProviderRateLimited   429 / quota throttling (retried by the client)
    ProviderAuthFailure   401 / 403
    ProviderNetworkError  no response at all
    ProviderBadResponse   unusable body
    ProviderError         anything else non-2xx
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

from ..utils.exceptions import ProviderBadResponse


@dataclass(frozen=True)
class TranslationUnit:
    """One text bound for one target code."""
    text: str
    target_code: str
    context: Optional[str] = None


@dataclass
class Batch:
    """Units submitted together, plus retry bookkeeping."""
    units: List[TranslationUnit]
    target_code: str
    attempt: int = 0
    next_delay: float = 1.0

    @property
    def texts(self) -> List[str]:
        return [u.text for u in self.units]

    @property
    def context(self) -> Optional[str]:
        # Providers accept one context per request; the first one wins
        for unit in self.units:
            if unit.context:
                return unit.context
        return None


@dataclass(frozen=True)
class RequestOptions:
    context: Optional[str] = None
    formal: bool = False
    preserve_formatting: bool = True


class TranslationProvider(ABC):
    """Base class for translation backends."""

    name: str = "base"

    @abstractmethod
    def language_code(self, language: str) -> Optional[str]:
        """Provider code for a display name, or None when unsupported."""

    @abstractmethod
    def build_request(self, texts: List[str], target_code: str, options: RequestOptions) -> Any:
        """Build the request object for one batch."""

    @abstractmethod
    def send(self, request: Any) -> Any:
        """Send a request. Blocking; raises ProviderError subclasses."""

    @abstractmethod
    def parse_response(self, response: Any) -> List[str]:
        """Extract translations from a response, in request order."""

    def check_connection(self) -> bool:
        """Probe the provider. Returns True when credentials work."""
        return True

    def translate_texts(self, texts: List[str], target_code: str, options: Optional[RequestOptions] = None) -> List[str]:
        """
        Translate `texts` into `target_code`.

        Raises:
            ProviderBadResponse: If the answer does not have one entry per text.
            ProviderError: Any other provider failure.
        """
        if not texts:
            return []
        request = self.build_request(texts, target_code, options or RequestOptions())
        response = self.send(request)
        translations = self.parse_response(response)
        if len(translations) != len(texts):
            raise ProviderBadResponse(
                f"Expected {len(texts)} translations, got {len(translations)}",
                api_name=self.name,
            )
        return translations
