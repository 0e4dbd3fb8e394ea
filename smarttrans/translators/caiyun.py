"""
Caiyun translation provider.

Caiyun only covers Chinese, English and Japanese targets; the source language
is auto-detected.
"""
from typing import Any, Dict, List, Optional

import requests

from .base import RequestOptions, TranslationProvider
from .language_codes import iso_code
from ..utils.exceptions import (
    ProviderAuthFailure,
    ProviderBadResponse,
    ProviderError,
    ProviderNetworkError,
    ProviderRateLimited,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Caiyun API configuration
CAIYUN_API = "http://api.interpreter.caiyunai.com/v1/translator"
REQUEST_ID = "smarttrans"
SUPPORTED_CODES = {"zh", "en", "ja"}


class CaiyunProvider(TranslationProvider):
    name = "caiyun"

    def __init__(self, token: str = "", timeout: float = 30.0, api_url: str = CAIYUN_API):
        self.token = token
        self.timeout = timeout
        self.api_url = api_url

    def language_code(self, language: str) -> Optional[str]:
        code = iso_code(language)
        return code if code in SUPPORTED_CODES else None

    def build_request(self, texts: List[str], target_code: str, options: RequestOptions) -> Dict[str, Any]:
        return {
            'source': [t if t else ' ' for t in texts],
            'trans_type': f'auto2{target_code}',
            'request_id': REQUEST_ID,
            'detect': True,
        }

    def send(self, request: Dict[str, Any]) -> requests.Response:
        if not self.token:
            raise ProviderAuthFailure("CAIYUN_TOKEN not set. Add to .env file.", api_name=self.name)

        headers = {
            'content-type': 'application/json',
            'x-authorization': f'token {self.token}'
        }
        try:
            response = requests.post(self.api_url, json=request, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderNetworkError(f"Caiyun request failed: {e}", api_name=self.name, cause=e)

        status = response.status_code
        if status == 429:
            raise ProviderRateLimited("Caiyun rate limit", api_name=self.name, status_code=status,
                                      response=response.text)
        if status in (401, 403):
            raise ProviderAuthFailure("Caiyun rejected the token", api_name=self.name, status_code=status,
                                      response=response.text)
        if not 200 <= status < 300:
            raise ProviderError(f"Caiyun HTTP {status}", api_name=self.name, status_code=status,
                                response=response.text)
        return response

    def parse_response(self, response: requests.Response) -> List[str]:
        try:
            result = response.json()
        except ValueError as e:
            raise ProviderBadResponse("Caiyun response is not JSON", api_name=self.name,
                                      response=response.text, cause=e)
        if not isinstance(result, dict) or 'target' not in result:
            raise ProviderBadResponse("Caiyun response has no 'target'", api_name=self.name,
                                      response=response.text)
        return list(result['target'])

    def check_connection(self) -> bool:
        """Translate a probe word."""
        try:
            self.translate_texts(["hello"], "zh")
        except ProviderError as e:
            logger.error(f"Caiyun connection failed: {e}", extra={"provider": self.name})
            return False
        logger.info("Caiyun connection ok", extra={"provider": self.name})
        return True
