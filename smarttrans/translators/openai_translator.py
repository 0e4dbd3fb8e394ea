"""
OpenAI GPT provider.

Supports: GPT-4o, GPT-4o-mini, GPT-4.1, GPT-4.1-mini

The whole batch is sent as one JSON array and the model answers with a JSON
object, so one request still maps 1:1 onto the input list.

Usage:
    from smarttrans.translators.openai_translator import OpenAIProvider

    provider = OpenAIProvider(api_key=os.environ["OPENAI_API_KEY"])
    provider.translate_texts(["Hello"], "German")
"""
import json
import re
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from .base import RequestOptions, TranslationProvider
from .prompts import build_batch_prompt, build_system_prompt
from ..utils.config import OPENAI_MODEL
from ..utils.exceptions import (
    ProviderAuthFailure,
    ProviderBadResponse,
    ProviderError,
    ProviderNetworkError,
    ProviderRateLimited,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)

CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


class OpenAIProvider(TranslationProvider):
    """Chat-completions translation with JSON output."""

    name = "openai"

    def __init__(
        self,
        api_key: str = "",
        model: str = OPENAI_MODEL,
        timeout: float = 30.0,
        temperature: float = 0.3,
        client: Optional[OpenAI] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self._client = client

    def get_client(self) -> OpenAI:
        """Get OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise ProviderAuthFailure("OPENAI_API_KEY not set. Add to .env file.", api_name=self.name)
            # Retries belong to TranslationClient
            self._client = OpenAI(api_key=self.api_key, max_retries=0, timeout=self.timeout)
        return self._client

    def language_code(self, language: str) -> Optional[str]:
        # The model takes the display name itself
        language = language.strip()
        return language or None

    def build_request(self, texts: List[str], target_code: str, options: RequestOptions) -> Dict[str, Any]:
        return {
            'model': self.model,
            'messages': [
                {"role": "system", "content": build_system_prompt(target_code)},
                {"role": "user", "content": build_batch_prompt(texts, target_code, options.context)},
            ],
            'temperature': self.temperature,
            'response_format': {"type": "json_object"},
        }

    def send(self, request: Dict[str, Any]) -> Any:
        client = self.get_client()
        try:
            return client.chat.completions.create(**request)
        except openai.RateLimitError as e:
            raise ProviderRateLimited(str(e), api_name=self.name, status_code=e.status_code, cause=e)
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise ProviderAuthFailure(str(e), api_name=self.name, status_code=e.status_code, cause=e)
        except openai.APIConnectionError as e:
            raise ProviderNetworkError(str(e), api_name=self.name, cause=e)
        except openai.APIStatusError as e:
            raise ProviderError(f"API error {e.status_code}: {e.message}", api_name=self.name,
                                status_code=e.status_code, cause=e)

    def parse_response(self, response: Any) -> List[str]:
        try:
            content = response.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            raise ProviderBadResponse("No content in OpenAI response", api_name=self.name, cause=e)

        content = CODE_FENCE_RE.sub("", content.strip())
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ProviderBadResponse("OpenAI response is not JSON", api_name=self.name,
                                      response=content, cause=e)

        translations = data.get("translations") if isinstance(data, dict) else data
        if not isinstance(translations, list) or not all(isinstance(t, str) for t in translations):
            raise ProviderBadResponse("OpenAI response has no translations list", api_name=self.name,
                                      response=content)
        return translations

    def check_connection(self) -> bool:
        """Check the key by listing models."""
        try:
            self.get_client().models.list()
        except (openai.OpenAIError, ProviderAuthFailure) as e:
            logger.error(f"OpenAI connection failed: {e}", extra={"provider": self.name})
            return False
        logger.info(f"OpenAI connection ok, model: {self.model}", extra={"provider": self.name})
        return True
