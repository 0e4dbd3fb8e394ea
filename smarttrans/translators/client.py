"""
Batch translation client.

Submits one batch per call to a TranslationProvider, retrying only when the
provider reports rate limiting. Every other failure fails the batch at once.

Usage:
    from smarttrans.translators import TranslationClient, TranslationUnit, create_provider

    client = TranslationClient(create_provider(config))
    units = [TranslationUnit("Hello", "DE"), TranslationUnit("World", "DE")]
    translations = await client.translate_batch(units, "DE")   # None on failure
"""
import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

from .base import Batch, RequestOptions, TranslationProvider, TranslationUnit
from ..utils.config import DEFAULT_MAX_BATCH_SIZE, DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY
from ..utils.exceptions import ProviderError, ProviderRateLimited
from ..utils.logger import get_logger

logger = get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class TranslationClient:
    """
    Async front end for a provider.

    Args:
        provider: Backend that performs the blocking request.
        max_retries: Retries after the first rate-limited attempt.
        initial_delay: Seconds before the first retry, doubled each retry.
        max_batch_size: Largest batch a caller may submit.
        formal: Ask for formal register where the provider supports it.
        preserve_formatting: Passed through to the provider.
        sleep: Awaitable used for backoff.
    """

    def __init__(
        self,
        provider: TranslationProvider,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay: float = DEFAULT_RETRY_DELAY,
        max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
        formal: bool = False,
        preserve_formatting: bool = True,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.provider = provider
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.max_batch_size = max_batch_size
        self.formal = formal
        self.preserve_formatting = preserve_formatting
        self._sleep = sleep

    def _options(self, batch: Batch) -> RequestOptions:
        return RequestOptions(
            context=batch.context,
            formal=self.formal,
            preserve_formatting=self.preserve_formatting,
        )

    async def translate_batch(self, units: Sequence[TranslationUnit], target_code: str) -> Optional[List[str]]:
        """
        Translate one batch.

        Returns:
            Translations in input order, or None if the batch failed.

        Raises:
            ValueError: If the batch is larger than max_batch_size.
        """
        if len(units) > self.max_batch_size:
            raise ValueError(f"Batch of {len(units)} exceeds max batch size {self.max_batch_size}")
        if not units:
            return []

        batch = Batch(units=list(units), target_code=target_code, next_delay=self.initial_delay)
        log_extra = {"provider": self.provider.name, "target_code": target_code, "batch_size": len(units)}

        while batch.attempt <= self.max_retries:
            batch.attempt += 1
            logger.info(
                f"Sending {len(units)} text(s) to {self.provider.name} ({target_code}), attempt {batch.attempt}",
                extra={**log_extra, "attempt": batch.attempt},
            )
            try:
                translations = await asyncio.to_thread(
                    self.provider.translate_texts, batch.texts, target_code, self._options(batch)
                )
            except ProviderRateLimited as e:
                if batch.attempt > self.max_retries:
                    logger.error(
                        f"Rate limited, giving up after {self.max_retries} retries: {e}",
                        extra={**log_extra, "attempt": batch.attempt, "status_code": e.status_code},
                    )
                    return None
                logger.warning(
                    f"Rate limited, retrying in {batch.next_delay:g}s",
                    extra={**log_extra, "attempt": batch.attempt, "delay": batch.next_delay},
                )
                await self._sleep(batch.next_delay)
                batch.next_delay *= 2
                continue
            except ProviderError as e:
                logger.error(
                    f"Batch failed: {e}",
                    extra={**log_extra, "attempt": batch.attempt, "status_code": e.status_code},
                )
                return None
            except Exception as e:
                logger.error(f"Unexpected error: {e}", exc_info=True, extra=log_extra)
                return None

            logger.info(f"Received {len(translations)} translation(s)", extra=log_extra)
            return translations

        return None

    def translate_batch_sync(self, units: Sequence[TranslationUnit], target_code: str) -> Optional[List[str]]:
        """Blocking wrapper for callers without an event loop."""
        return asyncio.run(self.translate_batch(units, target_code))
