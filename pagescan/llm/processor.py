"""Text processor backed by a PydanticAI agent."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from pydantic_ai import Agent

from pagescan.llm.prompts import CONTENT_EXTRACTOR_PROMPT
from pagescan.parser.errors import TextProcessorError

if TYPE_CHECKING:
    from pagescan.config import Settings

logger = logging.getLogger(__name__)


class TextProcessor(Protocol):
    """Protocol for text processors: sanitized text in, JSON text out."""

    async def process_text(self, text: str) -> str: ...


class LlmTextProcessor:
    """Sends sanitized page text to the configured model and returns its JSON answer.

    Provider credentials (``OPENAI_API_KEY``, ``ANTHROPIC_API_KEY``, ...) are read
    from the environment by PydanticAI itself.
    """

    def __init__(self, settings: Settings) -> None:
        self._model = f"{settings.llm_provider}:{settings.llm_model}"
        self._model_settings = {
            "temperature": settings.llm_temperature,
            "top_p": settings.llm_top_p,
        }

    @property
    def model(self) -> str:
        return self._model

    async def process_text(self, text: str) -> str:
        logger.info("processing text with llm", extra={"model": self._model, "text_length": len(text)})
        try:
            agent = Agent(
                self._model,
                system_prompt=CONTENT_EXTRACTOR_PROMPT,
                model_settings=self._model_settings,
            )
            result = await agent.run(text)
        except Exception as exc:
            raise TextProcessorError(f"text processor call to {self._model} failed: {exc}") from exc

        usage = result.usage()
        logger.info(
            "llm response received",
            extra={
                "model": self._model,
                "input_tokens": usage.input_tokens or 0,
                "output_tokens": usage.output_tokens or 0,
                "output_length": len(result.output),
            },
        )
        return result.output
