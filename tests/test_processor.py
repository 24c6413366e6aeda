"""LLM text processor tests with a mocked PydanticAI agent."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pagescan.config import Settings
from pagescan.llm.processor import LlmTextProcessor
from pagescan.llm.prompts import CONTENT_EXTRACTOR_PROMPT
from pagescan.parser.errors import TextProcessorError


def _mock_agent_result(output: str, input_tokens: int = 10, output_tokens: int = 20):
    usage = MagicMock()
    usage.input_tokens = input_tokens
    usage.output_tokens = output_tokens
    result = MagicMock()
    result.output = output
    result.usage = MagicMock(return_value=usage)
    return result


@pytest.fixture
def llm_settings() -> Settings:
    return Settings(api_key="k", llm_provider="anthropic", llm_model="claude-test", llm_temperature=0.2)  # type: ignore[call-arg]


def test_model_name_combines_provider_and_model(llm_settings: Settings):
    assert LlmTextProcessor(llm_settings).model == "anthropic:claude-test"


@pytest.mark.asyncio
@patch("pagescan.llm.processor.Agent")
async def test_process_text_returns_output(mock_agent_cls, llm_settings: Settings):
    mock_agent = AsyncMock()
    mock_agent.run = AsyncMock(return_value=_mock_agent_result('{"title": "t", "sections": []}'))
    mock_agent_cls.return_value = mock_agent

    output = await LlmTextProcessor(llm_settings).process_text("Hello\n[IMAGE:image_a.jpg]\n")

    assert output == '{"title": "t", "sections": []}'
    mock_agent.run.assert_awaited_once_with("Hello\n[IMAGE:image_a.jpg]\n")
    args, kwargs = mock_agent_cls.call_args
    assert args == ("anthropic:claude-test",)
    assert kwargs["system_prompt"] == CONTENT_EXTRACTOR_PROMPT
    assert kwargs["model_settings"] == {"temperature": 0.2, "top_p": 1.0}


@pytest.mark.asyncio
@patch("pagescan.llm.processor.Agent")
async def test_process_text_wraps_failures(mock_agent_cls, llm_settings: Settings):
    mock_agent = AsyncMock()
    mock_agent.run = AsyncMock(side_effect=RuntimeError("rate limited"))
    mock_agent_cls.return_value = mock_agent

    with pytest.raises(TextProcessorError) as exc_info:
        await LlmTextProcessor(llm_settings).process_text("text")

    assert "rate limited" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_prompt_mentions_markers_and_shape():
    assert "[IMAGE: <filename>]" in CONTENT_EXTRACTOR_PROMPT
    assert "[TABLE: <filename>]" in CONTENT_EXTRACTOR_PROMPT
    assert '"sections"' in CONTENT_EXTRACTOR_PROMPT
