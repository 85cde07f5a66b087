from types import SimpleNamespace

import pytest

from wanderlust.services.reasoning import OpenAIReasoningService, ReasoningServiceError


class StubCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def stub_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.mark.asyncio
async def test_complete_returns_stripped_text():
    completions = StubCompletions(content="  [1, 2, 3]\n")
    service = OpenAIReasoningService(model="test-model", client=stub_client(completions))

    assert await service.complete("pick three") == "[1, 2, 3]"
    assert completions.calls[0]["model"] == "test-model"
    assert completions.calls[0]["messages"] == [{"role": "user", "content": "pick three"}]


@pytest.mark.asyncio
async def test_provider_error_is_wrapped():
    completions = StubCompletions(error=RuntimeError("503 from upstream"))
    service = OpenAIReasoningService(client=stub_client(completions))
    with pytest.raises(ReasoningServiceError, match="503"):
        await service.complete("hello")


@pytest.mark.asyncio
async def test_empty_completion_is_an_error():
    service = OpenAIReasoningService(client=stub_client(StubCompletions(content="")))
    with pytest.raises(ReasoningServiceError):
        await service.complete("hello")


@pytest.mark.asyncio
async def test_unconfigured_service_raises():
    service = OpenAIReasoningService(api_key=None)
    with pytest.raises(ReasoningServiceError, match="not configured"):
        await service.complete("hello")
