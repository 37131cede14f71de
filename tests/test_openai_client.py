from types import SimpleNamespace

import openai
import pytest

from agent.messages import (
    AssistantFunctionCallMessage, AssistantTextMessage, FunctionResultMessage, UserMessage,
)
from agent.openai_client import CompletionGateway, ProviderFailure
from agent.tools import FUNCTION_DECLARATIONS
from fakes import openai_reply


class FakeCompletions:
    def __init__(self, outcome):
        self.outcome = outcome
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _gateway(outcome):
    completions = FakeCompletions(outcome)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return CompletionGateway(api_key="sk-test", model="gpt-test", timeout=7, client=client), completions


def test_sends_transcript_functions_and_auto_mode():
    gw, completions = _gateway(openai_reply(content="hi"))
    transcript = [
        UserMessage("I am looking for a phone"),
        AssistantFunctionCallMessage(name="searchProducts", arguments='{"query":"phone"}'),
        FunctionResultMessage(name="searchProducts", content="1. **iPhone 12**"),
    ]
    gw.complete(transcript, FUNCTION_DECLARATIONS)

    kw = completions.kwargs
    assert kw["model"] == "gpt-test"
    assert kw["function_call"] == "auto"
    assert kw["functions"] is FUNCTION_DECLARATIONS
    assert kw["timeout"] == 7
    assert kw["messages"] == [
        {"role": "user", "content": "I am looking for a phone"},
        {"role": "assistant", "content": None,
         "function_call": {"name": "searchProducts", "arguments": '{"query":"phone"}'}},
        {"role": "function", "name": "searchProducts", "content": "1. **iPhone 12**"},
    ]


def test_plain_text_reply():
    gw, _ = _gateway(openai_reply(content="Hello there"))
    assert gw.complete([UserMessage("hi")], FUNCTION_DECLARATIONS) == AssistantTextMessage("Hello there")


def test_empty_text_reply_is_empty_string():
    gw, _ = _gateway(openai_reply(content=None))
    assert gw.complete([UserMessage("hi")], []) == AssistantTextMessage("")


def test_function_call_reply():
    fc = SimpleNamespace(name="convertCurrencies", arguments='{"amount": 1}')
    gw, _ = _gateway(openai_reply(function_call=fc))
    reply = gw.complete([UserMessage("1 EUR in USD?")], FUNCTION_DECLARATIONS)
    assert reply == AssistantFunctionCallMessage(name="convertCurrencies", arguments='{"amount": 1}')


def test_function_call_without_arguments_defaults_to_empty_object():
    gw, _ = _gateway(openai_reply(function_call=SimpleNamespace(name="searchProducts", arguments=None)))
    assert gw.complete([UserMessage("x")], []).arguments == "{}"


def test_provider_error_is_wrapped():
    gw, _ = _gateway(openai.OpenAIError("rate limited"))
    with pytest.raises(ProviderFailure, match="rate limited"):
        gw.complete([UserMessage("hi")], [])


def test_response_without_choices_is_a_failure():
    gw, _ = _gateway(SimpleNamespace(choices=[]))
    with pytest.raises(ProviderFailure):
        gw.complete([UserMessage("hi")], [])
