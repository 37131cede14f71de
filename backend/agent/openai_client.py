from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence

import openai
from openai import OpenAI

from agent.messages import AssistantFunctionCallMessage, AssistantTextMessage, Message, Reply

logger = logging.getLogger(__name__)


class ProviderFailure(RuntimeError):
    """The completion provider failed (auth, rate limit, timeout, malformed reply)."""


class CompletionGateway:
    """
    One request/response exchange with the OpenAI chat completions API.
    The model picks between plain text and a function call (function_call="auto").
    """
    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 30.0,
                 client: Optional[Any] = None):
        self.model = model
        self.timeout = timeout
        self.client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=1)

    def complete(self, transcript: Sequence[Message], functions: List[Dict[str, Any]]) -> Reply:
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=[m.to_openai() for m in transcript],
                functions=functions,
                function_call="auto",
                timeout=self.timeout,
            )
        except openai.OpenAIError as e:
            raise ProviderFailure(f"{type(e).__name__}: {e}") from e

        choices = getattr(resp, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        if message is None:
            raise ProviderFailure("Completion provider returned no message")

        fc = getattr(message, "function_call", None)
        if fc is not None and getattr(fc, "name", None):
            return AssistantFunctionCallMessage(
                name=fc.name,
                arguments=fc.arguments or "{}",
                content=message.content,
            )
        return AssistantTextMessage(content=message.content or "")
