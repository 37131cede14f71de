from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class UserMessage:
    content: str

    def to_openai(self) -> Dict[str, Any]:
        return {"role": "user", "content": self.content}


@dataclass(frozen=True)
class AssistantTextMessage:
    content: str

    def to_openai(self) -> Dict[str, Any]:
        return {"role": "assistant", "content": self.content}


@dataclass(frozen=True)
class AssistantFunctionCallMessage:
    name: str
    arguments: str = "{}"
    content: Optional[str] = None  # some models talk before calling a function

    def to_openai(self) -> Dict[str, Any]:
        return {
            "role": "assistant",
            "content": self.content,
            "function_call": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class FunctionResultMessage:
    name: str
    content: str

    def to_openai(self) -> Dict[str, Any]:
        return {"role": "function", "name": self.name, "content": self.content}


Message = Union[UserMessage, AssistantTextMessage, AssistantFunctionCallMessage, FunctionResultMessage]
Reply = Union[AssistantTextMessage, AssistantFunctionCallMessage]
