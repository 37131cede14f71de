from __future__ import annotations
import asyncio, logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from agent.messages import (
    AssistantFunctionCallMessage, AssistantTextMessage, FunctionResultMessage, Message, UserMessage,
)
from agent.openai_client import CompletionGateway
from agent.tools import FUNCTION_DECLARATIONS, ToolDispatcher

logger = logging.getLogger(__name__)

NO_FINAL_RESPONSE = "[No final response]"
DEFAULT_MAX_STEPS = 5


class OrchestratorState(Enum):
    AWAITING_REPLY = "awaiting_reply"
    DISPATCHING_FUNCTION = "dispatching_function"
    DONE = "done"


@dataclass
class QueryOutcome:
    reply: str
    transcript: List[Message] = field(default_factory=list)
    steps: int = 0


class QueryOrchestrator:
    """
    Agentic loop using OpenAI function calling:
    - the model either answers in text or asks for one function call
    - we run that function and feed the result back, at most max_steps times
    - past the limit we stop and return whatever text the model gave us
    Provider failures propagate; tool failures come back as text.
    """
    def __init__(self, gateway: CompletionGateway, dispatcher: ToolDispatcher,
                 max_steps: int = DEFAULT_MAX_STEPS):
        self.gateway = gateway
        self.dispatcher = dispatcher
        self.max_steps = max_steps

    async def answer(self, query: str) -> QueryOutcome:
        transcript: List[Message] = [UserMessage(content=query)]
        state = OrchestratorState.AWAITING_REPLY
        pending: Optional[AssistantFunctionCallMessage] = None
        last_text: Optional[str] = None
        output = NO_FINAL_RESPONSE
        steps = 0

        while state is not OrchestratorState.DONE:
            if state is OrchestratorState.AWAITING_REPLY:
                reply = await asyncio.to_thread(self.gateway.complete, list(transcript), FUNCTION_DECLARATIONS)

                if isinstance(reply, AssistantTextMessage):
                    output = reply.content or NO_FINAL_RESPONSE
                    state = OrchestratorState.DONE
                elif steps >= self.max_steps:
                    logger.warning("Function call limit (%d) reached; stopping at %s", self.max_steps, reply.name)
                    output = reply.content or last_text or NO_FINAL_RESPONSE
                    state = OrchestratorState.DONE
                else:
                    if reply.content:
                        last_text = reply.content
                    transcript.append(reply)
                    pending = reply
                    state = OrchestratorState.DISPATCHING_FUNCTION

            elif state is OrchestratorState.DISPATCHING_FUNCTION:
                result = await asyncio.to_thread(self.dispatcher.dispatch, pending.name, pending.arguments)
                transcript.append(FunctionResultMessage(name=pending.name, content=result))
                pending = None
                steps += 1
                state = OrchestratorState.AWAITING_REPLY

        return QueryOutcome(reply=output, transcript=transcript, steps=steps)
