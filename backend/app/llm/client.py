"""Thin async wrapper around the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel

from backend.app.config import get_openai_api_key, get_settings

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
ToolHandler = Callable[[dict[str, Any]], Awaitable[str]]


def as_tool(function: dict[str, Any]) -> dict[str, Any]:
    """Wrap a function schema in the chat completions ``tools`` envelope."""
    return {"type": "function", "function": function}


def _parse_arguments(raw: str | None) -> dict[str, Any]:
    try:
        parsed = json.loads(raw or "{}")
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


class LLMClient:
    """Language model calls used by the trip flow.

    The underlying ``AsyncOpenAI`` client is created on first use so the app
    starts without an API key; calls then raise ``MissingOpenAIKeyError``.
    """

    def __init__(self, client: AsyncOpenAI | None = None, model: str | None = None):
        self._client = client
        self.model = model or get_settings().openai_model

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=get_openai_api_key())
        return self._client

    async def call_tool(
        self,
        messages: list[dict[str, Any]],
        function: dict[str, Any],
        *,
        temperature: float = 0.0,
        max_tokens: int | None = None,
    ) -> dict[str, Any] | None:
        """Offer one tool to the model and return its arguments if it calls it.

        Args:
            messages: Chat messages (system first)
            function: Function schema with name, description and parameters
            temperature: Sampling temperature
            max_tokens: Optional completion token cap

        Returns:
            Parsed arguments of the first matching tool call, or None when the
            model answers without calling the tool
        """
        response = await self._get_client().chat.completions.create(
            model=self.model,
            messages=messages,
            tools=[as_tool(function)],
            tool_choice="auto",
            temperature=temperature,
            max_tokens=max_tokens,
        )
        message = response.choices[0].message
        for tool_call in message.tool_calls or []:
            if tool_call.function.name == function["name"]:
                return _parse_arguments(tool_call.function.arguments)
        return None

    async def generate_json(
        self,
        system: str,
        prompt: str,
        schema: type[ModelT],
        *,
        temperature: float = 0.2,
        max_tokens: int | None = None,
    ) -> ModelT:
        """Ask for a JSON object and validate it against ``schema``.

        Raises:
            pydantic.ValidationError: If the model's JSON does not fit the schema
        """
        schema_hint = json.dumps(schema.model_json_schema())
        response = await self._get_client().chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "system",
                    "content": f"{system}\nRespond with a JSON object matching this schema: {schema_hint}",
                },
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            temperature=temperature,
            max_tokens=max_tokens,
        )
        content = response.choices[0].message.content or "{}"
        return schema.model_validate_json(content)

    async def generate_text(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.2,
        max_tokens: int | None = None,
    ) -> str:
        """Return a single text completion."""
        messages: list[dict[str, Any]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        response = await self._get_client().chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return (response.choices[0].message.content or "").strip()

    async def stream_text(
        self, prompt: str, *, temperature: float = 0.2
    ) -> AsyncIterator[str]:
        """Yield text deltas of a completion as they arrive."""
        stream = await self._get_client().chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            stream=True,
        )
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta

    async def run_tools(
        self,
        messages: list[dict[str, Any]],
        functions: list[dict[str, Any]],
        handlers: dict[str, ToolHandler],
        *,
        temperature: float = 0.2,
        max_tokens: int | None = None,
        max_rounds: int = 3,
    ) -> str:
        """Let the model call tools, feed results back, and return its final text.

        Each round executes every tool call in the model's reply; the loop ends
        when the model replies without tool calls or after ``max_rounds``.
        """
        conversation = list(messages)
        tools = [as_tool(f) for f in functions]
        content = ""

        for _ in range(max_rounds):
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=conversation,
                tools=tools,
                tool_choice="auto",
                temperature=temperature,
                max_tokens=max_tokens,
            )
            message = response.choices[0].message
            content = message.content or ""
            tool_calls = message.tool_calls or []
            if not tool_calls:
                return content

            conversation.append(
                {
                    "role": "assistant",
                    "content": message.content,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {
                                "name": call.function.name,
                                "arguments": call.function.arguments,
                            },
                        }
                        for call in tool_calls
                    ],
                }
            )
            for call in tool_calls:
                handler = handlers.get(call.function.name)
                if handler is None:
                    result = f"Unknown tool: {call.function.name}"
                else:
                    result = await handler(_parse_arguments(call.function.arguments))
                logger.info("Tool %s returned %d chars", call.function.name, len(result))
                conversation.append(
                    {"role": "tool", "tool_call_id": call.id, "content": result}
                )

        return content


_llm: LLMClient | None = None


def get_llm() -> LLMClient:
    """FastAPI dependency returning the shared LLM client."""
    global _llm
    if _llm is None:
        _llm = LLMClient()
    return _llm
