"""Text generation service - routes suggestion flows to a local model or Claude."""

import asyncio
import json
from datetime import datetime, time as time_type
from pathlib import Path
from typing import Callable, Optional, Type, TypeVar

import anthropic
import httpx
import structlog
from pydantic import BaseModel, ValidationError

from followup_flow.config import settings
from followup_flow.errors import GenerationFailure
from followup_flow.schemas.common import utcnow
from followup_flow.schemas.suggestions import (
    ColorCodeInput, ColorCodeResult,
    MessageSuggestionInput, MessageSuggestion,
    ScheduleSuggestionInput, ScheduleSuggestion,
    ToolSuggestionInput, ToolSuggestions,
)

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)

# Check multiple paths: local dev path and Docker mount path
_PROMPTS_CANDIDATES = [
    Path(__file__).parent.parent.parent.parent / "prompts",  # Local dev
    Path("/prompts"),  # Docker mount
]
PROMPTS_DIR = next((p for p in _PROMPTS_CANDIDATES if p.exists()), _PROMPTS_CANDIDATES[0])


def load_prompt_template(template_id: str) -> str:
    """Load a prompt template by ID (filename without extension)."""
    path = PROMPTS_DIR / f"{template_id}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {template_id} (searched {PROMPTS_DIR})")
    return path.read_text(encoding="utf-8")


def extract_json(content: str) -> dict:
    """Pull the outermost JSON object out of a model response."""
    if not isinstance(content, str) or "{" not in content or "}" not in content:
        raise GenerationFailure("Model response contained no JSON object")
    json_str = content[content.index("{"):content.rindex("}") + 1]
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise GenerationFailure(f"Model response was not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise GenerationFailure("Model response JSON was not an object")
    return data


class TextGenerator:
    """Produces structured suggestions for prospects from prompt templates."""

    # Lightweight tasks suitable for the local model
    LOCAL_TASKS = {"color_code"}
    # Tasks requiring Claude
    CLAUDE_TASKS = {"suggest_message", "schedule_follow_up", "suggest_tools"}

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._anthropic_key = api_key if api_key is not None else settings.anthropic_api_key
        self.timeout = timeout if timeout is not None else settings.generation_timeout_seconds
        self.clock = clock

    @property
    def is_configured(self) -> bool:
        return bool(self._anthropic_key) or settings.local_model_enabled

    async def call_local_model(self, prompt: str, task_type: str) -> str:
        """Call the local model (llama.cpp server)."""
        if not settings.local_model_enabled:
            return await self._local_model_fallback(prompt, task_type)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    settings.local_model_url,
                    json={
                        "prompt": prompt,
                        "n_predict": 256,
                        "temperature": 0.1,
                        "stop": ["</output>", "\n\n---"],
                    },
                )
                resp.raise_for_status()
                data = resp.json()
            if not isinstance(data, dict):
                raise ValueError("local model response was not a JSON object")
            return data.get("content", data.get("text", ""))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("local_model_call_failed", error=str(e), task_type=task_type)
            return await self._local_model_fallback(prompt, task_type)

    async def _local_model_fallback(self, prompt: str, task_type: str) -> str:
        """Fallback when the local model is unavailable - use the fast Claude model."""
        return await self.call_claude(
            prompt,
            task_type=task_type,
            model=settings.claude_fast_model,
            max_tokens=256,
        )

    async def call_claude(
        self,
        prompt: str,
        task_type: str,
        system_prompt: str = "",
        model: Optional[str] = None,
        max_tokens: int = 1024,
    ) -> str:
        """Call Claude API and return the text content."""
        if not self._anthropic_key:
            raise GenerationFailure("No Anthropic API key configured", task_type=task_type)

        client = anthropic.AsyncAnthropic(api_key=self._anthropic_key)
        kwargs = {
            "model": model or settings.claude_model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            kwargs["system"] = system_prompt

        response = await client.messages.create(**kwargs)
        logger.info(
            "claude_call_completed",
            task_type=task_type,
            model=kwargs["model"],
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        if not response.content or not hasattr(response.content[0], "text"):
            raise GenerationFailure("Claude returned no text content", task_type=task_type)
        return response.content[0].text

    async def route(
        self,
        task_type: str,
        template_id: str,
        template_vars: dict,
        system_prompt: str = "",
        max_tokens: int = 1024,
    ) -> str:
        """Render a template and send it to the model for this task type.

        Bounded by the generation timeout. Any transport failure or timeout
        surfaces as GenerationFailure.
        """
        prompt = load_prompt_template(template_id).format(**template_vars)

        if task_type in self.LOCAL_TASKS:
            call = self.call_local_model(prompt, task_type)
        else:
            call = self.call_claude(prompt, task_type, system_prompt=system_prompt, max_tokens=max_tokens)

        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise GenerationFailure(f"{task_type} timed out after {self.timeout}s", task_type=task_type) from e
        except (anthropic.APIError, httpx.HTTPError) as e:
            raise GenerationFailure(f"{task_type} call failed: {e}", task_type=task_type) from e

    async def _generate(
        self,
        task_type: str,
        template_id: str,
        template_vars: dict,
        output_model: Type[T],
        system_prompt: str = "",
        max_tokens: int = 1024,
    ) -> T:
        content = await self.route(task_type, template_id, template_vars, system_prompt, max_tokens)
        data = extract_json(content)
        try:
            return output_model.model_validate(data)
        except ValidationError as e:
            raise GenerationFailure(
                f"{task_type} output failed validation: {e.error_count()} errors", task_type=task_type
            ) from e

    async def color_code(self, request: ColorCodeInput) -> ColorCodeResult:
        return await self._generate(
            "color_code", "color_code_v1", request.model_dump(), ColorCodeResult, max_tokens=256,
        )

    async def suggest_message(self, request: MessageSuggestionInput) -> MessageSuggestion:
        template_vars = request.model_dump()
        template_vars["prospect_objections"] = request.prospect_objections or "None provided"
        return await self._generate(
            "suggest_message", "suggest_message_v1", template_vars, MessageSuggestion, max_tokens=768,
        )

    async def schedule_follow_up(self, request: ScheduleSuggestionInput) -> ScheduleSuggestion:
        """Suggest a follow-up schedule; slots not strictly in the future are dropped."""
        template_vars = request.model_dump()
        template_vars["current_date"] = request.current_date.isoformat()
        result = await self._generate(
            "schedule_follow_up", "schedule_follow_up_v1", template_vars, ScheduleSuggestion,
        )

        now = self.clock()
        future = [
            slot for slot in result.follow_up_schedule
            if datetime.combine(slot.date, time_type.fromisoformat(slot.time)) > now
        ]
        if len(future) != len(result.follow_up_schedule):
            logger.warning(
                "schedule_past_slots_dropped",
                dropped=len(result.follow_up_schedule) - len(future),
                kept=len(future),
            )
        return ScheduleSuggestion(follow_up_schedule=future, reasoning=result.reasoning)

    async def suggest_tools(self, request: ToolSuggestionInput) -> ToolSuggestions:
        return await self._generate(
            "suggest_tools", "suggest_tools_v1", request.model_dump(), ToolSuggestions, max_tokens=1024,
        )
