"""LLM service for ClimateSense.

Provides LangChain/OpenAI integration for the design service.
"""

import json
from typing import Dict, Any, Optional, List
import structlog
from langchain_openai import ChatOpenAI
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from config.settings import settings
from config.errors import ClimateSenseError, ErrorCode

logger = structlog.get_logger()


def strip_code_fences(content: str) -> str:
    """Remove a surrounding markdown code block from model output."""
    content = content.strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


class LLMService:
    """Service for LLM operations using LangChain.

    Provides a wrapper around ChatOpenAI with token tracking
    and error handling.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None
    ):
        """Initialize LLMService.

        Args:
            model: Model name (default from settings).
            temperature: Temperature (default from settings).
            api_key: OpenAI API key (default from settings).
            base_url: OpenAI-compatible endpoint (default from settings).
        """
        self.model = model or settings.llm_model
        self.temperature = temperature if temperature is not None else settings.llm_temperature
        self.api_key = api_key or settings.openai_api_key
        self.base_url = base_url or settings.llm_base_url

        self._client: Optional[ChatOpenAI] = None
        self._total_tokens_used = 0

    @property
    def client(self) -> ChatOpenAI:
        """Get LangChain ChatOpenAI client (lazy initialization)."""
        if self._client is None:
            self._client = ChatOpenAI(
                model=self.model,
                temperature=self.temperature,
                api_key=self.api_key,
                base_url=self.base_url
            )
        return self._client

    @property
    def total_tokens_used(self) -> int:
        """Get total tokens used across all calls."""
        return self._total_tokens_used

    async def generate(
        self,
        messages: List[BaseMessage],
        max_tokens: Optional[int] = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Generate a response from the LLM.

        Args:
            messages: List of LangChain messages.
            max_tokens: Optional max tokens for response.
            response_format: Optional provider response format (JSON schema).

        Returns:
            Dict with content and token usage.

        Raises:
            ClimateSenseError: If LLM call fails.
        """
        try:
            kwargs = {}
            if max_tokens:
                kwargs["max_tokens"] = max_tokens
            if response_format:
                kwargs["response_format"] = response_format

            response = await self.client.ainvoke(messages, **kwargs)

            # Track token usage if available
            tokens_used = 0
            if hasattr(response, "response_metadata"):
                usage = response.response_metadata.get("token_usage", {})
                tokens_used = usage.get("total_tokens", 0)
                self._total_tokens_used += tokens_used

            logger.info(
                "llm_generated",
                model=self.model,
                tokens_used=tokens_used,
                content_length=len(response.content)
            )

            return {
                "content": response.content,
                "tokens_used": tokens_used
            }

        except Exception as e:
            error_msg = str(e)

            # Detect specific error types
            if "rate_limit" in error_msg.lower():
                raise ClimateSenseError(
                    code=ErrorCode.LLM_RATE_LIMIT,
                    message="LLM rate limit exceeded",
                    details={"original_error": error_msg}
                ) from e
            elif "context_length" in error_msg.lower() or "maximum context" in error_msg.lower():
                raise ClimateSenseError(
                    code=ErrorCode.LLM_CONTEXT_TOO_LONG,
                    message="Input too long for model context",
                    details={"original_error": error_msg}
                ) from e
            else:
                raise ClimateSenseError(
                    code=ErrorCode.LLM_ERROR,
                    message=f"LLM generation failed: {error_msg}",
                    details={"original_error": error_msg}
                ) from e

    async def generate_with_system_prompt(
        self,
        system_prompt: str,
        user_message: str,
        max_tokens: Optional[int] = None,
        response_format: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Generate a response with system prompt.

        Args:
            system_prompt: System prompt for context.
            user_message: User message/query.
            max_tokens: Optional max tokens for response.
            response_format: Optional provider response format.

        Returns:
            Dict with content and token usage.
        """
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_message)
        ]
        return await self.generate(messages, max_tokens, response_format)

    async def generate_json(
        self,
        system_prompt: str,
        user_message: str,
        schema: Optional[Dict[str, Any]] = None,
        schema_name: str = "response",
        max_tokens: Optional[int] = None
    ) -> Dict[str, Any]:
        """Generate a JSON response.

        Adds JSON formatting instructions (and the target schema, when given)
        to the system prompt and requests schema-constrained output.

        Args:
            system_prompt: System prompt for context.
            user_message: User message/query.
            schema: Optional JSON schema the response must follow.
            schema_name: Name reported to the provider for the schema.
            max_tokens: Optional max tokens for response.

        Returns:
            Dict with parsed JSON content and token usage.

        Raises:
            ClimateSenseError: If response is not valid JSON.
        """
        json_prompt = f"""{system_prompt}

IMPORTANT: You MUST respond with valid JSON only. No markdown, no explanation, just JSON."""

        response_format = None
        if schema is not None:
            json_prompt += f"""

The JSON MUST conform to this schema:
{json.dumps(schema)}"""
            response_format = {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": schema},
            }

        result = await self.generate_with_system_prompt(
            json_prompt,
            user_message,
            max_tokens,
            response_format
        )

        try:
            parsed = json.loads(strip_code_fences(result["content"]))

            return {
                "content": parsed,
                "tokens_used": result["tokens_used"]
            }

        except json.JSONDecodeError as e:
            raise ClimateSenseError(
                code=ErrorCode.LLM_ERROR,
                message="LLM did not return valid JSON",
                details={
                    "parse_error": str(e),
                    "raw_content": result["content"][:500]
                }
            ) from e
