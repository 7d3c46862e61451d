"""LLM Client for AI text formatting through the Groq API."""
import time
from dataclasses import dataclass
from typing import Optional, Dict, Any
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError
import logging

from config import GROQ_API_KEY, FORMAT_MODEL, FORMAT_TEMPERATURE, FORMAT_MAX_TOKENS

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a document formatting assistant. Your job is to improve the structure, "
    "organization, and formatting of text."
)

TEMPLATE_INSTRUCTIONS = {
    "report": (
        "Format the following text as a professional business or technical report. "
        "Add appropriate headings, organize content into logical sections, and improve "
        "the formatting and structure:"
    ),
    "whitepaper": (
        "Format the following text as an academic or research whitepaper. Add appropriate "
        "headings, organize content into logical sections, improve the formatting and "
        "include citations:"
    ),
    "standard": (
        "Format the following text into a clear, well-structured document with "
        "appropriate paragraphs:"
    ),
}


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class LLMClient:
    """Client for interfacing with Groq API for text formatting."""

    def __init__(self, api_key: Optional[str] = None, model: str = FORMAT_MODEL):
        """
        Initialize LLM client with Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
            model: Chat model used by format_text
        """
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.model = model
        self.client = Groq(api_key=self.api_key)
        logger.info("LLMClient initialized successfully")

    def format_text(self, text: str, template: Optional[str] = None) -> LLMResponse:
        """
        Restructure text according to a document template.

        Args:
            text: Raw document text
            template: "report", "whitepaper" or "standard" (anything else is standard)

        Returns:
            LLMResponse with the formatted text

        Raises:
            LLMClientError: Structured error with code, message, and details
        """
        return self.generate(
            model=self.model,
            prompt=self.build_format_prompt(text, template),
            max_tokens=FORMAT_MAX_TOKENS,
            temperature=FORMAT_TEMPERATURE,
            system_prompt=SYSTEM_PROMPT
        )

    def generate(
        self,
        model: str,
        prompt: str,
        max_tokens: int = FORMAT_MAX_TOKENS,
        temperature: float = FORMAT_TEMPERATURE,
        system_prompt: Optional[str] = None
    ) -> LLMResponse:
        """
        Generate response using Groq API.

        Args:
            model: Model name
            prompt: Complete user prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            system_prompt: Optional system message sent before the prompt

        Returns:
            LLMResponse with text, token counts, and latency

        Raises:
            LLMClientError: Structured error with code, message, and details
        """
        start_time = time.time()

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            logger.debug(f"Generating response with model: {model}")

            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature
            )

            latency_ms = int((time.time() - start_time) * 1000)

            text = response.choices[0].message.content

            tokens_input = response.usage.prompt_tokens
            tokens_output = response.usage.completion_tokens

            logger.info(
                f"Generated response: model={model}, "
                f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
                f"latency={latency_ms}ms"
            )

            return LLMResponse(
                text=text,
                tokens_input=tokens_input,
                tokens_output=tokens_output,
                latency_ms=latency_ms,
                model_used=model
            )

        except RateLimitError as e:
            raise self._error(
                "RATE_LIMIT_ERROR",
                "Rate limit exceeded. Please try again in a few moments.",
                model, start_time, e,
                retry_after=60
            )

        except AuthenticationError as e:
            raise self._error(
                "AUTHENTICATION_ERROR",
                "Authentication failed. Please check your API key.",
                model, start_time, e
            )

        except APITimeoutError as e:
            raise self._error(
                "TIMEOUT_ERROR",
                "Request timed out. Please try again.",
                model, start_time, e
            )

        except APIError as e:
            raise self._error(
                "API_ERROR",
                f"Groq API error: {str(e)}",
                model, start_time, e
            )

        except Exception as e:
            raise self._error(
                "UNKNOWN_ERROR",
                f"Unexpected error during generation: {str(e)}",
                model, start_time, e,
                error_type=type(e).__name__
            )

    @staticmethod
    def _error(
        code: str,
        message: str,
        model: str,
        start_time: float,
        original: Exception,
        **extra: Any
    ) -> LLMClientError:
        """Log a failed generation and wrap it in an LLMClientError."""
        latency_ms = int((time.time() - start_time) * 1000)
        details = {
            **extra,
            "model": model,
            "latency_ms": latency_ms,
            "original_error": str(original),
        }
        error = LLMError(code=code, message=message, details=details)
        logger.error(
            f"{code}: model={model}, latency={latency_ms}ms, error={original}",
            exc_info=True,
            extra={"error_code": code, "error_details": details}
        )
        return LLMClientError(error)

    @staticmethod
    def build_format_prompt(text: str, template: Optional[str] = None) -> str:
        """
        Build the formatting prompt for a document template.

        Args:
            text: Raw document text
            template: Template name; unknown or missing names use "standard"

        Returns:
            Complete prompt string
        """
        instruction = TEMPLATE_INSTRUCTIONS.get(template or "standard", TEMPLATE_INSTRUCTIONS["standard"])
        return f"""{instruction}

{text}"""
