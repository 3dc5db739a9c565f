"""
LLM CLIENT - AI SAFETY SUMMARY GENERATION
Builds the prompt, calls the hosted chat-completions endpoint and turns the reply into an AiAssessment.

STEP 1: Prompt construction (prompt_builder.py)
STEP 2: Completion request (CompletionClient, optionally wrapped in RetryingCompletionClient)
STEP 3: Response parsing with fallback (parser.py)
STEP 4: Degraded result on transport failure

Purpose:
- Take a medication, a user profile and the medication's supporting documents
- Ask the LLM for a general and a personalized safety summary in one pass
- Always resolve to a valid AiAssessment; parse and transport failures become degraded results
"""
import asyncio
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Union

import requests

import config
from log import log_assessment
from models import AiAssessment, Malformed, Medication, SafetyStatus, SupportingDocument, UserProfile
from parser import parse_completion, to_assessment
from prompt_builder import build_messages, build_prompt

logger = logging.getLogger(__name__)


class SupportsComplete(Protocol):
    def complete(self, messages: List[Dict[str, str]]) -> str: ...


class CompletionTransportError(Exception):
    """The completion endpoint could not be reached or returned an unusable HTTP response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# ═════════════════════════════════════════════════════════════
# STEP 2: COMPLETION REQUEST
# ═════════════════════════════════════════════════════════════

class CompletionClient:
    """Single-attempt client for an OpenAI-style /chat/completions endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key or config.API_KEY
        self.endpoint = endpoint or config.LLM_ENDPOINT
        self.model = model or config.LLM_MODEL
        self.max_tokens = max_tokens or config.LLM_MAX_TOKENS
        self.temperature = temperature if temperature is not None else config.LLM_TEMPERATURE
        self.timeout = timeout if timeout is not None else config.LLM_TIMEOUT

        if not self.api_key:
            logger.error("[CompletionClient] ERROR: API_KEY is not set!")
            raise ValueError("API_KEY environment variable is not set")
        if not self.endpoint:
            logger.error("[CompletionClient] ERROR: Endpoint is not configured!")
            raise ValueError("Endpoint is not configured")

        logger.debug("[CompletionClient] endpoint=%s model=%s max_tokens=%s", self.endpoint, self.model, self.max_tokens)

    def build_payload(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
        }
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        return payload

    def complete(self, messages: List[Dict[str, str]]) -> str:
        """
        Send the messages and return the first choice's message text.

        Raises:
            CompletionTransportError: network error, timeout, non-2xx status, or a body
                without a text choices[0].message.content.
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}"
        }
        payload = self.build_payload(messages)

        try:
            response = requests.post(self.endpoint, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error("[LLM] HTTP Error: %s", status)
            raise CompletionTransportError(f"HTTP error from completion endpoint: {status}", status_code=status) from e
        except requests.exceptions.Timeout as e:
            logger.error("[LLM] Request timeout after %ss", self.timeout)
            raise CompletionTransportError("Request timeout") from e
        except requests.exceptions.RequestException as e:
            logger.error("[LLM] Connection error: %s", e)
            raise CompletionTransportError(f"Cannot connect to LLM service: {e}") from e

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("[LLM] Malformed response body: %s", e)
            raise CompletionTransportError("Malformed response from completion endpoint",
                                           status_code=response.status_code) from e

        if content is None:
            return ""
        if not isinstance(content, str):
            logger.error("[LLM] Completion content is %s, not text", type(content).__name__)
            raise CompletionTransportError("Malformed response from completion endpoint",
                                           status_code=response.status_code)
        return content


class RetryingCompletionClient:
    """
    Bounded retry around another client. Only CompletionTransportError is retried,
    waiting backoff * 2**attempt seconds between attempts. The last error is re-raised.
    """

    def __init__(
        self,
        client: CompletionClient,
        max_retries: Optional[int] = None,
        backoff: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.max_retries = max(0, max_retries if max_retries is not None else config.LLM_MAX_RETRIES)
        self.backoff = backoff if backoff is not None else config.LLM_RETRY_BACKOFF
        self._sleep = sleep

    def complete(self, messages: List[Dict[str, str]]) -> str:
        attempt = 0
        while True:
            try:
                return self.client.complete(messages)
            except CompletionTransportError as e:
                if attempt >= self.max_retries:
                    raise
                delay = self.backoff * (2 ** attempt)
                attempt += 1
                logger.warning("[LLM] attempt %d failed (%s), retrying in %.1fs", attempt, e, delay)
                self._sleep(delay)


def create_client() -> Union[CompletionClient, RetryingCompletionClient]:
    """Client from config; wrapped in the retry policy when LLM_MAX_RETRIES > 0."""
    client = CompletionClient()
    if config.LLM_MAX_RETRIES > 0:
        return RetryingCompletionClient(client)
    return client


# ═════════════════════════════════════════════════════════════
# MAIN GENERATION PIPELINE
# ═════════════════════════════════════════════════════════════

def degraded_assessment() -> AiAssessment:
    return AiAssessment(
        general_summary=config.DEGRADED_MESSAGE,
        personalized_summary=config.DEGRADED_MESSAGE,
        status=SafetyStatus.CAUTION,
        source=None,
    )


async def generate_ai_assessment(
    medication: Medication,
    profile: UserProfile,
    documents: Optional[Sequence[SupportingDocument]] = None,
    client: Optional[SupportsComplete] = None,
) -> AiAssessment:
    """
    Prompt -> completion -> parse, in a single attempt.

    Args:
        medication: Medication under review
        profile: The user's health profile
        documents: Supporting documents for the medication (may be empty)
        client: Anything with complete(messages) -> str; defaults to create_client()

    Returns:
        AiAssessment. A non-JSON reply gives both summaries = raw text and status safe;
        a transport failure gives the fixed degraded message with status caution.
        Cancellation of the awaiting task propagates as asyncio.CancelledError.
    """
    if client is None:
        client = create_client()

    prompt = build_prompt(medication, profile, documents)
    messages = build_messages(prompt)

    try:
        # Blocking HTTP call runs in a worker thread; this await is the only suspension point.
        content = await asyncio.to_thread(client.complete, messages)
    except CompletionTransportError as e:
        logger.warning("[LLM] transport failure for medication %s: %s", medication.id, e)
        result = degraded_assessment()
        log_assessment(medication.id, getattr(profile, "id", None), "transport-error",
                       ai_status=result.status.value, prompt_chars=len(prompt))
        return result

    logger.debug("[LLM] completion: %s", content[:200])
    parsed = parse_completion(content)
    result = to_assessment(parsed)
    outcome = "parse-fallback" if isinstance(parsed, Malformed) else "parsed"
    log_assessment(medication.id, getattr(profile, "id", None), outcome,
                   ai_status=result.status.value, prompt_chars=len(prompt))
    return result
