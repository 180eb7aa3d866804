# chatplatform/llm/client.py
"""
Client for an OpenAI-compatible chat-completion API (OpenRouter by default).

Two call shapes:
- complete(): one request, full completion body
- stream(): chunked response of `data: {...}` lines, yielding text deltas
  until `data: [DONE]`
"""

import json
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

import httpx

from chatplatform.config import LLM
from chatplatform.config.schema import LLMSettings
from chatplatform.core.exceptions import UpstreamError
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

DONE_MARKER = "[DONE]"
NO_RESPONSE = "No response generated"


def parse_stream_line(line: str) -> Tuple[bool, Optional[str]]:
    """
    Parse one line of an upstream event stream.

    Returns:
        (finished, delta) - finished is True on the [DONE] marker; delta is
        the text content, or None for lines that carry none (comments,
        keep-alives, malformed JSON, empty deltas).
    """
    if not line.startswith("data: "):
        return False, None

    data = line[len("data: "):].strip()
    if data == DONE_MARKER:
        return True, None

    try:
        parsed = json.loads(data)
        content = parsed["choices"][0].get("delta", {}).get("content")
    except (ValueError, KeyError, IndexError, TypeError, AttributeError):
        return False, None

    return False, content or None


class ChatCompletionClient:
    """Thin async wrapper around the upstream chat-completion endpoint."""

    def __init__(self, settings: Optional[LLMSettings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or LLM
        self._transport = transport

    def _client(self, timeout: Optional[float] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout if timeout is not None else self.settings.timeout,
            transport=self._transport,
        )

    def _headers(self) -> Dict[str, str]:
        if not self.settings.api_key:
            raise UpstreamError("OPENROUTER_API_KEY is not configured")
        return {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.settings.referer,
            "X-Title": self.settings.title,
        }

    def build_payload(
        self,
        model: str,
        system_prompt: str,
        messages: List[Dict[str, str]],
        stream: bool = False,
    ) -> Dict[str, Any]:
        payload = {
            "model": model,
            "messages": [{"role": "system", "content": system_prompt}, *messages],
            "max_tokens": self.settings.max_tokens,
            "temperature": self.settings.temperature,
        }
        if stream:
            payload["stream"] = True
        return payload

    async def complete(self, model: str, system_prompt: str, messages: List[Dict[str, str]]) -> str:
        """Send the conversation and return the full assistant reply."""
        headers = self._headers()
        payload = self.build_payload(model, system_prompt, messages)

        try:
            async with self._client() as client:
                response = await client.post(self.settings.api_url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Upstream request failed: {e}")
            raise UpstreamError(f"Upstream request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Upstream API error {response.status_code}: {response.text[:500]}")
            raise UpstreamError(f"Upstream API error: {response.status_code}", status=response.status_code)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"Unexpected completion body: {e}")
            return NO_RESPONSE

        return content or NO_RESPONSE

    async def stream(self, model: str, system_prompt: str, messages: List[Dict[str, str]]) -> AsyncIterator[str]:
        """Yield text deltas as the upstream produces them."""
        headers = self._headers()
        payload = self.build_payload(model, system_prompt, messages, stream=True)

        try:
            async with self._client() as client:
                async with client.stream("POST", self.settings.api_url, headers=headers, json=payload) as response:
                    if response.status_code >= 400:
                        body = await response.aread()
                        logger.error(f"Upstream API error {response.status_code}: {body[:500]!r}")
                        raise UpstreamError(
                            f"Upstream API error: {response.status_code}", status=response.status_code
                        )

                    async for line in response.aiter_lines():
                        finished, delta = parse_stream_line(line)
                        if finished:
                            return
                        if delta:
                            yield delta
        except httpx.HTTPError as e:
            logger.error(f"Upstream stream failed: {e}")
            raise UpstreamError(f"Upstream stream failed: {e}") from e

    async def list_models(self, limit: int = 20) -> List[Dict[str, str]]:
        """Available models, or the configured fallback list."""
        if not self.settings.api_key:
            return list(self.settings.fallback_models)

        try:
            async with self._client(timeout=10.0) as client:
                response = await client.get(
                    self.settings.models_url,
                    headers={"Authorization": f"Bearer {self.settings.api_key}"},
                )
            response.raise_for_status()
            data = response.json()["data"]
            return [{"id": m["id"], "name": m.get("name", m["id"])} for m in data[:limit]]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Model listing failed, using fallback: {e}")
            return list(self.settings.fallback_models[:3])


_client: Optional[ChatCompletionClient] = None


def get_llm_client() -> ChatCompletionClient:
    """Shared client instance (FastAPI dependency)."""
    global _client
    if _client is None:
        _client = ChatCompletionClient()
    return _client
