"""Ollama adapter (local inference server).

Talks to the native /api/generate endpoint, not the OpenAI-compatible one,
so system prompt and sampling params map directly onto the request body:

  POST {base_url}/api/generate
  {"model", "prompt", "system", "temperature", "top_p", "stop",
   "num_predict", "stream"}

Non-streaming replies are one JSON object with a "response" field.
Streaming replies are newline-delimited JSON, one object per fragment.
A network chunk can end mid-line, so fragments are reassembled in a line
buffer before parsing.
"""

import json
from typing import AsyncIterator, Optional

import httpx

from modelbridge.llm.base import BaseModelClient, Completion
from modelbridge.llm.errors import ProviderError
from modelbridge.llm.types import GenerationOptions, RetryPolicy
from modelbridge.utils.logging import log, get_logger

MODULE = "llm.ollama"
logger = get_logger()

DEFAULT_BASE_URL = "http://localhost:11434"

# Local models can be slow to load on first request
REQUEST_TIMEOUT = 120


class OllamaClient(BaseModelClient):
    provider = "ollama"

    def __init__(
        self,
        name: str,
        base_url: str = DEFAULT_BASE_URL,
        retry_policy: Optional[RetryPolicy] = None,
        *,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(name, retry_policy)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    def _payload(self, prompt: str, options: GenerationOptions, stream: bool) -> dict:
        payload = {
            "model": self.name,
            "prompt": prompt,
            "system": options.system_prompt,
            "temperature": options.temperature,
            "top_p": options.top_p,
            "stop": options.stop,
            "num_predict": options.max_tokens,
        }
        payload = {k: v for k, v in payload.items() if v is not None}
        payload["stream"] = stream
        return payload

    async def _complete(self, prompt: str, options: GenerationOptions) -> Completion:
        log.debug(logger, MODULE, "generate_start", "Ollama generate request",
                  model=self.name, base_url=self.base_url)

        async with self._http_client() as client:
            try:
                resp = await client.post(
                    "/api/generate", json=self._payload(prompt, options, stream=False)
                )
            except httpx.HTTPError as e:
                raise ProviderError(f"Ollama request failed: {e}") from e

            if resp.is_error:
                raise ProviderError(
                    f"Ollama request failed: {resp.reason_phrase}",
                    status_code=resp.status_code,
                )
            data = resp.json()

        text = data.get("response")
        if not isinstance(text, str):
            raise ProviderError("Ollama reply has no 'response' field")

        log.debug(logger, MODULE, "generate_done", "Ollama generate complete",
                  model=self.name, raw_length=len(text))
        return Completion(text=text, model=data.get("model"))

    async def _stream(self, prompt: str, options: GenerationOptions) -> AsyncIterator[str]:
        log.debug(logger, MODULE, "stream_start", "Ollama stream request",
                  model=self.name, base_url=self.base_url)

        async with self._http_client() as client:
            async with client.stream(
                "POST", "/api/generate", json=self._payload(prompt, options, stream=True)
            ) as resp:
                if resp.is_error:
                    await resp.aread()
                    raise ProviderError(
                        f"Ollama stream request failed: {resp.reason_phrase}",
                        status_code=resp.status_code,
                    )

                buffer = ""
                async for chunk in resp.aiter_text():
                    buffer += chunk
                    *lines, buffer = buffer.split("\n")
                    for line in lines:
                        fragment = self._parse_line(line)
                        if fragment:
                            yield fragment

                # Final line without a trailing newline
                fragment = self._parse_line(buffer)
                if fragment:
                    yield fragment

        log.debug(logger, MODULE, "stream_done", "Ollama stream complete", model=self.name)

    def _parse_line(self, line: str) -> Optional[str]:
        """Parse one NDJSON line into its text fragment.

        Malformed lines and lines without a text fragment are logged and
        skipped. An error object from the server aborts the stream.

        Raises:
            ProviderError: Ollama reported an error mid-stream
        """
        line = line.strip()
        if not line:
            return None
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            log.warning(logger, MODULE, "stream_line_skipped",
                        "Skipping malformed stream line",
                        model=self.name, error=str(e), line=line[:200])
            return None

        if isinstance(data, dict) and "error" in data:
            log.error(logger, MODULE, "stream_failed", "Ollama reported an error mid-stream",
                      model=self.name, error=str(data["error"]))
            raise ProviderError(f"Ollama stream failed: {data['error']}")

        fragment = data.get("response") if isinstance(data, dict) else None
        if not isinstance(fragment, str):
            log.warning(logger, MODULE, "stream_line_skipped",
                        "Skipping stream line without a text fragment",
                        model=self.name, line=line[:200])
            return None
        return fragment
