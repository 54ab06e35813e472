"""
Ollama analysis provider. Local, free, needs `ollama serve` running.

Plain REST call to /api/generate. No SDK.
"""

import requests

from llm.provider import LLMProvider, LLMResponse, LLMError


class OllamaProvider(LLMProvider):
    def __init__(
        self,
        host: str,
        model: str = "llama3.2:3b",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        if not host:
            raise LLMError("OLLAMA_HOST not set")
        self._host = host.rstrip("/")
        self._model = model
        self._timeout = timeout
        self._session = session or requests.Session()

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 300,
    ) -> LLMResponse:
        try:
            resp = self._session.post(
                f"{self._host}/api/generate",
                json={
                    "model": self._model,
                    "system": system_prompt,
                    "prompt": user_prompt,
                    "stream": False,
                    "options": {
                        "temperature": temperature,
                        "top_p": 0.9,
                        "num_predict": max_tokens,
                    },
                },
                timeout=self._timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise LLMError(f"Ollama API error: {e}") from e

        return LLMResponse(
            text=data.get("response") or "",
            input_tokens=data.get("prompt_eval_count", 0),
            output_tokens=data.get("eval_count", 0),
            model=self._model,
        )

    def name(self) -> str:
        return f"ollama/{self._model}"
