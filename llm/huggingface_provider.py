"""
Hugging Face Inference API provider. Free tier, weakest output, last in line.

The inference endpoint takes a single text input, so system and user
prompts are joined.
"""

import requests

from llm.provider import LLMProvider, LLMResponse, LLMError

HF_API = "https://api-inference.huggingface.co/models"


class HuggingFaceProvider(LLMProvider):
    def __init__(
        self,
        api_key: str,
        model: str = "microsoft/DialoGPT-medium",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        if not api_key:
            raise LLMError("HUGGINGFACE_API_KEY not set")
        self._api_key = api_key
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
                f"{HF_API}/{self._model}",
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={
                    "inputs": f"{system_prompt}\n{user_prompt}",
                    "parameters": {
                        "max_new_tokens": max_tokens,
                        "temperature": temperature,
                        "do_sample": True,
                        "return_full_text": False,
                    },
                },
                timeout=self._timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise LLMError(f"Hugging Face API error: {e}") from e

        if isinstance(data, list) and data and isinstance(data[0], dict):
            text = data[0].get("generated_text") or ""
        elif isinstance(data, dict) and "error" in data:
            raise LLMError(f"Hugging Face API error: {data['error']}")
        else:
            raise LLMError(f"Hugging Face returned an unexpected payload: {type(data).__name__}")

        return LLMResponse(text=text, input_tokens=0, output_tokens=0, model=self._model)

    def name(self) -> str:
        return f"huggingface/{self._model}"
