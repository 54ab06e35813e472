"""
OpenAI chat completions. First in the chain when OPENAI_API_KEY is set.

The SDK's own retries are off: a slow or refusing provider should hand over
to the next one, not stall the run.
"""

from llm.provider import LLMProvider, LLMResponse, LLMError


class OpenAIProvider(LLMProvider):
    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 30.0):
        if not api_key:
            raise LLMError("OPENAI_API_KEY not set")
        try:
            import openai
        except ImportError:
            raise LLMError("openai package not installed: pip install openai")
        self._openai = openai
        self._client = openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self._model = model

    def complete(self, system_prompt, user_prompt, temperature=0.3, max_tokens=300) -> LLMResponse:
        openai = self._openai
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except openai.APITimeoutError as e:
            raise LLMError(f"OpenAI timed out: {e}") from e
        except openai.APIStatusError as e:
            raise LLMError(f"OpenAI returned HTTP {e.status_code}: {e.message}") from e
        except openai.OpenAIError as e:
            raise LLMError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            raise LLMError("OpenAI returned no choices")

        usage = response.usage
        return LLMResponse(
            text=response.choices[0].message.content or "",
            input_tokens=getattr(usage, "prompt_tokens", 0),
            output_tokens=getattr(usage, "completion_tokens", 0),
            model=self._model,
        )

    def name(self) -> str:
        return f"openai/{self._model}"
