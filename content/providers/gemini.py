"""content.providers.gemini

Gemini provider (LLM) for monster flavor.

- Uses the google-genai SDK.
- One request per call: no model cycling, no key rotation, no repair pass.
  The caller falls back to an offline monster on any exception.

Important: This provider is UI-agnostic (no Streamlit dependency).
Secrets/env loading is done in the Streamlit app.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ..parsing import must_parse_json
from ..schemas import MonsterDraft, draft_from_llm
from .base import ProviderStatus

log = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


@dataclass
class GeminiProvider:
    api_key: str
    model: str = DEFAULT_MODEL
    timeout_s: float = 15.0

    # runtime
    backend: str = "none"  # genai | none
    last_error: str = ""

    _client: Any = None

    def __post_init__(self) -> None:
        self.api_key = str(self.api_key or "").strip()
        self._init_backend()

    @staticmethod
    def from_api_key_string(raw: str, **kwargs: Any) -> "GeminiProvider":
        # A comma separated list is accepted; only the first key is used.
        first = str(raw or "").split(",")[0].strip()
        return GeminiProvider(first, **kwargs)

    def _init_backend(self) -> None:
        self._client = None
        self.backend = "none"

        if not self.api_key:
            self.last_error = "No API key."
            return

        try:
            from google import genai  # type: ignore

            self._client = genai.Client(
                api_key=self.api_key,
                http_options={"timeout": int(self.timeout_s * 1000)},
            )
            self.backend = "genai"
            self.last_error = ""
        except Exception as e:
            self.last_error = f"google-genai unavailable: {e}"
            log.warning("Gemini backend init failed: %s", e)

    def status(self) -> ProviderStatus:
        if self.backend == "none":
            return ProviderStatus(False, "none", "", note="", error=str(self.last_error or ""))
        return ProviderStatus(True, self.backend, self.model, note="", error="")

    def _generate_text(self, prompt: str, temperature: float, max_output_tokens: int) -> str:
        if self._client is None:
            raise RuntimeError(self.last_error or "Gemini is not configured.")

        cfg: Dict[str, Any] = {
            "temperature": float(temperature),
            "max_output_tokens": int(max_output_tokens),
            "response_mime_type": "application/json",
        }
        try:
            resp = self._client.models.generate_content(model=self.model, contents=prompt, config=cfg)
        except Exception as e:
            self.last_error = f"{type(e).__name__}: {e}"
            raise RuntimeError(f"Gemini error: {e}") from e

        txt = (getattr(resp, "text", "") or "").strip()
        if not txt:
            self.last_error = "empty response"
            raise RuntimeError("Gemini returned an empty response.")
        return txt

    def generate_monster_draft(
        self,
        *,
        prompt: str,
        temperature: float = 0.9,
        max_output_tokens: int = 400,
    ) -> Tuple[MonsterDraft, str]:
        raw = self._generate_text(prompt, temperature=temperature, max_output_tokens=max_output_tokens)
        try:
            draft = draft_from_llm(must_parse_json(raw))
        except ValueError as e:
            self.last_error = f"{type(e).__name__}: {e}"
            raise
        return draft, raw
