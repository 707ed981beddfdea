"""
Report summarization through the OpenAI API.

The caller always gets a string back: a missing key, an API failure or an
empty answer each map to a fixed sentence shown to the inspector instead.
"""
from __future__ import annotations
import logging
from typing import Any, Optional

from ..errors import ExternalServiceError

logger = logging.getLogger(__name__)

DISABLED_MESSAGE = "Chave de API não configurada. A sumarização está desabilitada."
FAILURE_MESSAGE = "Erro ao se comunicar com o serviço de IA. Tente novamente mais tarde."
EMPTY_MESSAGE = "Não foi possível gerar um resumo."

PROMPT = (
    "Resuma o seguinte relatório de fiscalização em um parágrafo conciso, "
    "destacando a constatação principal e a ação tomada. Relatório: \"{text}\""
)


class Summarizer:

    def __init__(self, api_key: str = "", model: str = "gpt-4o-mini", client: Optional[Any] = None):
        self.api_key = (api_key or "").strip()
        self.model = model
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self.api_key) or self._client is not None

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def _complete(self, text: str) -> str:
        try:
            resp = self._get_client().chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": PROMPT.format(text=text)}],
            )
        except Exception as e:
            raise ExternalServiceError(f"summarization call failed: {e}") from e
        choices = getattr(resp, "choices", None) or []
        if not choices:
            return ""
        return (choices[0].message.content or "").strip()

    def summarize(self, text: str) -> str:
        if not self.enabled:
            return DISABLED_MESSAGE
        try:
            out = self._complete(text)
        except ExternalServiceError as e:
            logger.warning("Summarization unavailable: %s", e)
            return FAILURE_MESSAGE
        return out or EMPTY_MESSAGE
