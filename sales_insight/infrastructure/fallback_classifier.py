"""Infrastructure adapter for AI-backed fallback categorization."""

from __future__ import annotations

import json
from typing import Any, Iterable, Protocol

import structlog
from google import genai
from google.genai import types

from sales_insight.config import Settings
from sales_insight.domain.models import UNCLASSIFIED, CategoryMapping, CategoryPair

logger = structlog.get_logger(__name__)

# Payload ceiling of the categorization service; names past it keep the default pair.
MAX_BATCH_SIZE = 300


class CategoryService(Protocol):
    def __call__(self, names: list[str]) -> list[CategoryMapping]: ...


class FallbackClassifier:
    """Classify names the rule table left unresolved.

    Every requested name is present in the result. Service failures and
    missing credentials degrade to `UNCLASSIFIED` instead of raising.
    """

    def __init__(self, service: CategoryService | None, batch_limit: int = MAX_BATCH_SIZE) -> None:
        if batch_limit <= 0:
            raise ValueError(f"batch_limit must be positive, got {batch_limit}")
        self.service = service
        self.batch_limit = batch_limit

    def classify_batch(self, names: Iterable[str]) -> dict[str, CategoryPair]:
        unique_names = list(dict.fromkeys(names))
        result: dict[str, CategoryPair] = {name: UNCLASSIFIED for name in unique_names}
        if not unique_names:
            return result

        batch = unique_names[: self.batch_limit]
        if len(unique_names) > len(batch):
            logger.warning(
                "Fallback batch truncated",
                requested=len(unique_names),
                sent=len(batch),
                defaulted=len(unique_names) - len(batch),
            )

        if self.service is None:
            logger.warning("Fallback service unavailable, using default category", names=len(unique_names))
            return result

        try:
            requested = set(batch)
            resolved: dict[str, CategoryPair] = {}
            for mapping in self.service(batch):
                if mapping.product_name in requested:
                    resolved[mapping.product_name] = mapping.pair
        except Exception as exc:
            logger.warning("Fallback classification failed", error=str(exc), names=len(batch))
            return result

        result.update(resolved)
        logger.info("Fallback classification complete", sent=len(batch), resolved=len(resolved))
        return result


RESPONSE_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "productName": types.Schema(type=types.Type.STRING),
            "major": types.Schema(type=types.Type.STRING, description="Major category in Korean"),
            "minor": types.Schema(type=types.Type.STRING, description="Minor category in Korean"),
        },
        required=["productName", "major", "minor"],
    ),
)


def build_prompt(names: list[str]) -> str:
    return (
        "You are a professional merchandising expert.\n"
        "Classify the following product names into 'Major Category' (대분류) and 'Minor Category' (소분류).\n"
        "Examples of Major Categories: 패션, 식품, 가전, 뷰티, 생활용품, etc.\n"
        "Examples of Minor Categories: 티셔츠, 과일, 청소기, 스킨케어, 세제, etc.\n\n"
        f"Product List: {json.dumps(names, ensure_ascii=False)}"
    )


def parse_mappings(text: str | None) -> list[CategoryMapping]:
    if not text:
        return []
    payload = json.loads(text)
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of mappings, got {type(payload).__name__}")
    return [CategoryMapping.from_row(row) for row in payload]


class GeminiCategoryService:
    """Gemini structured-output backend for `FallbackClassifier`."""

    def __init__(self, api_key: str, model: str, client: Any | None = None) -> None:
        self.model = model
        self._client = client if client is not None else genai.Client(api_key=api_key)

    def __call__(self, names: list[str]) -> list[CategoryMapping]:
        response = self._client.models.generate_content(
            model=self.model,
            contents=build_prompt(names),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=RESPONSE_SCHEMA,
            ),
        )
        return parse_mappings(response.text)


def build_fallback_classifier(settings: Settings, enabled: bool = True) -> FallbackClassifier:
    if not enabled:
        return FallbackClassifier(service=None)
    if not settings.api_key:
        logger.warning("API key missing, skipping AI categorization")
        return FallbackClassifier(service=None)
    return FallbackClassifier(service=GeminiCategoryService(api_key=settings.api_key, model=settings.model))
