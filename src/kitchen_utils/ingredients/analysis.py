"""LLM-assisted dietary, allergen and category tagging with a local fallback."""

import dataclasses
import json
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from tqdm import tqdm

from kitchen_utils.ingredients.classification import IngredientClassifier
from kitchen_utils.ingredients.knowledge import KnowledgeBase, load_knowledge_base
from kitchen_utils.ingredients.models import IngredientAnalysis, ScoredLabel, TaggingResult

logger = logging.getLogger(__name__)

DEFAULT_MODEL_ID = "anthropic.claude-3-5-haiku-20241022-v1:0"

TAG_THRESHOLD = 65
ALLERGEN_THRESHOLD = 75
CATEGORY_THRESHOLD = 70
AUTO_APPLY_CONFIDENCE = 88
AUTO_APPLY_ALLERGEN_CONFIDENCE = 90

LOCAL_PROPERTY_CONFIDENCE = 80
LOCAL_MATCHED_CONFIDENCE = 75
LOCAL_UNMATCHED_CONFIDENCE = 20
FALLBACK_WARNING = "AI analysis failed - using local fallback"


def _clamp(value) -> int:
    return int(max(0, min(100, float(value or 0))))


def _entries(raw: dict, key: str) -> List[dict]:
    entries = raw.get(key) or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ValueError(f"Malformed '{key}' list: {entries!r}")
    return entries


def extract_json_object(completion: str) -> dict:
    """Pull the JSON object out of an LLM completion.

    Handles fenced ```json blocks and prose around a bare object.

    Raises:
        ValueError: If the completion holds no JSON object.
    """
    if "```json" in completion:
        completion = completion.split("```json")[1].split("```")[0]
    else:
        start_index = completion.find("{")
        end_index = completion.rfind("}")
        if start_index == -1 or end_index <= start_index:
            raise ValueError("No JSON object in completion")
        completion = completion[start_index : end_index + 1]
    return json.loads(completion.strip())


class IngredientAnalyzer:
    """Tag ingredients using an AWS Bedrock model, falling back to local rules.

    LLM answers are validated against the fixed vocabularies and filtered by
    confidence thresholds. Allergens need more confidence than dietary tags.
    A result is only marked for automatic application when the model is very
    confident, raised no warnings, every allergen is near certain and the
    ingredient is on a conservative whitelist. Local fallback results are
    never auto-applied.

    Attributes:
        knowledge: Vocabularies and category table.
        classifier: Local rule-based classifier used as the fallback.
        model_id: Bedrock model used for analysis.
        bedrock_client: Client exposing ``invoke_model``.
        cache: Results keyed by ``(name, language)``.
    """

    def __init__(
        self,
        model_id: str = DEFAULT_MODEL_ID,
        bedrock_client=None,
        region_name: str = "us-east-1",
        knowledge: Optional[KnowledgeBase] = None,
    ):
        self.knowledge = knowledge or load_knowledge_base()
        self.classifier = IngredientClassifier(self.knowledge)
        self.model_id = model_id
        self.bedrock_client = bedrock_client or boto3.client(
            "bedrock-runtime", region_name=region_name
        )
        self.cache: Dict[Tuple[str, str], TaggingResult] = {}

    def build_prompt(self, name: str, language: str) -> str:
        language_name = "German" if language == "de" else "English"
        categories = ", ".join(entry.name for entry in self.knowledge.categories)
        return f"""
You are a professional chef and food safety expert. Analyze this restaurant
ingredient, written in {language_name}:
"{name}"

Use only these dietary properties: {", ".join(self.knowledge.dietary_properties)}
Use only these allergens: {", ".join(self.knowledge.allergens)}
Use only these categories: {categories}

Respond with JSON only, confidences are integers from 0 to 100:
{{
  "dietaryProperties": [{{"property": "...", "confidence": 0, "reasoning": "..."}}],
  "allergens": [{{"allergen": "...", "confidence": 0, "reasoning": "..."}}],
  "category": {{"name": "...", "confidence": 0, "reasoning": "..."}},
  "overallConfidence": 0,
  "warnings": []
}}
"""

    def _request_body(self, prompt: str) -> str:
        if "anthropic.claude-3" in self.model_id:
            return json.dumps(
                {
                    "anthropic_version": "bedrock-2023-05-31",
                    "max_tokens": 1024,
                    "temperature": 0.1,
                    "messages": [
                        {"role": "user", "content": [{"type": "text", "text": prompt}]}
                    ],
                }
            )
        if "amazon.nova" in self.model_id:
            return json.dumps(
                {"messages": [{"role": "user", "content": [{"text": prompt}]}]}
            )
        return json.dumps(
            {
                "prompt": f"\n\nHuman:{prompt}\n\nAssistant:",
                "max_tokens_to_sample": 1024,
                "temperature": 0.1,
            }
        )

    def _completion_text(self, response_body: dict) -> str:
        if "anthropic.claude-3" in self.model_id:
            return response_body["content"][0]["text"]
        if "amazon.nova" in self.model_id:
            return response_body["output"]["message"]["content"][0]["text"]
        return response_body["completion"]

    def request_analysis(self, name: str, language: str) -> dict:
        """Send the analysis prompt and return the model's parsed JSON answer."""
        response = self.bedrock_client.invoke_model(
            body=self._request_body(self.build_prompt(name, language)),
            modelId=self.model_id,
            accept="application/json",
            contentType="application/json",
        )
        response_body = json.loads(response["body"].read())
        return extract_json_object(self._completion_text(response_body))

    def validate_analysis(self, raw: dict, name: str) -> IngredientAnalysis:
        """Drop labels outside the vocabularies and clamp confidences to 0-100.

        Raises:
            ValueError: If the answer does not have the requested JSON shape.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"Expected a JSON object, got {type(raw).__name__}")
        properties = tuple(
            ScoredLabel(p["property"], _clamp(p["confidence"]), p.get("reasoning", ""))
            for p in _entries(raw, "dietaryProperties")
            if p.get("property") in self.knowledge.dietary_properties
        )
        allergens = tuple(
            ScoredLabel(a["allergen"], _clamp(a["confidence"]), a.get("reasoning", ""))
            for a in _entries(raw, "allergens")
            if a.get("allergen") in self.knowledge.allergens
        )
        category = raw.get("category") or {}
        if not isinstance(category, dict):
            raise ValueError(f"Malformed category: {category!r}")
        warnings = raw.get("warnings") or ()
        if isinstance(warnings, str):
            warnings = (warnings,)
        known_categories = {entry.name for entry in self.knowledge.categories}
        return IngredientAnalysis(
            ingredient=raw.get("ingredient") or name,
            dietary_properties=properties,
            allergens=allergens,
            category=ScoredLabel(
                category.get("name") if category.get("name") in known_categories else "",
                _clamp(category.get("confidence")),
                category.get("reasoning", "No reasoning provided"),
            ),
            overall_confidence=_clamp(raw.get("overallConfidence")),
            warnings=tuple(warnings),
        )

    def local_analysis(self, name: str, language: str = "de") -> IngredientAnalysis:
        """Rule-based analysis with the same shape as an LLM answer."""
        classification = self.classifier.classify(name, language)
        category = classification.category or ""
        return IngredientAnalysis(
            ingredient=name,
            dietary_properties=tuple(
                ScoredLabel(
                    prop,
                    LOCAL_PROPERTY_CONFIDENCE,
                    f"Ingredient category '{category}' typically has '{prop}' property",
                )
                for prop in classification.dietary_properties
            ),
            allergens=tuple(
                ScoredLabel(allergen, confidence, "Matched allergen knowledge table")
                for allergen, confidence in classification.allergen_confidence.items()
            ),
            category=ScoredLabel(
                category,
                classification.confidence,
                f"Matched to {category} category" if category else "No category match found",
            ),
            overall_confidence=(
                LOCAL_MATCHED_CONFIDENCE if category else LOCAL_UNMATCHED_CONFIDENCE
            ),
            warnings=classification.warnings,
        )

    def analyze(self, name: str, language: str = "de") -> TaggingResult:
        """Tag one ingredient. Never raises for service or response errors."""
        key = (name, language)
        if key in self.cache:
            return self.cache[key]

        try:
            analysis = self.validate_analysis(self.request_analysis(name, language), name)
        except (BotoCoreError, ClientError, ValueError, KeyError, TypeError, IndexError) as e:
            logger.warning(f"AI analysis failed for '{name}', using local rules: {e}")
            result = self._fallback_result(name, language)
        else:
            result = TaggingResult(
                suggested_tags=tuple(
                    p.label for p in analysis.dietary_properties if p.confidence >= TAG_THRESHOLD
                ),
                suggested_allergens=tuple(
                    a.label for a in analysis.allergens if a.confidence >= ALLERGEN_THRESHOLD
                ),
                suggested_category=(
                    analysis.category.label
                    if analysis.category.confidence >= CATEGORY_THRESHOLD
                    else ""
                ),
                analysis=analysis,
                should_auto_apply=self.should_auto_apply(analysis),
                source=f"llm:{self.model_id}",
            )

        self.cache[key] = result
        return result

    def should_auto_apply(self, analysis: IngredientAnalysis) -> bool:
        return (
            analysis.overall_confidence >= AUTO_APPLY_CONFIDENCE
            and not analysis.warnings
            and self.classifier.is_known_safe_ingredient(analysis.ingredient)
            and all(a.confidence >= AUTO_APPLY_ALLERGEN_CONFIDENCE for a in analysis.allergens)
        )

    def _fallback_result(self, name: str, language: str) -> TaggingResult:
        analysis = self.local_analysis(name, language)
        analysis = dataclasses.replace(
            analysis, warnings=analysis.warnings + (FALLBACK_WARNING,)
        )
        return TaggingResult(
            suggested_tags=tuple(p.label for p in analysis.dietary_properties),
            suggested_allergens=tuple(a.label for a in analysis.allergens),
            suggested_category=analysis.category.label,
            analysis=analysis,
            should_auto_apply=False,
            source="local",
        )


def analyze_ingredient_batch(
    analyzer: IngredientAnalyzer,
    names: Sequence[str],
    language: str = "de",
    max_workers: int = 4,
) -> List[TaggingResult]:
    """Analyze many ingredients in parallel, returning results in input order.

    Args:
        analyzer: Configured analyzer instance
        names: Ingredient names to tag
        language: Language hint for every name
        max_workers: Maximum number of parallel Bedrock requests

    Returns:
        One TaggingResult per name, aligned with ``names``
    """
    results: List[Optional[TaggingResult]] = [None] * len(names)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(analyzer.analyze, name, language): index
            for index, name in enumerate(names)
        }
        with tqdm(total=len(names), desc="Ingredient tagging") as pbar:
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()
                pbar.update(1)

    auto_applied = sum(1 for r in results if r.should_auto_apply)
    logger.info(f"Tagged {len(names)} ingredients, {auto_applied} ready to auto-apply")
    return results


def format_analysis_for_display(analysis: IngredientAnalysis) -> str:
    parts = [f"{analysis.ingredient} ({analysis.overall_confidence}% confidence)"]
    if analysis.dietary_properties:
        props = ", ".join(f"{p.label} ({p.confidence}%)" for p in analysis.dietary_properties)
        parts.append(f"Properties: {props}")
    if analysis.allergens:
        allergens = ", ".join(f"{a.label} ({a.confidence}%)" for a in analysis.allergens)
        parts.append(f"Allergens: {allergens}")
    if analysis.category.label:
        parts.append(f"Category: {analysis.category.label} ({analysis.category.confidence}%)")
    if analysis.warnings:
        parts.append(f"Warnings: {', '.join(analysis.warnings)}")
    return " | ".join(parts)
