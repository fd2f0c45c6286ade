import io
import json

import pytest
from botocore.exceptions import ClientError

from kitchen_utils.ingredients.analysis import (
    DEFAULT_MODEL_ID,
    FALLBACK_WARNING,
    IngredientAnalyzer,
    analyze_ingredient_batch,
    extract_json_object,
    format_analysis_for_display,
)


class StubBedrockClient:
    """Stands in for a bedrock-runtime client."""

    def __init__(self, completion="", error=None):
        self.completion = completion
        self.error = error
        self.calls = []

    def invoke_model(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        body = json.dumps({"content": [{"type": "text", "text": self.completion}]})
        return {"body": io.BytesIO(body.encode("utf-8"))}


def llm_answer(**overrides):
    answer = {
        "dietaryProperties": [
            {"property": "vegetarian", "confidence": 95, "reasoning": "plant"},
            {"property": "vegan", "confidence": 95, "reasoning": "plant"},
        ],
        "allergens": [],
        "category": {"name": "vegetables", "confidence": 95, "reasoning": "tomato"},
        "overallConfidence": 95,
        "warnings": [],
    }
    answer.update(overrides)
    return "Here is the analysis:\n" + json.dumps(answer)


@pytest.fixture
def make_analyzer():
    def factory(completion="", error=None):
        client = StubBedrockClient(completion, error)
        return IngredientAnalyzer(bedrock_client=client), client

    return factory


def test_confident_answer_for_safe_ingredient_is_auto_applied(make_analyzer):
    analyzer, client = make_analyzer(llm_answer())
    result = analyzer.analyze("Tomate")

    assert result.suggested_tags == ("vegetarian", "vegan")
    assert result.suggested_allergens == ()
    assert result.suggested_category == "vegetables"
    assert result.should_auto_apply
    assert result.source == f"llm:{DEFAULT_MODEL_ID}"
    assert client.calls[0]["modelId"] == DEFAULT_MODEL_ID


def test_thresholds_and_vocabulary_filter_answer(make_analyzer):
    answer = llm_answer(
        dietaryProperties=[
            {"property": "vegan", "confidence": 60},
            {"property": "vegetarian", "confidence": 70},
            {"property": "keto", "confidence": 99},
        ],
        allergens=[
            {"allergen": "dairy", "confidence": 70},
            {"allergen": "gluten", "confidence": 80},
            {"allergen": "glitter", "confidence": 99},
        ],
        category={"name": "dairy", "confidence": 65},
        overallConfidence=92,
    )
    analyzer, _ = make_analyzer(answer)
    result = analyzer.analyze("Tomate")

    assert result.suggested_tags == ("vegetarian",)
    assert result.suggested_allergens == ("gluten",)
    assert result.suggested_category == ""
    assert [a.label for a in result.analysis.allergens] == ["dairy", "gluten"]
    assert not result.should_auto_apply


def test_unknown_category_is_dropped(make_analyzer):
    analyzer, _ = make_analyzer(
        llm_answer(category={"name": "beverages", "confidence": 99})
    )
    assert analyzer.analyze("Tomate").suggested_category == ""


@pytest.mark.parametrize(
    "name, overrides",
    [
        ("Lachs", {}),
        ("Tomate", {"warnings": ["check supplier"]}),
        ("Tomate", {"overallConfidence": 87}),
        ("Tomate", {"allergens": [{"allergen": "celery", "confidence": 89}]}),
    ],
)
def test_auto_apply_requires_every_condition(make_analyzer, name, overrides):
    analyzer, _ = make_analyzer(llm_answer(**overrides))
    assert not analyzer.analyze(name).should_auto_apply


@pytest.mark.parametrize(
    "completion, error",
    [
        ("", ClientError({"Error": {"Code": "ThrottlingException", "Message": "slow"}}, "InvokeModel")),
        ("Sorry, I cannot help with that.", None),
        ('{"dietaryProperties": [{"property": "vegan"}]}', None),
        ('{"dietaryProperties": ["vegan"], "overallConfidence": 90}', None),
        ('{"allergens": "dairy", "overallConfidence": 90}', None),
        ('{"category": "vegetables", "overallConfidence": 90}', None),
        ("```json\n[{\"property\": \"vegan\", \"confidence\": 90}]\n```", None),
    ],
)
def test_failures_fall_back_to_local_rules(make_analyzer, completion, error):
    analyzer, _ = make_analyzer(completion, error)
    result = analyzer.analyze("Tomate")

    assert result.source == "local"
    assert not result.should_auto_apply
    assert result.suggested_tags == ("vegetarian", "vegan")
    assert result.suggested_category == "vegetables"
    assert FALLBACK_WARNING in result.analysis.warnings


def test_local_analysis_reports_allergen_confidence(make_analyzer):
    analyzer, _ = make_analyzer()
    analysis = analyzer.local_analysis("Käse")
    assert analysis.category.label == "dairy"
    assert analysis.overall_confidence == 75
    assert [(a.label, a.confidence) for a in analysis.allergens] == [("dairy", 90)]


def test_results_are_cached_per_name_and_language(make_analyzer):
    analyzer, client = make_analyzer(llm_answer())
    first = analyzer.analyze("Tomate")
    second = analyzer.analyze("Tomate")
    analyzer.analyze("Tomate", language="en")

    assert first is second
    assert len(client.calls) == 2


def test_extract_json_object_from_fenced_block():
    completion = 'Result:\n```json\n{"overallConfidence": 80}\n```\nDone.'
    assert extract_json_object(completion) == {"overallConfidence": 80}


def test_extract_json_object_without_json():
    with pytest.raises(ValueError):
        extract_json_object("no braces here")


def test_analyze_ingredient_batch_preserves_order(make_analyzer):
    analyzer, client = make_analyzer(llm_answer())
    names = ["Tomate", "Lachs", "Käse", "Zwiebel"]
    results = analyze_ingredient_batch(analyzer, names, max_workers=3)

    assert [r.analysis.ingredient for r in results] == names
    assert len(client.calls) == len(names)


def test_format_analysis_for_display(make_analyzer):
    analyzer, _ = make_analyzer()
    text = format_analysis_for_display(analyzer.local_analysis("Käse"))
    assert text == (
        "Käse (75% confidence) | Properties: vegetarian (80%) | "
        "Allergens: dairy (90%) | Category: dairy (75%)"
    )


def test_single_warning_string_is_kept_whole(make_analyzer):
    analyzer, _ = make_analyzer(llm_answer(warnings="check supplier"))
    result = analyzer.analyze("Tomate")
    assert result.analysis.warnings == ("check supplier",)
    assert not result.should_auto_apply
