import math

import pytest

from goldbull.evaluation import (
    EvaluationMetrics,
    evaluate,
    evaluate_answer_quality,
    evaluate_definition_answer,
    evaluate_factual_answer,
    evaluate_multiple_choice,
    evaluate_summary_answer,
    evaluate_yes_no_answer,
    extract_option_letter,
    is_stop_word,
    levenshtein_distance,
    semantic_similarity,
)
from goldbull.qa import QAResponse, QuestionType
from goldbull.qagen import QASample


def test_stop_words_are_case_sensitive():
    assert is_stop_word("the")
    assert not is_stop_word("The")
    assert not is_stop_word("paris")


def test_levenshtein_classic_example():
    assert levenshtein_distance("kitten", "sitting") == 3


@pytest.mark.parametrize("text", ["", "abc", "héllo"])
def test_levenshtein_identity_and_empty(text):
    assert levenshtein_distance(text, text) == 0
    assert levenshtein_distance("", text) == len(text)
    assert levenshtein_distance(text, "") == len(text)


@pytest.mark.parametrize("a,b", [("flaw", "lawn"), ("abc", "xyz"), ("paris", "parish")])
def test_levenshtein_symmetric(a, b):
    assert levenshtein_distance(a, b) == levenshtein_distance(b, a)
    assert levenshtein_distance(a, b) <= max(len(a), len(b))


def test_semantic_similarity_identical_is_one():
    assert semantic_similarity("the cat sat", "the cat sat") == pytest.approx(1.0)


def test_semantic_similarity_both_empty_uses_edit_weight():
    assert semantic_similarity("", "") == pytest.approx(0.3)


@pytest.mark.parametrize("a,b", [("red fox", "blue fox"), ("abc", "xyz"), ("a", "")])
def test_semantic_similarity_bounded(a, b):
    assert 0.0 <= semantic_similarity(a, b) <= 1.0


def test_option_letter():
    assert extract_option_letter("answer B") == "B"
    assert extract_option_letter("answer b") is None
    assert extract_option_letter("F") is None


def test_yes_no_scores():
    assert evaluate_yes_no_answer("yes", "yes") == 1.0
    assert evaluate_yes_no_answer("yes", "no") == 0.0
    assert evaluate_yes_no_answer("maybe", "perhaps") == 0.5


def test_factual_coverage_extremes():
    assert evaluate_factual_answer("capital paris", "capital paris") == 1.0
    assert evaluate_factual_answer("zzz", "capital paris") == 0.0
    assert math.isnan(evaluate_factual_answer("x", "a b"))


def test_definition_capped_at_one():
    assert evaluate_definition_answer("a cat is an animal", "a cat is an animal") == 1.0


def test_multiple_choice_option_match():
    assert evaluate_multiple_choice("B", "B") == 1.0
    assert evaluate_multiple_choice("abc", "abc") == pytest.approx(semantic_similarity("abc", "abc"))


def test_summary_lenient_boost():
    assert evaluate_summary_answer("the capital city", "capital") == pytest.approx(1.1)


def test_answer_quality_exact_match_ignores_case_and_space():
    assert evaluate_answer_quality("  Paris ", "paris", QuestionType.FACTUAL) == 1.0


def test_answer_quality_nan_is_clamped_to_zero():
    assert evaluate_answer_quality("abc", "a", QuestionType.FACTUAL) == 0.0


@pytest.mark.parametrize("qtype", list(QuestionType))
def test_answer_quality_bounded(qtype):
    score = evaluate_answer_quality("the red fox runs", "a red fox is running", qtype)
    assert 0.0 <= score <= 1.0


def _samples():
    return [
        QASample("What is the capital?", "Paris is the capital.", "paris", QuestionType.FACTUAL, {}),
        QASample("Is it big?", None, "yes", QuestionType.YES_NO, {}),
    ]


def test_evaluate_all_correct():
    samples = _samples()
    answers = {s.question: s.answer for s in samples}

    def answer(request):
        return QAResponse(answers[request.question], 0.5, request.question_type)

    metrics = evaluate(samples, answer)
    assert metrics.total_samples == len(samples)
    assert metrics.correct_answers == len(samples)
    assert metrics.accuracy == 1.0
    assert metrics.avg_confidence == pytest.approx(0.5)


def test_evaluate_passes_request_fields():
    seen = []

    def answer(request):
        seen.append((request.question, request.context, request.max_answer_length))
        return QAResponse("zzzz", 0.25, request.question_type)

    samples = [_samples()[0]]
    metrics = evaluate(samples, answer)
    assert seen == [("What is the capital?", "Paris is the capital.", 100)]
    assert metrics.correct_answers == 0
    assert metrics.accuracy == 0.0


def test_evaluate_empty_is_nan():
    metrics = evaluate([], lambda request: QAResponse("", 1.0, request.question_type))
    assert isinstance(metrics, EvaluationMetrics)
    assert metrics.total_samples == 0
    assert math.isnan(metrics.accuracy)
    assert math.isnan(metrics.avg_confidence)