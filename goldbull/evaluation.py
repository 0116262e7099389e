"""Scoring of predicted answers against expected answers."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from goldbull.qa import QARequest, QAResponse, QuestionType

if TYPE_CHECKING:
    from goldbull.qagen import QASample

_STOP_WORDS = frozenset(
    {"the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"}
)
_YES_WORDS = ("yes", "true", "correct", "right", "affirmative")
_NO_WORDS = ("no", "false", "incorrect", "wrong", "negative")
_DEFINITION_WORDS = ("is", "are", "means", "refers", "defined", "describes")
_CORRECT_THRESHOLD = 0.7


@dataclass
class EvaluationMetrics:
    """Aggregate results of evaluating a model on test samples."""

    accuracy: float
    avg_confidence: float
    total_samples: int
    correct_answers: int


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def is_stop_word(word: str) -> bool:
    """Return True if the word is one of the short connective stop words."""
    return word in _STOP_WORDS


def levenshtein_distance(s1: str, s2: str) -> int:
    """Return the character-level edit distance between two strings."""
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)
    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i]
        for j, c2 in enumerate(s2, start=1):
            cost = 0 if c1 == c2 else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def semantic_similarity(text1: str, text2: str) -> float:
    """Blend word-level Jaccard overlap with normalised edit similarity."""
    words1 = set(text1.split())
    words2 = set(text2.split())
    union = words1 | words2
    jaccard = len(words1 & words2) / len(union) if union else 0.0

    max_length = max(_byte_len(text1), _byte_len(text2))
    if max_length > 0:
        edit_similarity = 1.0 - levenshtein_distance(text1, text2) / max_length
    else:
        edit_similarity = 1.0
    return jaccard * 0.7 + edit_similarity * 0.3


def extract_option_letter(text: str) -> str | None:
    """Return the first upper-case ASCII letter from A to E, if any."""
    return next((ch for ch in text if "A" <= ch <= "E"), None)


def evaluate_yes_no_answer(predicted: str, expected: str) -> float:
    """Score agreement of yes/no polarity between two answers."""
    pred_yes = any(word in predicted for word in _YES_WORDS)
    pred_no = any(word in predicted for word in _NO_WORDS)
    exp_yes = any(word in expected for word in _YES_WORDS)
    exp_no = any(word in expected for word in _NO_WORDS)

    if (pred_yes and exp_yes) or (pred_no and exp_no):
        return 1.0
    if (pred_yes and exp_no) or (pred_no and exp_yes):
        return 0.0
    return 0.5


def evaluate_factual_answer(predicted: str, expected: str) -> float:
    """Return the fraction of the expected key facts present in the prediction.

    The result is NaN when the expected answer holds no key facts.
    """
    facts = [w for w in expected.split() if _byte_len(w) > 3 and not is_stop_word(w)]
    if not facts:
        return math.nan
    predicted_words = set(predicted.split())
    return sum(fact in predicted_words for fact in facts) / len(facts)


def evaluate_definition_answer(predicted: str, expected: str) -> float:
    """Score a definition, boosting answers that share a defining phrase."""
    has_pattern = any(w in predicted and w in expected for w in _DEFINITION_WORDS)
    similarity = semantic_similarity(predicted, expected)
    if has_pattern:
        similarity *= 1.2
    return min(similarity, 1.0)


def evaluate_multiple_choice(predicted: str, expected: str) -> float:
    """Score a multiple-choice answer by its option letter, else by similarity."""
    option = extract_option_letter(predicted)
    if option is not None and option == extract_option_letter(expected):
        return 1.0
    return semantic_similarity(predicted, expected)


def evaluate_summary_answer(predicted: str, expected: str) -> float:
    """Score a summary by coverage of the expected key concepts, leniently.

    The result is NaN when the expected answer holds no key concepts.
    """
    concepts = [w for w in expected.split() if _byte_len(w) > 4 and not is_stop_word(w)]
    if not concepts:
        return math.nan
    predicted_words = set(predicted.split())
    covered = sum(
        any(word in concept or concept in word for word in predicted_words)
        for concept in concepts
    )
    return covered / len(concepts) * 1.1


def evaluate_answer_quality(predicted: str, expected: str, question_type: QuestionType) -> float:
    """Return a score in [0, 1] for how well the prediction matches the expected answer."""
    predicted_clean = predicted.strip().lower()
    expected_clean = expected.strip().lower()
    if predicted_clean == expected_clean:
        return 1.0

    semantic = semantic_similarity(predicted_clean, expected_clean)
    type_scorers = {
        QuestionType.YES_NO: evaluate_yes_no_answer,
        QuestionType.FACTUAL: evaluate_factual_answer,
        QuestionType.DEFINITION: evaluate_definition_answer,
        QuestionType.MULTIPLE_CHOICE: evaluate_multiple_choice,
        QuestionType.SUMMARIZATION: evaluate_summary_answer,
    }
    scorer = type_scorers.get(question_type)
    type_score = scorer(predicted_clean, expected_clean) if scorer else semantic

    combined = semantic * 0.6 + type_score * 0.4

    expected_len = _byte_len(expected_clean)
    ratio = _byte_len(predicted_clean) / expected_len if expected_len else math.inf
    penalty = 0.8 if ratio > 3.0 or ratio < 0.3 else 1.0

    score = combined * penalty
    if math.isnan(score):
        return 0.0
    return max(0.0, min(score, 1.0))


def evaluate(
    samples: Iterable[QASample],
    answer: Callable[[QARequest], QAResponse],
) -> EvaluationMetrics:
    """Answer every sample and measure accuracy and mean confidence.

    Accuracy and mean confidence are NaN when there are no samples.
    """
    samples = list(samples)
    correct = 0
    total_confidence = 0.0
    for sample in samples:
        request = QARequest(
            question=sample.question,
            context=sample.context,
            question_type=sample.question_type,
            max_answer_length=100,
            temperature=0.1,
            use_context=True,
        )
        response = answer(request)
        score = evaluate_answer_quality(response.answer, sample.answer, sample.question_type)
        if score >= _CORRECT_THRESHOLD:
            correct += 1
        total_confidence += response.confidence

    total = len(samples)
    if total == 0:
        return EvaluationMetrics(math.nan, math.nan, 0, 0)
    return EvaluationMetrics(
        accuracy=correct / total,
        avg_confidence=total_confidence / total,
        total_samples=total,
        correct_answers=correct,
    )