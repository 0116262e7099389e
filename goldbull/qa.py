"""Question answering data types, question classification and context processing."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum


class QuestionType(Enum):
    """Kinds of question the answering model handles."""

    FACTUAL = "Factual"
    ANALYTICAL = "Analytical"
    YES_NO = "YesNo"
    MULTIPLE_CHOICE = "MultipleChoice"
    OPEN_ENDED = "OpenEnded"
    DEFINITION = "Definition"
    PROCEDURAL = "Procedural"
    SUMMARIZATION = "Summarization"


class AnswerFormat(Enum):
    """Shape of the answer a question calls for."""

    SHORT = "Short"
    DETAILED = "Detailed"
    BOOLEAN = "Boolean"
    LIST = "List"
    NUMERICAL = "Numerical"
    DATE_TIME = "DateTime"


@dataclass
class AnswerSource:
    """A source that backs an answer."""

    id: str
    title: str
    excerpt: str
    relevance_score: float
    url: str | None = None


@dataclass
class QAMetadata:
    """Bookkeeping attached to an answer."""

    generation_time_ms: int = 0
    model_version: str = "goldbull-sage-1.0"
    question_tokens: int = 0
    context_tokens: int = 0
    answer_tokens: int = 0
    processing_info: dict[str, str] = field(default_factory=dict)


@dataclass
class QARequest:
    """A question, with optional context, to be answered."""

    question: str = ""
    context: str | None = None
    question_type: QuestionType = QuestionType.FACTUAL
    max_answer_length: int = 100
    temperature: float = 0.1
    use_context: bool = True
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class QAResponse:
    """An answer produced for a request."""

    answer: str
    confidence: float
    question_type: QuestionType
    sources: list[AnswerSource] = field(default_factory=list)
    metadata: QAMetadata = field(default_factory=QAMetadata)


@dataclass
class QuestionAnalysis:
    """Result of classifying a question."""

    question_type: QuestionType
    keywords: list[str]
    expected_format: AnswerFormat
    complexity: float


_STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "can", "this", "that", "these", "those",
    }
)

_KEYWORD_STOP_WORDS = frozenset(
    {
        "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
        "from", "as", "is", "was", "are", "were", "be", "been", "being", "have", "has",
        "had", "do", "does", "did", "will", "would", "could", "should", "may", "might",
        "can", "this", "that", "these", "those", "a", "an", "it", "he", "she", "they",
        "we", "you", "i", "me", "my", "your", "his", "her", "its", "our", "their",
    }
)

_EXPECTED_FORMATS = {
    QuestionType.YES_NO: AnswerFormat.BOOLEAN,
    QuestionType.FACTUAL: AnswerFormat.SHORT,
    QuestionType.ANALYTICAL: AnswerFormat.DETAILED,
    QuestionType.DEFINITION: AnswerFormat.DETAILED,
    QuestionType.PROCEDURAL: AnswerFormat.LIST,
}

_QUESTION_TYPE_NAMES = {
    "factual": QuestionType.FACTUAL,
    "analytical": QuestionType.ANALYTICAL,
    "yesno": QuestionType.YES_NO,
    "yes-no": QuestionType.YES_NO,
    "definition": QuestionType.DEFINITION,
    "procedural": QuestionType.PROCEDURAL,
    "multiple-choice": QuestionType.MULTIPLE_CHOICE,
    "multiplechoice": QuestionType.MULTIPLE_CHOICE,
    "open-ended": QuestionType.OPEN_ENDED,
    "openended": QuestionType.OPEN_ENDED,
}

_MAX_KEYWORDS = 15
_SENTENCE_END = re.compile(r"[.!?]")


def is_stop_word(word: str) -> bool:
    """Return True if the word, in any case, is a common English stop word."""
    return word.lower() in _STOP_WORDS


def parse_question_type(text: str) -> QuestionType:
    """Parse a question type name as given on a command line."""
    try:
        return _QUESTION_TYPE_NAMES[text.lower()]
    except KeyError:
        raise ValueError(f"Unknown question type: {text}") from None


def _strip_non_alnum(word: str) -> str:
    start, end = 0, len(word)
    while start < end and not word[start].isalnum():
        start += 1
    while end > start and not word[end - 1].isalnum():
        end -= 1
    return word[start:end]


def _is_likely_named_entity(word: str) -> bool:
    if len(word) < 2:
        return False
    return word[0].isupper() or any(c.isnumeric() for c in word)


class QuestionClassifier:
    """Classifies questions by matching characteristic phrases."""

    def __init__(self) -> None:
        self.patterns: dict[QuestionType, tuple[str, ...]] = {
            QuestionType.FACTUAL: ("what is", "who is", "where is", "when did", "which"),
            QuestionType.YES_NO: (
                "is", "are", "can", "could", "will", "would", "do", "does", "did",
            ),
            QuestionType.ANALYTICAL: (
                "why", "how", "explain", "analyze", "compare", "evaluate",
            ),
            QuestionType.DEFINITION: ("define", "what does", "meaning of", "definition"),
            QuestionType.PROCEDURAL: ("how to", "steps to", "procedure", "process"),
        }

    def classify(self, question: str) -> QuestionAnalysis:
        """Determine the type, keywords, answer format and complexity of a question."""
        lowered = question.lower()
        scores = {
            qtype: sum(pattern in lowered for pattern in patterns)
            for qtype, patterns in self.patterns.items()
        }
        best = max(scores, key=scores.__getitem__, default=None)
        if best is None or scores[best] == 0:
            question_type = QuestionType.OPEN_ENDED
        else:
            question_type = best

        keywords = ContextProcessor(1000).extract_keywords(question, None)
        expected_format = _EXPECTED_FORMATS.get(question_type, AnswerFormat.SHORT)
        complexity = min(
            len(question.encode("utf-8")) / 100.0 + len(keywords) / 10.0, 1.0
        )
        return QuestionAnalysis(question_type, keywords, expected_format, complexity)


class ContextProcessor:
    """Extracts keywords and relevant passages from questions and contexts."""

    def __init__(self, max_context_length: int = 2048) -> None:
        self.max_context_length = max_context_length

    def extract_keywords(self, question: str, context: str | None = None) -> list[str]:
        """Return up to 15 sorted, distinct keywords and likely named entities."""
        text = f"{question} {context}" if context is not None else question
        words = text.split()

        frequencies = Counter(
            cleaned
            for cleaned in (_strip_non_alnum(word).lower() for word in words)
            if len(cleaned) > 2 and cleaned not in _KEYWORD_STOP_WORDS
        )
        keywords = {word for word, count in frequencies.items() if count > 1 or len(word) > 5}
        keywords.update(
            cleaned
            for cleaned in map(_strip_non_alnum, words)
            if _is_likely_named_entity(cleaned)
        )
        return sorted(keywords)[:_MAX_KEYWORDS]

    def extract_relevant_passages(self, question: str, context: str) -> list[str]:
        """Return context sentences sharing keywords with the question, best first."""
        keywords = QuestionClassifier().classify(question).keywords
        sentences = [s.strip() for s in _SENTENCE_END.split(context) if s.strip()]

        def score(sentence: str) -> float:
            lowered = sentence.lower()
            hits = sum(1.0 for keyword in keywords if keyword in lowered)
            return hits / max(len(keywords), 1)

        scored = sorted(((score(s), s) for s in sentences), key=lambda item: -item[0])

        passages: list[str] = []
        total_length = 0
        for relevance, sentence in scored:
            if relevance > 0.0 and total_length + len(sentence) <= self.max_context_length:
                total_length += len(sentence)
                passages.append(sentence)
        return passages