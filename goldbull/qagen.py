"""Training samples and heuristic question-answer pair generation from raw text."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from goldbull.evaluation import is_stop_word
from goldbull.qa import QuestionType


@dataclass
class QASample:
    """One training example: a question, optional context and its answer."""

    question: str
    context: str | None
    answer: str
    question_type: QuestionType
    metadata: dict[str, str] = field(default_factory=dict)


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _strip_non_alnum(word: str) -> str:
    start, end = 0, len(word)
    while start < end and not word[start].isalnum():
        start += 1
    while end > start and not word[end - 1].isalnum():
        end -= 1
    return word[start:end]


def _starts_upper(word: str) -> bool:
    return bool(word) and word[0].isupper()


def _field(data: Any, key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in data:
        raise ValueError(f"missing field '{key}'")
    value = data[key]
    if not isinstance(value, kind):
        raise ValueError(f"field '{key}' has the wrong type")
    return value


def sample_to_dict(sample: QASample) -> dict[str, Any]:
    """Return the JSON-ready form of a sample."""
    return {
        "question": sample.question,
        "context": sample.context,
        "answer": sample.answer,
        "question_type": sample.question_type.value,
        "metadata": dict(sample.metadata),
    }


def sample_from_dict(data: Any) -> QASample:
    """Build a sample from its JSON-ready form, raising ValueError if malformed."""
    if not isinstance(data, dict):
        raise ValueError("a sample must be an object")
    context = data.get("context")
    if context is not None and not isinstance(context, str):
        raise ValueError("field 'context' has the wrong type")
    type_name = _field(data, "question_type", str)
    try:
        question_type = QuestionType(type_name)
    except ValueError:
        raise ValueError(f"unknown question type {type_name!r}") from None
    metadata = _field(data, "metadata", dict)
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in metadata.items()):
        raise ValueError("field 'metadata' must map strings to strings")
    return QASample(
        question=_field(data, "question", str),
        context=context,
        answer=_field(data, "answer", str),
        question_type=question_type,
        metadata=dict(metadata),
    )


def segment_text(content: str) -> list[str]:
    """Group lines into paragraphs, ignoring very short lines."""
    paragraphs: list[str] = []
    current = ""
    for line in content.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            if current.strip():
                paragraphs.append(current.strip())
                current = ""
        elif _byte_len(trimmed) > 20:
            current = f"{current} {trimmed}" if current else trimmed
            if trimmed.endswith((".", "!", "?")) and _byte_len(current) > 100:
                paragraphs.append(current.strip())
                current = ""
    if current.strip():
        paragraphs.append(current.strip())
    return paragraphs


def extract_entities(text: str) -> list[str]:
    """Return capitalised words and runs of words, in order of first appearance."""
    words = text.split()
    entities: list[str] = []
    for i, word in enumerate(words):
        cleaned = _strip_non_alnum(word)
        if _byte_len(cleaned) <= 2 or not _starts_upper(cleaned):
            continue
        if i > 0 and words[i - 1].endswith("."):
            continue
        parts = [cleaned]
        for following in words[i + 1:]:
            next_word = _strip_non_alnum(following)
            if not (_starts_upper(next_word) and _byte_len(next_word) > 1):
                break
            parts.append(next_word)
        entity = " ".join(parts)
        if entity not in entities:
            entities.append(entity)
    return entities


def extract_key_concepts(text: str) -> list[str]:
    """Return long or repeated lower-case words, in order of first appearance."""
    counts = Counter(
        cleaned
        for cleaned in (_strip_non_alnum(word.lower()) for word in text.split())
        if _byte_len(cleaned) > 4 and not is_stop_word(cleaned)
    )
    return [word for word, count in counts.items() if count > 1 or _byte_len(word) > 8]


def _sentences(text: str) -> list[str]:
    return text.split(".")


def extract_entity_context(text: str, entity: str) -> str:
    """Return the first sentence mentioning the entity."""
    for sentence in _sentences(text):
        if entity in sentence:
            return sentence.strip()
    return f"Information about {entity} is mentioned in the context."


def extract_concept_explanation(text: str, concept: str) -> str:
    """Return the first sentence mentioning the concept, ignoring case."""
    needle = concept.lower()
    for sentence in _sentences(text):
        if needle in sentence.lower():
            return sentence.strip()
    return f"The text discusses {concept}"


def extract_relationship_explanation(text: str, entity1: str, entity2: str) -> str:
    """Return the first sentence mentioning both entities."""
    for sentence in _sentences(text):
        if entity1 in sentence and entity2 in sentence:
            return sentence.strip()
    return f"{entity1} and {entity2} are related as described in the text."


def generate_extractive_summary(text: str) -> str:
    """Return the first sentence of the text."""
    return _sentences(text)[0].strip()


def generate_qa_pairs(content: str) -> list[QASample]:
    """Generate factual, conceptual, relational and summary samples from raw text."""
    pairs: list[QASample] = []
    for paragraph in segment_text(content):
        if _byte_len(paragraph.strip()) < 50:
            continue
        entities = extract_entities(paragraph)
        concepts = extract_key_concepts(paragraph)

        for entity in entities:
            pairs.append(
                QASample(
                    question=f"What is mentioned about {entity}?",
                    context=paragraph,
                    answer=extract_entity_context(paragraph, entity),
                    question_type=QuestionType.FACTUAL,
                    metadata={"entity": entity, "generation_method": "entity_based"},
                )
            )

        for concept in concepts:
            pairs.append(
                QASample(
                    question=f"What does this text explain about {concept}?",
                    context=paragraph,
                    answer=extract_concept_explanation(paragraph, concept),
                    question_type=QuestionType.OPEN_ENDED,
                    metadata={"concept": concept, "generation_method": "concept_based"},
                )
            )

        if len(entities) >= 2:
            first, second = entities[0], entities[1]
            pairs.append(
                QASample(
                    question=f"What is the relationship between {first} and {second}?",
                    context=paragraph,
                    answer=extract_relationship_explanation(paragraph, first, second),
                    question_type=QuestionType.ANALYTICAL,
                    metadata={
                        "entity1": first,
                        "entity2": second,
                        "generation_method": "relationship_based",
                    },
                )
            )

        if _byte_len(paragraph) > 200:
            pairs.append(
                QASample(
                    question="What is the main idea of this text?",
                    context=paragraph,
                    answer=generate_extractive_summary(paragraph),
                    question_type=QuestionType.SUMMARIZATION,
                    metadata={"generation_method": "summary_based"},
                )
            )
    return pairs