import pytest

from goldbull.qa import QuestionType
from goldbull.qagen import (
    QASample,
    extract_concept_explanation,
    extract_entities,
    extract_entity_context,
    extract_key_concepts,
    extract_relationship_explanation,
    generate_extractive_summary,
    generate_qa_pairs,
    sample_from_dict,
    sample_to_dict,
    segment_text,
)

PARAGRAPH = (
    "Marie Curie worked in Paris with Pierre Curie on radioactivity research. "
    "Radioactivity research changed physics forever and the laboratory became famous "
    "across the world for careful measurement. The discoveries of Marie Curie earned "
    "international recognition and inspired generations of scientists everywhere."
)


def test_sample_round_trip():
    sample = QASample("Q?", "ctx", "A", QuestionType.YES_NO, {"k": "v"})
    assert sample_from_dict(sample_to_dict(sample)) == sample


def test_sample_dict_uses_variant_name():
    sample = QASample("Q?", None, "A", QuestionType.MULTIPLE_CHOICE, {})
    assert sample_to_dict(sample)["question_type"] == "MultipleChoice"


def test_sample_missing_context_is_none():
    data = {"question": "Q", "answer": "A", "question_type": "Factual", "metadata": {}}
    assert sample_from_dict(data).context is None


@pytest.mark.parametrize(
    "data",
    [
        {"question": "Q", "answer": "A", "question_type": "Bogus", "metadata": {}},
        {"question": "Q", "question_type": "Factual", "metadata": {}},
        {"question": "Q", "answer": "A", "question_type": "Factual"},
        {"question": 1, "answer": "A", "question_type": "Factual", "metadata": {}},
        ["not", "an", "object"],
    ],
)
def test_sample_from_dict_rejects_malformed(data):
    with pytest.raises(ValueError):
        sample_from_dict(data)


def test_segment_text_blank_line_ends_paragraph():
    first = "This line is comfortably longer than twenty characters"
    second = "Another line that also exceeds the twenty character limit"
    content = f"{first}\nshort\n\n{second}\n"
    assert segment_text(content) == [first, second]


def test_segment_text_joins_lines_with_space():
    a = "The first line of a paragraph is long enough"
    b = "and the second line continues the same thought"
    assert segment_text(f"{a}\n{b}") == [f"{a} {b}"]


def test_segment_text_long_sentence_closes_paragraph():
    assert segment_text(PARAGRAPH + "\n" + PARAGRAPH) == [PARAGRAPH, PARAGRAPH]


def test_extract_entities_multiword_and_suffix():
    assert extract_entities("We visited Paris and New York yesterday") == [
        "Paris",
        "New York",
        "York",
    ]


def test_extract_entities_skips_sentence_start():
    assert extract_entities("The cat sat. Dogs run") == ["The"]


def test_extract_key_concepts():
    concepts = extract_key_concepts("network network extraordinary small")
    assert set(concepts) == {"network", "extraordinary"}


def test_entity_context_and_fallback():
    assert extract_entity_context("Alice runs. Bob walks.", "Bob") == "Bob walks"
    assert (
        extract_entity_context("Alice runs.", "Zed")
        == "Information about Zed is mentioned in the context."
    )


def test_concept_explanation_ignores_case():
    assert extract_concept_explanation("Intro. Physics is fun.", "PHYSICS") == "Physics is fun"
    assert extract_concept_explanation("Intro.", "gravity") == "The text discusses gravity"


def test_relationship_explanation():
    text = "Alice runs. Alice and Bob walk."
    assert extract_relationship_explanation(text, "Alice", "Bob") == "Alice and Bob walk"
    assert (
        extract_relationship_explanation(text, "Alice", "Zed")
        == "Alice and Zed are related as described in the text."
    )


def test_extractive_summary_first_sentence():
    assert generate_extractive_summary(PARAGRAPH) == PARAGRAPH.split(".")[0]


def test_generate_qa_pairs_counts_match_extractors():
    pairs = generate_qa_pairs(PARAGRAPH)
    entities = extract_entities(PARAGRAPH)
    concepts = extract_key_concepts(PARAGRAPH)
    by_type = [p.question_type for p in pairs]
    assert by_type.count(QuestionType.FACTUAL) == len(entities)
    assert by_type.count(QuestionType.OPEN_ENDED) == len(concepts)
    assert by_type.count(QuestionType.ANALYTICAL) == 1
    assert by_type.count(QuestionType.SUMMARIZATION) == 1
    assert all(p.context == PARAGRAPH for p in pairs)


def test_generate_qa_pairs_content():
    pairs = generate_qa_pairs(PARAGRAPH)
    factual = [p for p in pairs if p.question_type is QuestionType.FACTUAL]
    first = factual[0]
    assert first.question == f"What is mentioned about {first.metadata['entity']}?"
    assert first.metadata["generation_method"] == "entity_based"

    relation = next(p for p in pairs if p.question_type is QuestionType.ANALYTICAL)
    entities = extract_entities(PARAGRAPH)
    assert relation.metadata["entity1"] == entities[0]
    assert relation.metadata["entity2"] == entities[1]

    summary = next(p for p in pairs if p.question_type is QuestionType.SUMMARIZATION)
    assert summary.question == "What is the main idea of this text?"
    assert summary.answer == generate_extractive_summary(PARAGRAPH)


def test_generate_qa_pairs_skips_short_text():
    assert generate_qa_pairs("A short line of text here.") == []