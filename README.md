# goldbull

Building blocks for question answering and multimodal processing. The package
works with plain Python data and NumPy arrays. It covers:

- **Question analysis** (`goldbull.qa`). Classify a question into a
  `QuestionType` and work out the `AnswerFormat` it expects. Pull keywords out
  of a question and pick the passages of a context that are relevant to it.
- **Multimodal requests** (`goldbull.multimodal`). Typed text, image and audio
  inputs, plus request and response objects that round-trip through plain
  dictionaries.
- **Answer evaluation** (`goldbull.evaluation`). Levenshtein distance, word
  overlap similarity, scoring rules for each question type, and
  `EvaluationMetrics` over a set of samples.
- **QA pair generation** (`goldbull.qagen`). Split raw text into paragraphs,
  find entities and key concepts, and generate factual, conceptual,
  relationship and summary questions as `QASample` objects.
- **Datasets** (`goldbull.dataset`). `TrainingConfig` presets, `QADataset`
  with batching, and loaders for JSON and raw-text corpora.
- **Sampling and fusion** (`goldbull.sampling`). Softmax, deterministic
  nucleus sampling, modality weights and fusion weights.
- **Image preprocessing** (`goldbull.imaging`). Pixel reconstruction, gamma
  correction, tile-based adaptive histogram equalisation and ImageNet
  normalisation.
- **Latent utilities** (`goldbull.latent`). Hash-based Gaussian noise,
  reparameterisation, latent normalisation, and quantisation into the compact
  `GBIM` byte format.

## Requirements

- Python 3.10 or newer
- NumPy

## Examples

### Classify a question

```python
from goldbull.qa import QuestionClassifier, parse_question_type

analysis = QuestionClassifier().classify("Why does the sky appear blue?")
print(analysis.question_type, analysis.expected_format, analysis.keywords)

qtype = parse_question_type("yes-no")   # QuestionType.YES_NO style lookup
```

`parse_question_type` accepts the names `factual`, `analytical`, `yesno` /
`yes-no`, `definition`, `procedural`, `multiple-choice` / `multiplechoice` and
`open-ended` / `openended`, in any letter case. Any other name raises an error.

### Find relevant passages

```python
from goldbull.qa import ContextProcessor

processor = ContextProcessor(1000)
passages = processor.extract_relevant_passages(
    "What is the capital of France?",
    "Paris is the capital and most populous city of France. It lies on the Seine.",
)
```

### Score an answer

```python
from goldbull.evaluation import evaluate_answer_quality, levenshtein_distance
from goldbull.qa import QuestionType

levenshtein_distance("kitten", "sitting")   # 3
score = evaluate_answer_quality("Paris", "paris", QuestionType.FACTUAL)   # 1.0
```

An answer counts as correct when its score reaches 0.7.

### Generate QA pairs from text

```python
from goldbull.qagen import generate_qa_pairs

with open("corpus.txt", encoding="utf-8") as handle:
    samples = generate_qa_pairs(handle.read())

for sample in samples:
    print(sample.question_type, sample.question, "->", sample.answer)
```

### Preprocess an image

```python
from goldbull.imaging import preprocess_image

tensor = preprocess_image(bytes(224 * 224 * 3))   # shape (1, 3, 224, 224)
```

Empty image data is rejected with an error.

## Running the tests

Install the `test` extra and run pytest from the project root.