"""Training configuration, QA datasets and their loaders."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from goldbull.qagen import QASample, generate_qa_pairs, sample_from_dict

Encoder = Callable[[str], list[int]]


@dataclass
class TrainingConfig:
    """Hyperparameters for training the question answering model."""

    epochs: int = 10
    batch_size: int = 8
    learning_rate: float = 1e-4
    weight_decay: float = 0.01
    gradient_clip_norm: float = 1.0
    validation_split: float = 0.1
    early_stopping_patience: int = 3
    checkpoint_interval: int = 1
    max_sequence_length: int = 512


@dataclass
class QABatch:
    """Tokenised questions, contexts and answers of one batch."""

    questions: list[list[int]] = field(default_factory=list)
    contexts: list[list[int]] = field(default_factory=list)
    answers: list[list[int]] = field(default_factory=list)


class QADataset:
    """A list of QA samples served in consecutive tokenised batches."""

    def __init__(self, encode: Encoder, samples: Iterable[QASample] = ()) -> None:
        self.encode = encode
        self.samples: list[QASample] = list(samples)
        self._current_batch = 0

    def add_sample(self, sample: QASample) -> None:
        """Append a sample to the dataset."""
        self.samples.append(sample)

    def _make_batch(self, samples: list[QASample]) -> QABatch:
        batch = QABatch()
        for sample in samples:
            batch.questions.append(list(self.encode(sample.question)))
            batch.contexts.append(
                list(self.encode(sample.context)) if sample.context is not None else []
            )
            batch.answers.append(list(self.encode(sample.answer)))
        return batch

    def next_batch(self, batch_size: int) -> QABatch | None:
        """Return the next batch, or None once every sample has been served."""
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        start = self._current_batch * batch_size
        if start >= len(self.samples):
            return None
        batch = self._make_batch(self.samples[start:start + batch_size])
        self._current_batch += 1
        return batch

    def reset_batches(self) -> None:
        """Start serving batches from the beginning again."""
        self._current_batch = 0

    def batches(self, batch_size: int) -> Iterator[QABatch]:
        """Yield every batch from the beginning of the dataset."""
        self.reset_batches()
        while (batch := self.next_batch(batch_size)) is not None:
            yield batch

    def __len__(self) -> int:
        return len(self.samples)


def sample_training_config(epochs: int = 3, batch_size: int = 4) -> TrainingConfig:
    """Configuration for a quick run on a subset of the data."""
    return TrainingConfig(
        epochs=epochs,
        batch_size=batch_size,
        learning_rate=1e-3,
        weight_decay=0.01,
        gradient_clip_norm=1.0,
        validation_split=0.2,
        early_stopping_patience=2,
        checkpoint_interval=1,
        max_sequence_length=256,
    )


def full_training_config(
    epochs: int = 10, batch_size: int = 8, learning_rate: float = 1e-4
) -> TrainingConfig:
    """Configuration for training on the full dataset."""
    return TrainingConfig(
        epochs=epochs,
        batch_size=batch_size,
        learning_rate=learning_rate,
        weight_decay=0.01,
        gradient_clip_norm=1.0,
        validation_split=0.1,
        early_stopping_patience=3,
        checkpoint_interval=1,
        max_sequence_length=512,
    )


def _read_samples(path: str | Path) -> list[QASample]:
    data: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("expected a JSON array of samples")
    return [sample_from_dict(item) for item in data]


def load_test_samples(path: str | Path) -> list[QASample]:
    """Read a JSON array of samples from a file."""
    return _read_samples(path)


def load_json_dataset(path: str | Path, encode: Encoder) -> QADataset:
    """Load a dataset from a JSON array of samples."""
    return QADataset(encode, _read_samples(path))


def load_moscar_dataset(path: str | Path, encode: Encoder) -> QADataset:
    """Build a dataset of generated QA pairs from a raw text corpus."""
    content = Path(path).read_text(encoding="utf-8")
    return QADataset(encode, generate_qa_pairs(content))


def load_training_dataset(
    path: str | Path, encode: Encoder, limit: int | None = None
) -> QADataset:
    """Load a JSON dataset (keeping at most ``limit`` samples) or a raw text corpus."""
    path = Path(path)
    if path.suffix == ".json":
        dataset = load_json_dataset(path, encode)
        if limit is not None:
            dataset.samples = dataset.samples[:limit]
        return dataset
    return load_moscar_dataset(path, encode)