"""Token sampling, multimodal confidence and modality fusion weights."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from goldbull.multimodal import ModalityType

_NUCLEUS_P = np.float32(0.9)
_FALLBACK_TEMPERATURE = np.float32(0.8)
_HASH_SCALE = np.float32(10000.0)
_HASH_MODULUS = 10000
_U64_MASK = (1 << 64) - 1

_MODALITY_WEIGHTS = {
    ModalityType.TEXT: 1.0,
    ModalityType.VISION: 0.8,
    ModalityType.AUDIO: 0.6,
}


def softmax(logits: Sequence[float] | np.ndarray) -> np.ndarray:
    """Return the softmax of a one-dimensional vector of logits as float32."""
    values = np.asarray(logits, dtype=np.float32)
    if values.ndim != 1:
        raise ValueError("logits must be one-dimensional")
    if values.size == 0:
        raise ValueError("logits must not be empty")
    shifted = values - values.max()
    exps = np.exp(shifted)
    return (exps / exps.sum()).astype(np.float32)


def _argmax_last(values: np.ndarray) -> int:
    """Index of the largest value; ties and unordered values favour later entries."""
    best = 0
    for index in range(1, len(values)):
        if not values[best] > values[index]:
            best = index
    return best


def _probability_hash(probs: np.ndarray) -> int:
    total = 0
    for position, prob in enumerate(probs, start=1):
        scaled = np.float32(prob) * _HASH_SCALE
        bucket = int(scaled) if np.isfinite(scaled) and scaled > 0 else 0
        total = (total + bucket * position) & _U64_MASK
    return total


def nucleus_sample(logits: Sequence[float] | np.ndarray) -> int:
    """Pick a token index by deterministic nucleus (top-p = 0.9) sampling.

    The draw is derived from the probabilities themselves, so equal logits
    always give the same token. If the nucleus has no usable mass the most
    likely token under temperature 0.8 is returned.
    """
    values = np.asarray(logits, dtype=np.float32)
    probs = softmax(values)

    order = np.argsort(-probs, kind="stable")
    cumulative = np.cumsum(probs[order], dtype=np.float32)

    reached = np.nonzero(cumulative >= _NUCLEUS_P)[0]
    cutoff = int(reached[0]) + 1 if reached.size else len(order)
    nucleus_sum = np.float32(cumulative[cutoff - 1])

    if nucleus_sum > 0.0:
        bucket = _probability_hash(probs) % _HASH_MODULUS
        threshold = np.float32(bucket) / np.float32(_HASH_MODULUS) * nucleus_sum
        for token, running in zip(order[:cutoff], cumulative[:cutoff]):
            if running >= threshold:
                return int(token)

    tempered = softmax(values / _FALLBACK_TEMPERATURE)
    return _argmax_last(tempered)


def multimodal_confidence(modality_count: int) -> float:
    """Confidence for a result built from the given number of input modalities."""
    if modality_count < 0:
        raise ValueError("modality_count must not be negative")
    if modality_count == 0:
        return 0.0
    bonus = (modality_count - 1.0) * 0.1
    return 0.8 + min(bonus, 0.15)


def modality_weight(modality_type: ModalityType) -> float:
    """Prior importance of a modality when fusing representations."""
    return _MODALITY_WEIGHTS[modality_type]


def fuse_weights(
    energies: Sequence[float], modality_types: Sequence[ModalityType]
) -> list[float]:
    """Turn per-modality attention energies into normalised fusion weights."""
    if len(energies) != len(modality_types):
        raise ValueError("energies and modality_types must have the same length")
    if not energies:
        raise ValueError("no modalities to fuse")
    weighted = [
        float(energy) * modality_weight(kind)
        for energy, kind in zip(energies, modality_types)
    ]
    return [float(w) for w in softmax(weighted)]