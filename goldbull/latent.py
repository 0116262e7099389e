"""Latent-space sampling, normalisation and byte encoding of generated images."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

_U64_MASK = (1 << 64) - 1
_U64_MAX_F = float(_U64_MASK)
_NOISE_TEMPERATURE = float(np.float32(0.8))
_LATENT_TEMPERATURE = np.float32(0.9)
_L2_EPSILON = np.float32(1e-8)
_VAR_EPSILON = np.float32(1e-6)

GBIM_MAGIC = b"GBIM"
GBIM_VERSION = 0x01


def mix64(value: int) -> int:
    """Scramble a 64-bit integer with the SplitMix64 finaliser."""
    h = value & _U64_MASK
    h ^= h >> 30
    h = (h * 0xBF58476D1CE4E5B9) & _U64_MASK
    h ^= h >> 27
    h = (h * 0x94D049BB133111EB) & _U64_MASK
    h ^= h >> 31
    return h


def _uniform(seed: int, offset: int) -> float:
    return mix64((seed + offset) & _U64_MASK) / _U64_MAX_F


def _box_muller(u1: float, u2: float) -> float:
    log_u1 = math.log(u1) if u1 > 0.0 else -math.inf
    return math.sqrt(-2.0 * log_u1) * math.cos(2.0 * math.pi * u2)


def gaussian_noise(seed: int, size: int) -> np.ndarray:
    """Return ``size`` deterministic N(0, 0.8^2) samples derived from ``seed``."""
    if size < 0:
        raise ValueError("size must not be negative")
    seed &= _U64_MASK
    values = [
        _box_muller(_uniform(seed, i), _uniform(seed, i + size)) * _NOISE_TEMPERATURE
        for i in range(size)
    ]
    return np.array(values, dtype=np.float32)


def reparameterize(mu: np.ndarray, log_var: np.ndarray, noise: np.ndarray) -> np.ndarray:
    """Return ``mu + exp(log_var / 2) * noise``, broadcasting the noise."""
    mu = np.asarray(mu, dtype=np.float32)
    log_var = np.asarray(log_var, dtype=np.float32)
    noise = np.asarray(noise, dtype=np.float32)
    std = np.exp(log_var * np.float32(0.5))
    return (mu + std * np.broadcast_to(noise, mu.shape)).astype(np.float32)


def _standardize(values: np.ndarray) -> np.ndarray:
    mean = values.mean(axis=-1, keepdims=True, dtype=np.float32)
    variance = ((values - mean) ** 2).mean(axis=-1, keepdims=True, dtype=np.float32)
    return (values - mean) / np.sqrt(variance + _VAR_EPSILON)


def normalize_latent(latent: np.ndarray) -> np.ndarray:
    """L2-normalise, standardise, temper and bound latents along the last axis."""
    values = np.asarray(latent, dtype=np.float32)
    norm = np.sqrt((values**2).sum(axis=-1, keepdims=True, dtype=np.float32)) + _L2_EPSILON
    standardized = _standardize(values / norm)
    return np.tanh(standardized * _LATENT_TEMPERATURE).astype(np.float32)


def standardize_features(features: np.ndarray) -> np.ndarray:
    """Give features zero mean and unit variance along the last axis."""
    return _standardize(np.asarray(features, dtype=np.float32)).astype(np.float32)


def _quantize(feature: float) -> int:
    if math.isnan(feature):
        return 0
    scaled = (math.tanh(feature) + 1.0) * 127.5
    return int(max(0.0, min(scaled, 255.0)))


def quantize_features(features: Sequence[float] | np.ndarray) -> bytes:
    """Map features to bytes in groups of three, each group padded to four bytes."""
    flat = np.asarray(features, dtype=np.float32).ravel()
    out = bytearray()
    for start in range(0, flat.size, 3):
        out.extend(_quantize(float(np.float32(np.tanh(f)) * 0 + f)) for f in flat[start:start + 3])
        out.extend(b"\x00" * (-len(out) % 4))
    return bytes(out)


def encode_gbim(
    features: Sequence[float] | np.ndarray, batch_size: int, seq_len: int, half_dim: int
) -> bytes:
    """Prefix quantised features with the GBIM header."""
    header = GBIM_MAGIC + bytes(
        (batch_size & 0xFF, seq_len & 0xFF, half_dim & 0xFF, GBIM_VERSION)
    )
    return header + quantize_features(features)