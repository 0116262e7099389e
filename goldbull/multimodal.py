"""Multimodal request and response types with their JSON-ready dictionary form."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class ModalityType(Enum):
    """Modalities the multimodal model understands."""

    TEXT = "Text"
    VISION = "Vision"
    AUDIO = "Audio"


@dataclass(frozen=True)
class TextInput:
    """Text content."""

    content: str


@dataclass(frozen=True)
class ImageInput:
    """Raw image bytes."""

    data: bytes


@dataclass(frozen=True)
class AudioInput:
    """Audio samples with their sample rate."""

    data: tuple[float, ...]
    sample_rate: int


InputModality = Union[TextInput, ImageInput, AudioInput]


@dataclass
class ModalityInput:
    """One input with its metadata."""

    modality: InputModality
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass
class MultimodalRequest:
    """Inputs to process and the modalities to produce."""

    inputs: list[ModalityInput] = field(default_factory=list)
    output_modalities: list[ModalityType] = field(
        default_factory=lambda: [ModalityType.TEXT]
    )
    options: dict[str, str] = field(default_factory=dict)


@dataclass
class MultimodalResponse:
    """Outputs generated for a request."""

    confidence: float
    text_output: str | None = None
    image_output: bytes | None = None
    audio_output: list[float] | None = None
    metadata: dict[str, str] = field(default_factory=dict)


def _require(data: Any, key: str, kind: type | tuple[type, ...]) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"expected an object holding '{key}'")
    if key not in data:
        raise ValueError(f"missing field '{key}'")
    value = data[key]
    if not isinstance(value, kind):
        raise ValueError(f"field '{key}' has the wrong type")
    return value


def _string_map(value: dict) -> dict[str, str]:
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in value.items()):
        raise ValueError("expected a map of strings to strings")
    return dict(value)


def _bytes(value: list) -> bytes:
    try:
        return bytes(value)
    except (TypeError, ValueError) as exc:
        raise ValueError("expected a list of byte values") from exc


def _floats(value: list) -> list[float]:
    if not all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in value):
        raise ValueError("expected a list of numbers")
    return [float(x) for x in value]


def _modality_to_dict(modality: InputModality) -> dict[str, Any]:
    if isinstance(modality, TextInput):
        return {"Text": {"content": modality.content}}
    if isinstance(modality, ImageInput):
        return {"Image": {"data": list(modality.data)}}
    if isinstance(modality, AudioInput):
        return {"Audio": {"data": list(modality.data), "sample_rate": modality.sample_rate}}
    raise TypeError(f"unsupported modality: {modality!r}")


def _modality_from_dict(data: Any) -> InputModality:
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError("a modality must be an object with exactly one variant")
    ((tag, body),) = data.items()
    if tag == "Text":
        return TextInput(_require(body, "content", str))
    if tag == "Image":
        return ImageInput(_bytes(_require(body, "data", list)))
    if tag == "Audio":
        samples = _floats(_require(body, "data", list))
        sample_rate = _require(body, "sample_rate", int)
        if isinstance(sample_rate, bool) or not 0 <= sample_rate < 2**32:
            raise ValueError("sample_rate must be an unsigned 32-bit integer")
        return AudioInput(tuple(samples), sample_rate)
    raise ValueError(f"unknown modality variant '{tag}'")


def _modality_type(value: Any) -> ModalityType:
    try:
        return ModalityType(value)
    except ValueError:
        raise ValueError(f"unknown modality type {value!r}") from None


def request_to_dict(request: MultimodalRequest) -> dict[str, Any]:
    """Return the JSON-ready form of a request."""
    return {
        "inputs": [
            {"modality": _modality_to_dict(item.modality), "metadata": dict(item.metadata)}
            for item in request.inputs
        ],
        "output_modalities": [m.value for m in request.output_modalities],
        "options": dict(request.options),
    }


def request_from_dict(data: Any) -> MultimodalRequest:
    """Build a request from its JSON-ready form, raising ValueError if malformed."""
    inputs = [
        ModalityInput(
            modality=_modality_from_dict(_require(item, "modality", dict)),
            metadata=_string_map(_require(item, "metadata", dict)),
        )
        for item in _require(data, "inputs", list)
    ]
    outputs = [_modality_type(m) for m in _require(data, "output_modalities", list)]
    options = _string_map(_require(data, "options", dict))
    return MultimodalRequest(inputs=inputs, output_modalities=outputs, options=options)


def response_to_dict(response: MultimodalResponse) -> dict[str, Any]:
    """Return the JSON-ready form of a response."""
    return {
        "text_output": response.text_output,
        "image_output": None if response.image_output is None else list(response.image_output),
        "audio_output": None if response.audio_output is None else list(response.audio_output),
        "confidence": response.confidence,
        "metadata": dict(response.metadata),
    }


def response_from_dict(data: Any) -> MultimodalResponse:
    """Build a response from its JSON-ready form, raising ValueError if malformed."""
    text = _require(data, "text_output", (str, type(None)))
    image = _require(data, "image_output", (list, type(None)))
    audio = _require(data, "audio_output", (list, type(None)))
    confidence = _require(data, "confidence", (int, float))
    if isinstance(confidence, bool):
        raise ValueError("field 'confidence' has the wrong type")
    return MultimodalResponse(
        confidence=float(confidence),
        text_output=text,
        image_output=None if image is None else _bytes(image),
        audio_output=None if audio is None else _floats(audio),
        metadata=_string_map(_require(data, "metadata", dict)),
    )