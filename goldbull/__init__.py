"""Question answering and multimodal processing utilities."""

__version__ = "0.1.0"

__all__ = [
    "dataset",
    "evaluation",
    "imaging",
    "latent",
    "multimodal",
    "qa",
    "qagen",
    "sampling",
]