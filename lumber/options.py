"""Configuration for a classification engine instance."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

DEFAULT_MODEL_DIR = "models"
MODEL_FILE = "model_quantized.onnx"
VOCAB_FILE = "vocab.txt"
PROJECTION_DIR = "2_Dense"
PROJECTION_FILE = "model.safetensors"


class Verbosity(Enum):
    """How much of the original log text the compactor keeps."""

    MINIMAL = "minimal"
    STANDARD = "standard"
    FULL = "full"


@dataclass(frozen=True)
class Options:
    """Settings for loading the model and classifying logs.

    Explicit model paths take precedence over ``model_dir``. Below
    ``confidence_threshold`` events are marked UNCLASSIFIED.
    """

    model_dir: str = ""
    model_path: str = ""
    vocab_path: str = ""
    projection_path: str = ""
    confidence_threshold: float = 0.5
    verbosity: str = "standard"


class ModelPaths(NamedTuple):
    """Resolved locations of the model, vocabulary and projection files."""

    model: str
    vocab: str
    projection: str


def resolve_paths(options: Options) -> ModelPaths:
    """Work out the model file paths from the options."""
    if options.model_path:
        return ModelPaths(options.model_path, options.vocab_path, options.projection_path)
    directory = options.model_dir or DEFAULT_MODEL_DIR
    return ModelPaths(
        os.path.normpath(os.path.join(directory, MODEL_FILE)),
        os.path.normpath(os.path.join(directory, VOCAB_FILE)),
        os.path.normpath(os.path.join(directory, PROJECTION_DIR, PROJECTION_FILE)),
    )


def parse_verbosity(value: str) -> Verbosity:
    """Map a verbosity name to its enum; unknown names mean standard."""
    if value == "minimal":
        return Verbosity.MINIMAL
    if value == "full":
        return Verbosity.FULL
    return Verbosity.STANDARD