from .loader import load_config
from .models import (
    DuraConfig,
    ImportConfig,
    OCRConfig,
    OutputConfig,
    TranscriptionConfig,
)

__all__ = [
    "DuraConfig",
    "ImportConfig",
    "OCRConfig",
    "OutputConfig",
    "TranscriptionConfig",
    "load_config",
]
