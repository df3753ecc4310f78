from pydantic import BaseModel, Field
from typing import Literal


class ImportConfig(BaseModel):
    text_layer_threshold: int = 20
    title_max_length: int = 100
    max_file_size_mb: int = 100


class OCRConfig(BaseModel):
    enabled: bool = True
    provider: Literal["anthropic"] = "anthropic"
    model: str = "claude-sonnet-4-20250514"
    api_key_env: str = "ANTHROPIC_API_KEY"
    max_tokens: int = 4096


class TranscriptionConfig(BaseModel):
    enabled: bool = True
    provider: Literal["openai"] = "openai"
    model: str = "whisper-1"
    api_key_env: str = "OPENAI_API_KEY"


class OutputConfig(BaseModel):
    base_dir: str = "notes"
    keep_original: bool = True


class DuraConfig(BaseModel):
    imports: ImportConfig = Field(default_factory=ImportConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    transcription: TranscriptionConfig = Field(default_factory=TranscriptionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
