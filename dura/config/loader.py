"""Locate dura.yaml, expand ${VAR} / ${VAR:-default} references, validate."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import DuraConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DURA_CONFIG"

_ENV_REF_RE = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def config_search_paths(cli_path: str | None = None) -> list[Path]:
    """Candidate files, highest priority first: --config, $DURA_CONFIG, ./dura.yaml, ~/.dura/config.yaml."""
    candidates = [cli_path, os.environ.get(CONFIG_ENV_VAR)]
    paths = [Path(c).expanduser() for c in candidates if c]
    paths.append(Path("dura.yaml"))
    paths.append(Path.home() / ".dura" / "config.yaml")
    return paths


def load_config(cli_path: str | None = None) -> DuraConfig:
    """Load the first existing, non-empty config file; defaults when there is none.

    An explicit ``cli_path`` that does not exist is an error rather than a
    silent fallback to the next candidate.
    """
    if cli_path and not Path(cli_path).expanduser().exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_search_paths(cli_path):
        if not path.is_file():
            continue
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            continue
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid config in {path}: top level must be a mapping")
        try:
            cfg = DuraConfig(**_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
        logger.debug("loaded config from %s", path)
        return cfg

    return DuraConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ``${VAR}`` and ``${VAR:-default}`` in strings."""
    if isinstance(obj, str):
        return _ENV_REF_RE.sub(lambda m: os.environ.get(m.group(1)) or (m.group(2) or ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `dura config init`
DEFAULT_CONFIG_TEMPLATE = """\
# dura.yaml

# Import behaviour
imports:
  text_layer_threshold: 20     # PDF pages with fewer characters are OCR'd
  title_max_length: 100
  max_file_size_mb: 100

# OCR for images and scanned PDF pages
ocr:
  enabled: true
  provider: "anthropic"
  model: "claude-sonnet-4-20250514"
  api_key_env: "ANTHROPIC_API_KEY"
  max_tokens: 4096

# Speech transcription for audio imports
transcription:
  enabled: true
  provider: "openai"
  model: "whisper-1"
  api_key_env: "OPENAI_API_KEY"

# Where `dura import` writes notes
output:
  base_dir: "${DURA_NOTES_DIR:-notes}"
  keep_original: true

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
