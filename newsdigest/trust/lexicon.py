"""Loading of the trusted-source allowlist and sensational token list."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from newsdigest.trust.models import TrustLexicon

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_PATH = Path(__file__).with_name("lexicon.yaml")


def load_lexicon(path: str | Path) -> TrustLexicon:
    """
    Load and validate a lexicon YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the file is not valid YAML
        ValidationError: If the file lacks a ``trusted_sources`` list
    """
    lexicon_path = Path(path)
    try:
        with open(lexicon_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        lexicon = TrustLexicon.model_validate(data)
    except yaml.YAMLError as e:
        logger.error(f"YAML parse error in {lexicon_path}: {e}")
        raise
    except ValidationError as e:
        logger.error(f"Validation error in {lexicon_path}: {e}")
        raise

    logger.info(
        f"Trust lexicon loaded from {lexicon_path}: "
        f"{len(lexicon.trusted_sources)} sources, "
        f"{len(lexicon.sensational_tokens)} sensational tokens"
    )
    return lexicon


@lru_cache
def get_trust_lexicon(path: Optional[Path] = None) -> TrustLexicon:
    """Process-wide, read-only lexicon; loaded once per path."""
    return load_lexicon(path or DEFAULT_LEXICON_PATH)
