"""Factory functions for loading encodings."""

import json
import logging
import os
from pathlib import Path
from typing import Final

from .config import get_data_dir
from .encoding import Encoding, EncodingDefinition
from .errors import EncodingNameError, ModelLoadError
from .model import encoding_name_for_model
from .types import SpecialTokens

DEFINITION_SUFFIX: Final[str] = ".json"

_ENCODING_NAMES: Final[tuple[str, ...]] = (
    "gpt2",
    "r50k_base",
    "p50k_base",
    "p50k_edit",
    "cl100k_base",
)

log = logging.getLogger(__name__)


def list_encodings() -> list[str]:
    """Return names of all encodings that can be loaded by name."""
    return list(_ENCODING_NAMES)


def from_pretrained(
    path: str | os.PathLike[str],
    extended_special_tokens: SpecialTokens | None = None,
) -> Encoding:
    """
    Load an encoding from a JSON definition file.

    The file holds an object with ``pat_str``, ``special_tokens`` and
    ``bpe_ranks`` keys.

    :param path: Path to the ``.json`` definition file.
    :param extended_special_tokens: Extra special tokens overriding the file's.
    :return: Ready to use encoding named after the file stem.
    :raises ModelLoadError: If the file doesn't exist, has the wrong extension,
                            is not valid JSON or lacks a required key.

    .. code-block:: python

        enc = from_pretrained("ranks/cl100k_base.json")
        tokens = enc.encode("Hello world")
    """
    path = Path(path)

    if not path.exists():
        raise ModelLoadError("encoding filepath does not exist", model_path=str(path))

    if path.suffix != DEFINITION_SUFFIX:
        raise ModelLoadError("expected .json file", model_path=str(path))

    log.info(f"loading encoding from {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ModelLoadError("encoding file is not valid json", model_path=str(path)) from e

    if not isinstance(raw, dict):
        raise ModelLoadError("encoding file must hold a json object", model_path=str(path))

    missing = [key for key in ("pat_str", "special_tokens", "bpe_ranks") if key not in raw]
    if missing:
        raise ModelLoadError(
            f"encoding file is missing keys: {', '.join(missing)}", model_path=str(path)
        )

    if not isinstance(raw["pat_str"], str) or not isinstance(raw["bpe_ranks"], str):
        raise ModelLoadError(
            "encoding file fields 'pat_str' and 'bpe_ranks' must be strings",
            model_path=str(path),
        )
    special_tokens = raw["special_tokens"]
    if not isinstance(special_tokens, dict) or not all(
        isinstance(seq, str) and isinstance(tok, int) and not isinstance(tok, bool)
        for seq, tok in special_tokens.items()
    ):
        raise ModelLoadError(
            "encoding file field 'special_tokens' must map strings to integer ids",
            model_path=str(path),
        )

    definition = EncodingDefinition(
        pat_str=raw["pat_str"],
        special_tokens=raw["special_tokens"],
        bpe_ranks=raw["bpe_ranks"],
    )
    return Encoding(definition, extended_special_tokens, name=path.stem)


def get_encoding(
    name: str,
    extended_special_tokens: SpecialTokens | None = None,
) -> Encoding:
    """
    Load a named encoding from the configured data directory.

    :param name: Encoding name, one of ``list_encodings()``.
    :param extended_special_tokens: Extra special tokens overriding the file's.
    :raises EncodingNameError: If the name is unknown.
    :raises ModelLoadError: If the definition file is missing or invalid.
    """
    if name not in _ENCODING_NAMES:
        raise EncodingNameError(
            "unknown encoding name", invalid_name=name, available=list_encodings()
        )
    return from_pretrained(
        get_data_dir() / f"{name}{DEFINITION_SUFFIX}", extended_special_tokens
    )


def encoding_for_model(
    model: str,
    extended_special_tokens: SpecialTokens | None = None,
) -> Encoding:
    """Load the encoding used by ``model``."""
    return get_encoding(encoding_name_for_model(model), extended_special_tokens)
