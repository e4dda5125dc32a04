"""RankTok: rank-based byte pair encoding."""

from ._merge import byte_pair_encode, byte_pair_merge
from .config import get_data_dir, reset_data_dir, set_data_dir
from .encoding import Encoding, EncodingDefinition
from .factory import (
    encoding_for_model,
    from_pretrained,
    get_encoding,
    list_encodings,
)
from .load import dump_bpe_ranks, parse_bpe_ranks
from .model import encoding_name_for_model, list_models
from .pattern import TokenPattern, list_patterns
from .vocab import Vocabulary

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ranktok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Encoding",
    "EncodingDefinition",
    "Vocabulary",
    "TokenPattern",
    "byte_pair_merge",
    "byte_pair_encode",
    "parse_bpe_ranks",
    "dump_bpe_ranks",
    "get_encoding",
    "encoding_for_model",
    "encoding_name_for_model",
    "from_pretrained",
    "list_encodings",
    "list_models",
    "list_patterns",
    "get_data_dir",
    "set_data_dir",
    "reset_data_dir",
]
