"""Immutable lookup tables between byte sequences, ranks and special tokens."""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from .errors import VocabularyError
from .types import Rank, RankTable, SpecialTokens, TokenBytes

log = logging.getLogger(__name__)


class Vocabulary:
    """
    Read-only store of ordinary ranks and special tokens.

    Ordinary tokens map byte sequences to ranks; special tokens map literal
    text to ids in a separate namespace. Both directions are built once at
    construction and never mutated afterwards, so one instance can be shared
    by concurrent readers without locking.
    """

    def __init__(self, ranks: RankTable, special_tokens: SpecialTokens) -> None:
        """
        Build forward and inverse tables.

        :param ranks: Mapping of token bytes to rank.
        :param special_tokens: Mapping of special token text to id.
        :raises VocabularyError: If any single byte 0-255 has no rank.
        """
        self._ranks: dict[TokenBytes, Rank] = dict(ranks)
        # rank -> bytes, ranks are unique by construction
        self._decoder: dict[Rank, TokenBytes] = {
            rank: token_bytes for token_bytes, rank in self._ranks.items()
        }
        self._special_tokens: dict[str, Rank] = dict(special_tokens)
        # special id -> utf-8 bytes for decoding
        self._special_decoder: dict[Rank, TokenBytes] = {
            tok: seq.encode("utf-8") for seq, tok in self._special_tokens.items()
        }

        missing = [b for b in range(256) if bytes([b]) not in self._ranks]
        if missing:
            raise VocabularyError(
                "vocabulary must assign a rank to every single byte",
                missing_bytes=missing,
            )

        if len(self._decoder) != len(self._ranks):
            log.warning(
                f"{len(self._ranks) - len(self._decoder)} ranks are shared by "
                "several byte sequences, decoding keeps the last one"
            )

        self._max_token_value: Rank = max(
            max(self._decoder), max(self._special_decoder, default=0)
        )

        log.debug(
            f"built vocabulary with {len(self._ranks)} ranks and "
            f"{len(self._special_tokens)} special tokens"
        )

    def rank_of(self, token_bytes: TokenBytes) -> Rank | None:
        """Return the rank of an exact byte sequence, or ``None``."""
        return self._ranks.get(token_bytes)

    def bytes_of(self, rank: Rank) -> TokenBytes | None:
        """Return the bytes for an ordinary rank or special id, or ``None``."""
        token_bytes = self._decoder.get(rank)
        if token_bytes is None:
            token_bytes = self._special_decoder.get(rank)
        return token_bytes

    def special_id(self, text: str) -> Rank | None:
        """Return the id registered for special token ``text``, or ``None``."""
        return self._special_tokens.get(text)

    @property
    def mergeable_ranks(self) -> Mapping[TokenBytes, Rank]:
        """Read-only view of the ordinary bytes -> rank table."""
        return MappingProxyType(self._ranks)

    @property
    def special_tokens(self) -> Mapping[str, Rank]:
        """Read-only view of the special token text -> id table."""
        return MappingProxyType(self._special_tokens)

    @property
    def max_token_value(self) -> Rank:
        """Largest ordinary rank or special id."""
        return self._max_token_value

    def __len__(self) -> int:
        return len(self._ranks) + len(self._special_tokens)

    def __contains__(self, token_bytes: object) -> bool:
        return token_bytes in self._ranks
