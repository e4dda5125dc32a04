"""Byte-pair encoder/decoder with special token and regex pre-tokenization."""

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Literal
import logging

import regex as re
from typing_extensions import TypeAliasType

from ._decorators import measure_time
from ._merge import byte_pair_encode
from .errors import DisallowedSpecialTokenError, SpecialTokenError
from .load import parse_bpe_ranks
from .pattern import compile_pattern
from .types import Rank, SpecialTokens
from .vocab import Vocabulary

SpecialSelection = TypeAliasType("SpecialSelection", Literal["all"] | Collection[str])

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodingDefinition:
    """Serialized form of an encoding: split pattern, special tokens and rank table."""

    pat_str: str
    special_tokens: Mapping[str, Rank] = field(default_factory=dict)
    # compressed rank table, see ``ranktok.load``
    bpe_ranks: str = ""


class Encoding:
    """
    Converts text to token ids and back.

    Text is first split at allowed special tokens. Each remaining segment is
    split by the pre-tokenization pattern and every piece is looked up in the
    rank table, falling back to byte pair merging when the piece is not a
    single token.
    """

    @measure_time("building encoding")
    def __init__(
        self,
        definition: EncodingDefinition,
        extended_special_tokens: SpecialTokens | None = None,
        *,
        name: str = "custom",
    ) -> None:
        """
        Build the vocabulary and compile patterns.

        :param definition: Pattern, special tokens and serialized rank table.
        :param extended_special_tokens: Extra special tokens, overriding entries
            of ``definition.special_tokens`` with the same text.
        :param name: Name reported by ``repr`` and logs.
        :raises PatternError: If the pre-tokenization pattern does not compile.
        :raises MalformedVocabularyError: If the rank table cannot be parsed.
        :raises VocabularyError: If a single byte has no rank.
        """
        self.name = name
        self.pat_str = definition.pat_str
        self._pattern = compile_pattern(definition.pat_str)

        special_toks = dict(definition.special_tokens)
        for seq, tok in (extended_special_tokens or {}).items():
            if seq in special_toks and special_toks[seq] != tok:
                log.debug(f"special token {seq!r} overridden: {special_toks[seq]} -> {tok}")
            special_toks[seq] = tok

        self._vocab = Vocabulary(parse_bpe_ranks(definition.bpe_ranks), special_toks)
        self._ranks = self._vocab.mergeable_ranks
        # the special token set is fixed per instance, compile the alternation once
        self._special_pat = _literal_pattern(tuple(special_toks))

        log.info(
            f"encoding {name!r} loaded: {len(self._ranks)} ranks, "
            f"{len(special_toks)} special tokens"
        )

    def __repr__(self) -> str:
        return f"<Encoding {self.name!r}>"

    # ======================================================================
    # Encoding

    def encode(
        self,
        text: str,
        allowed_special: SpecialSelection = frozenset(),
        disallowed_special: SpecialSelection = "all",
    ) -> list[Rank]:
        """
        Encode text into a sequence of token ids.

        Allowed special tokens are emitted as their registered ids. Special
        tokens that are neither allowed nor disallowed are encoded as plain
        text.

        :param text: Text to encode.
        :param allowed_special: ``"all"`` or the special tokens to emit as ids.
        :param disallowed_special: ``"all"`` (every registered special token not
            allowed) or the special tokens that must not appear in ``text``.
        :returns: Encoded token ids.
        :raises DisallowedSpecialTokenError: If ``text`` contains a disallowed
            special token. Raised before any encoding work is done.

        .. note::
            Text pieces are converted with ``errors="replace"``, so a lone
            surrogate is encoded as ``b"?"`` rather than as U+FFFD.
        """
        allowed = self._resolve_allowed(allowed_special)
        disallowed = self._resolve_disallowed(disallowed_special, allowed)

        if disallowed:
            found = _literal_pattern(disallowed).search(text)
            if found is not None:
                raise DisallowedSpecialTokenError(
                    "text contains a special token that is not allowed",
                    token=found.group(),
                )

        tokens: list[Rank] = []
        start = 0
        while True:
            next_special = self._find_allowed_special(text, start, allowed)
            end = len(text) if next_special is None else next_special.start()
            self._encode_segment(text[start:end], tokens)

            if next_special is None:
                break
            tokens.append(self._vocab.special_id(next_special.group()))
            start = next_special.end()

        return tokens

    def encode_ordinary(self, text: str) -> list[Rank]:
        """Encode text treating every special token as plain text."""
        tokens: list[Rank] = []
        self._encode_segment(text, tokens)
        return tokens

    def _find_allowed_special(
        self, text: str, start: int, allowed: frozenset[str]
    ) -> re.Match[str] | None:
        """Return the next allowed special token match at or after ``start``."""
        if self._special_pat is None or not allowed:
            return None
        find_from = start
        while (match := self._special_pat.search(text, find_from)) is not None:
            if match.group() in allowed:
                return match
            # not allowed here, keep scanning one character later
            find_from = match.start() + 1
        return None

    def _encode_segment(self, segment: str, out: list[Rank]) -> None:
        """Append the ids of a text segment that contains no special tokens."""
        for match in self._pattern.finditer(segment):
            piece = match.group().encode("utf-8", errors="replace")
            rank = self._ranks.get(piece)
            if rank is not None:
                out.append(rank)
            else:
                out.extend(byte_pair_encode(piece, self._ranks))

    def _resolve_allowed(self, allowed_special: SpecialSelection) -> frozenset[str]:
        if allowed_special == "all":
            return frozenset(self._vocab.special_tokens)
        return frozenset(_as_token_collection(allowed_special, "allowed_special"))

    def _resolve_disallowed(
        self, disallowed_special: SpecialSelection, allowed: frozenset[str]
    ) -> tuple[str, ...]:
        if disallowed_special == "all":
            return tuple(seq for seq in self._vocab.special_tokens if seq not in allowed)
        tokens = _as_token_collection(disallowed_special, "disallowed_special")
        if isinstance(tokens, (set, frozenset)):
            # longest first so overlapping tokens report the same match every run
            return tuple(sorted(tokens, key=lambda seq: (-len(seq), seq)))
        return tuple(tokens)

    # ======================================================================
    # Decoding

    def decode_bytes(self, tokens: Iterable[Rank]) -> bytes:
        """Decode token ids into bytes, skipping ids unknown to the vocabulary."""
        parts: list[bytes] = []
        for tok in tokens:
            token_bytes = self._vocab.bytes_of(tok)
            if token_bytes is not None:
                parts.append(token_bytes)
        return b"".join(parts)

    def decode(self, tokens: Iterable[Rank]) -> str:
        """
        Decode token ids into text.

        Ids are resolved from the ordinary ranks first, then from the special
        tokens. Unknown ids are skipped and invalid UTF-8 is replaced.
        """
        return self.decode_bytes(tokens).decode("utf-8", errors="replace")

    # ======================================================================
    # Properties

    @property
    def vocabulary(self) -> Vocabulary:
        """Underlying rank and special token tables."""
        return self._vocab

    @property
    def special_tokens_set(self) -> set[str]:
        return set(self._vocab.special_tokens)

    @property
    def max_token_value(self) -> Rank:
        return self._vocab.max_token_value

    @property
    def n_vocab(self) -> int:
        return self.max_token_value + 1


def _as_token_collection(value: Collection[str], arg_name: str) -> Collection[str]:
    """Reject a bare string, which would otherwise be iterated per character."""
    if isinstance(value, str):
        raise SpecialTokenError(
            f"{arg_name} must be 'all' or a collection of special tokens, got {value!r}"
        )
    return value


@lru_cache(maxsize=64)
def _literal_pattern(tokens: tuple[str, ...]) -> re.Pattern[str] | None:
    """Compile an alternation matching any of ``tokens`` literally."""
    if not tokens:
        return None
    # escape metachars like "|" in special tokens
    return re.compile("|".join(re.escape(seq) for seq in tokens))
