"""Parsing and serialization of compressed rank tables.

A rank table is stored as newline-separated records::

    <ignored> <offset> <base64 token> <base64 token> ...

Every token on a line receives rank ``offset + position`` where position is
the token's zero-based index within that line.
"""

import base64
import binascii
import logging

from .errors import MalformedVocabularyError
from .types import Rank, RankTable, TokenBytes

log = logging.getLogger(__name__)


def parse_bpe_ranks(data: str) -> dict[TokenBytes, Rank]:
    """
    Decode a serialized rank table into a bytes -> rank mapping.

    Blank lines are skipped. A token that appears twice keeps the rank of its
    last occurrence.

    :param data: Serialized rank table text.
    :returns: Mapping of token bytes to rank.
    :raises MalformedVocabularyError: If a line has no offset field, the offset
        is not a non-negative integer, or a token is not valid base64.
    """
    ranks: dict[TokenBytes, Rank] = {}
    n_duplicates = 0

    for line_no, line in enumerate(data.splitlines(), start=1):
        fields = line.split()
        if not fields:
            continue
        if len(fields) < 2:
            raise MalformedVocabularyError(
                "rank record is missing its offset field", line_no=line_no, line=line
            )

        # first field is a label and carries no information
        _, offset_str, *tokens = fields
        try:
            offset = int(offset_str)
        except ValueError as e:
            raise MalformedVocabularyError(
                f"rank offset is not an integer: {offset_str!r}",
                line_no=line_no,
                line=line,
            ) from e
        if offset < 0:
            raise MalformedVocabularyError(
                f"rank offset is negative: {offset}", line_no=line_no, line=line
            )

        for idx, token in enumerate(tokens):
            try:
                token_bytes = base64.b64decode(token, validate=True)
            except binascii.Error as e:
                raise MalformedVocabularyError(
                    f"token is not valid base64: {token!r}", line_no=line_no, line=line
                ) from e
            if token_bytes in ranks:
                n_duplicates += 1
            ranks[token_bytes] = offset + idx

    if n_duplicates:
        log.warning(f"rank data repeats {n_duplicates} tokens, later ranks win")
    log.debug(f"parsed {len(ranks)} ranks")
    return ranks


def dump_bpe_ranks(ranks: RankTable, per_line: int = 64, label: str = "r") -> str:
    """
    Serialize a rank table into the compressed line format.

    Consecutive ranks share a line (up to ``per_line`` tokens); a gap in the
    rank sequence starts a new line with a fresh offset.

    :param ranks: Mapping of token bytes to rank.
    :param per_line: Maximum number of tokens written on one line.
    :param label: Text written into the ignored leading field.
    :returns: Serialized rank table text, newline terminated.
    """
    if per_line < 1:
        raise ValueError("per_line must be at least 1")

    lines: list[str] = []
    offset: Rank | None = None
    chunk: list[str] = []

    for token_bytes, rank in sorted(ranks.items(), key=lambda item: item[1]):
        # flush when the run breaks or the line is full
        if offset is None or rank != offset + len(chunk) or len(chunk) == per_line:
            if chunk:
                lines.append(f"{label} {offset} {' '.join(chunk)}")
            offset = rank
            chunk = []
        chunk.append(base64.b64encode(token_bytes).decode("ascii"))

    if chunk:
        lines.append(f"{label} {offset} {' '.join(chunk)}")

    return "".join(f"{line}\n" for line in lines)
