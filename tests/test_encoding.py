"""Unit tests for Encoding encode/decode, special tokens and edge cases."""

import pytest

import ranktok as rtok
from ranktok.encoding import EncodingDefinition
from ranktok.errors import (
    DisallowedSpecialTokenError,
    MalformedVocabularyError,
    PatternError,
    SpecialTokenError,
    VocabularyError,
)


# Encode
# ---------------------------------------------------------------------------


def test_encode_direct_hits(encoding, ranks):
    """Pieces that are whole tokens resolve without merging."""
    assert encoding.encode("hello world") == [ranks[b"hello"], ranks[b" world"]]


def test_encode_falls_back_to_merge(encoding, ranks):
    """Pieces missing from the vocabulary are merged."""
    assert encoding.encode("hellx") == [ranks[b"hell"], ord("x")]


def test_empty_string(encoding):
    """Empty string encodes to empty list and decodes back."""
    assert encoding.encode("") == []
    assert encoding.decode([]) == ""


def test_encode_ordinary_ignores_special_tokens(encoding):
    """Special tokens are plain text for encode_ordinary."""
    tokens = encoding.encode_ordinary("hi <|endoftext|>")
    assert 1000 not in tokens
    assert encoding.decode(tokens) == "hi <|endoftext|>"


# Special tokens
# ---------------------------------------------------------------------------


def test_allowed_special_token_alone(encoding):
    """An allowed special token encodes to its registered id."""
    assert encoding.encode("<|endoftext|>", allowed_special={"<|endoftext|>"}) == [1000]


def test_allowed_special_all(encoding, ranks):
    """'all' allows every registered special token."""
    tokens = encoding.encode("hello<|endoftext|><|fim|>", allowed_special="all")
    assert tokens == [ranks[b"hello"], 1000, 1001]


def test_adjacent_special_tokens(encoding):
    """Back to back special tokens are each emitted once."""
    tokens = encoding.encode("<|endoftext|><|endoftext|>", allowed_special="all")
    assert tokens == [1000, 1000]


def test_disallowed_by_default(encoding):
    """Default arguments reject any registered special token."""
    with pytest.raises(DisallowedSpecialTokenError) as exc_info:
        encoding.encode("some text <|endoftext|>")
    assert exc_info.value.token == "<|endoftext|>"
    assert isinstance(exc_info.value, SpecialTokenError)


def test_disallowed_reports_first_occurrence(encoding):
    """The first disallowed occurrence in the text is reported."""
    with pytest.raises(DisallowedSpecialTokenError) as exc_info:
        encoding.encode("a <|fim|> b <|endoftext|>")
    assert exc_info.value.token == "<|fim|>"


def test_disallowed_excludes_allowed(encoding):
    """'all' disallowed means all tokens not explicitly allowed."""
    with pytest.raises(DisallowedSpecialTokenError) as exc_info:
        encoding.encode("<|endoftext|><|fim|>", allowed_special={"<|endoftext|>"})
    assert exc_info.value.token == "<|fim|>"


def test_custom_disallowed_string(encoding):
    """Disallowed strings are matched literally even if not registered."""
    with pytest.raises(DisallowedSpecialTokenError):
        encoding.encode("hello", disallowed_special={"hell"})


def test_overlapping_disallowed_reports_longest(encoding):
    """A set of disallowed tokens reports the longest one matching at an offset."""
    for _ in range(5):
        with pytest.raises(DisallowedSpecialTokenError) as exc_info:
            encoding.encode("hello", disallowed_special={"hell", "hello", "he"})
        assert exc_info.value.token == "hello"


def test_disallowed_sequence_keeps_given_order(encoding):
    """A sequence of disallowed tokens is tried in the order given."""
    with pytest.raises(DisallowedSpecialTokenError) as exc_info:
        encoding.encode("hello", disallowed_special=["hell", "hello"])
    assert exc_info.value.token == "hell"


def test_special_as_text_when_not_disallowed(encoding):
    """Special tokens outside both sets are encoded as ordinary text."""
    text = "hi <|endoftext|> there"
    tokens = encoding.encode(text, disallowed_special=())
    assert tokens == encoding.encode_ordinary(text)
    assert encoding.decode(tokens) == text


def test_skips_non_allowed_occurrence(encoding):
    """Non allowed special tokens are skipped while scanning for allowed ones."""
    tokens = encoding.encode(
        "a<|fim|>b<|endoftext|>c",
        allowed_special={"<|endoftext|>"},
        disallowed_special=(),
    )
    expected = encoding.encode_ordinary("a<|fim|>b") + [1000] + encoding.encode_ordinary("c")
    assert tokens == expected


def test_bare_string_selection_rejected(encoding):
    """A single string other than 'all' is not a valid token collection."""
    with pytest.raises(SpecialTokenError):
        encoding.encode("x", allowed_special="<|endoftext|>")


def test_extended_special_tokens_override(definition):
    """Extra special tokens override same-named entries and add new ones."""
    enc = rtok.Encoding(definition, {"<|endoftext|>": 2000, "<|new|>": 2001})
    tokens = enc.encode("<|endoftext|><|new|><|fim|>", allowed_special="all")
    assert tokens == [2000, 2001, 1001]
    assert enc.decode([2001]) == "<|new|>"
    assert enc.special_tokens_set == {"<|endoftext|>", "<|fim|>", "<|new|>"}


def test_special_id_overlapping_rank(definition):
    """A special id equal to an ordinary rank decodes as the ordinary token."""
    enc = rtok.Encoding(
        EncodingDefinition(
            pat_str=definition.pat_str,
            special_tokens={"<|x|>": 97},
            bpe_ranks=definition.bpe_ranks,
        )
    )
    assert enc.encode("<|x|>", allowed_special="all") == [97]
    assert enc.decode([97]) == "a"


# Decode
# ---------------------------------------------------------------------------


def test_decode_special_token(encoding):
    """Special ids decode to their text."""
    assert encoding.decode([1000]) == "<|endoftext|>"


def test_decode_skips_unknown_ids(encoding, ranks):
    """Unknown ids contribute nothing to the output."""
    valid = [ranks[b"hello"], ranks[b" world"]]
    assert encoding.decode([99999, *valid]) == encoding.decode(valid) == "hello world"
    assert encoding.decode_bytes([-1, 5000]) == b""


def test_decode_replaces_invalid_utf8(encoding):
    """Partial UTF-8 sequences decode to the replacement character."""
    assert encoding.decode([0xE2]) == "�"
    assert encoding.decode([0xC3, 0xA9]) == "é"


def test_lone_surrogate_encodes_as_question_mark(encoding):
    """Unpaired surrogates cannot be UTF-8 encoded and become b"?"."""
    tokens = encoding.encode("a\ud800b")
    assert tokens == [ord("a"), ord("?"), ord("b")]
    assert encoding.decode(tokens) == "a?b"


# Encode-decode round-trip
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "text",
    [
        "hello world",
        "Hello, world! abcd abab cdcd",
        "café naïve 日本語 🎉",
        "   \n\t  ",
        "x",
        "numbers 12345 and symbols #$%^&*()",
    ],
)
def test_roundtrip(encoding, text):
    """Encode then decode returns the original text."""
    assert encoding.decode(encoding.encode(text)) == text


def test_merges_compress_text(encoding):
    """Known words produce fewer tokens than bytes."""
    text = "hello world hello world"
    assert len(encoding.encode(text)) < len(text.encode("utf-8"))


# Construction
# ---------------------------------------------------------------------------


def test_invalid_pattern_raises(definition):
    """A pattern that doesn't compile is rejected."""
    bad = EncodingDefinition(pat_str="(", bpe_ranks=definition.bpe_ranks)
    with pytest.raises(PatternError):
        rtok.Encoding(bad)


def test_missing_single_byte_raises():
    """Every single byte needs a rank."""
    ranks = {bytes([b]): b for b in range(1, 256)}
    bad = EncodingDefinition(pat_str=r"\S+|\s+", bpe_ranks=rtok.dump_bpe_ranks(ranks))
    with pytest.raises(VocabularyError) as exc_info:
        rtok.Encoding(bad)
    assert exc_info.value.missing_bytes == [0]


def test_malformed_ranks_raise(definition):
    """Unparsable rank data aborts construction."""
    bad = EncodingDefinition(pat_str=definition.pat_str, bpe_ranks="r zero YQ==\n")
    with pytest.raises(MalformedVocabularyError):
        rtok.Encoding(bad)


def test_properties(encoding):
    """Vocabulary size reflects the largest id."""
    assert encoding.max_token_value == 1001
    assert encoding.n_vocab == 1002
    assert encoding.special_tokens_set == {"<|endoftext|>", "<|fim|>"}
    assert encoding.name == "test"
    assert repr(encoding) == "<Encoding 'test'>"
    assert encoding.vocabulary.rank_of(b"ab") == 256
    assert encoding.vocabulary.special_id("<|fim|>") == 1001
