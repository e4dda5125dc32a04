"""Shared fixtures: a small vocabulary covering every byte plus a few merges."""

import json

import pytest

import ranktok as rtok
from ranktok.encoding import EncodingDefinition

# ranks 256+ follow the order a trainer would mint them in
MERGES = [
    b"ab",
    b"cd",
    b"abcd",
    b"he",
    b"ll",
    b"hell",
    b"hello",
    b" w",
    b"or",
    b" wor",
    b"ld",
    b" world",
]

SPECIAL_TOKENS = {"<|endoftext|>": 1000, "<|fim|>": 1001}


def build_ranks() -> dict[bytes, int]:
    """Byte b gets rank b, merges follow from 256."""
    ranks = {bytes([b]): b for b in range(256)}
    for idx, token_bytes in enumerate(MERGES):
        ranks[token_bytes] = 256 + idx
    return ranks


@pytest.fixture
def ranks():
    return build_ranks()


@pytest.fixture
def definition(ranks):
    """Serialized definition using the gpt2 split pattern."""
    return EncodingDefinition(
        pat_str=rtok.TokenPattern.GPT2.value,
        special_tokens=dict(SPECIAL_TOKENS),
        bpe_ranks=rtok.dump_bpe_ranks(ranks, per_line=50),
    )


@pytest.fixture
def encoding(definition):
    return rtok.Encoding(definition, name="test")


@pytest.fixture
def write_definition(definition):
    """Write the fixture definition as a json data file and return its path."""

    def write(path):
        path.write_text(
            json.dumps(
                {
                    "pat_str": definition.pat_str,
                    "special_tokens": dict(definition.special_tokens),
                    "bpe_ranks": definition.bpe_ranks,
                }
            ),
            encoding="utf-8",
        )
        return path

    return write


@pytest.fixture
def data_dir(tmp_path):
    """Point name lookups at a temporary directory for the duration of a test."""
    rtok.set_data_dir(tmp_path)
    yield tmp_path
    rtok.reset_data_dir()
