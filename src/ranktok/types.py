"""
Core types for byte-pair encoding.
"""

from collections.abc import Mapping

from typing_extensions import TypeAliasType

Rank = TypeAliasType("Rank", int)
TokenBytes = TypeAliasType("TokenBytes", bytes)
Span = TypeAliasType("Span", tuple[int, int])
RankTable = TypeAliasType("RankTable", Mapping[TokenBytes, Rank])
SpecialTokens = TypeAliasType("SpecialTokens", Mapping[str, Rank])
