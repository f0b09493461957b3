"""
Core types for tokenization.
"""

type Rank = int
type TokenBytes = bytes
type Ranks = dict[TokenBytes, Rank]
type Span = tuple[int, int]
