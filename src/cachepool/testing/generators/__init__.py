"""Testing generators – Hypothesis strategies."""
from cachepool.testing.generators.strategies import (
    KEY_ALPHABET,
    hierarchical_path_strategy,
    invalid_key_strategy,
    key_strategy,
    tag_strategy,
)

__all__ = [
    "KEY_ALPHABET",
    "hierarchical_path_strategy",
    "invalid_key_strategy",
    "key_strategy",
    "tag_strategy",
]
