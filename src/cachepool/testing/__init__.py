"""Testing support – fakes, fixtures, generators and conformance contracts.

Import in your ``conftest.py``::

    pytest_plugins = ["cachepool.testing.fixtures"]

``cachepool.testing.contracts`` and ``cachepool.testing.fixtures`` need
pytest; ``cachepool.testing.generators`` needs hypothesis.  Install the
``testing`` extra for both.
"""

from cachepool.testing.fakes import FailingBackend, FakeClock, FrozenClock
from cachepool.testing.generators import (
    hierarchical_path_strategy,
    invalid_key_strategy,
    key_strategy,
    tag_strategy,
)

__all__ = [
    "FailingBackend",
    "FakeClock",
    "FrozenClock",
    "hierarchical_path_strategy",
    "invalid_key_strategy",
    "key_strategy",
    "tag_strategy",
]
