# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Shared Hypothesis strategies for property-based tests."""

from __future__ import annotations

from ipaddress import IPv4Address

from hypothesis import strategies as st

__all__ = [
    "address_ranges",
    "ipv4_addresses",
    "nickname_lengths",
    "nicknames",
    "ports",
]


def ipv4_addresses() -> st.SearchStrategy[IPv4Address]:
    """Return a strategy that yields arbitrary IPv4 addresses."""
    return st.integers(min_value=0, max_value=2**32 - 1).map(IPv4Address)


def address_ranges() -> st.SearchStrategy[tuple[IPv4Address, IPv4Address]]:
    """Return a strategy that yields ordered ``(start, end)`` IPv4 pairs."""
    return st.tuples(ipv4_addresses(), ipv4_addresses()).map(
        lambda pair: (min(pair), max(pair)),
    )


def ports() -> st.SearchStrategy[int]:
    """Strategy emitting every valid port, including 0."""
    return st.integers(min_value=0, max_value=65535)


def nickname_lengths(min_value: int = 1, max_value: int = 255) -> st.SearchStrategy[int]:
    """Strategy emitting nickname lengths within the given inclusive bounds.

    Args:
        min_value: Smallest length emitted.
        max_value: Largest length emitted.

    Returns:
        Hypothesis strategy producing integers between the two bounds.
    """
    return st.integers(min_value=min_value, max_value=max_value)


def nicknames(max_size: int = 300) -> st.SearchStrategy[str]:
    """Nicknames without whitespace or ``#`` so they fit in a single token."""
    alphabet = st.characters(
        exclude_categories=("Cs", "Zs", "Zl", "Zp", "Cc"),
        exclude_characters="#\\",
    )
    return st.text(alphabet=alphabet, min_size=1, max_size=max_size)
