# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_features.py

import pytest
from pydantic import ValidationError

from ghc.auth.features import FeatureRegistry, Features


def test_unknown_host_has_everything_off():
    assert FeatureRegistry().get("github.com") == Features()


def test_record_is_keyed_by_canonical_host():
    registry = FeatureRegistry()
    registry.record("GitHub.com", Features(merge_queue=True))
    assert registry.get("github.com").merge_queue
    registry.forget("github.com")
    assert not registry.get("github.com").merge_queue


def test_features_are_frozen():
    with pytest.raises(ValidationError):
        Features().merge_queue = True
