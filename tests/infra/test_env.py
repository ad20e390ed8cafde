"""Tests for environment helpers used by purchaseq.config."""

import os
from unittest import mock

from purchaseq.infrastructure.env import get_env_bool, get_env_int


class TestEnvHelpers:
    def test_int_parses_value(self):
        with mock.patch.dict(os.environ, {"PURCHASEQ_CACHE_MAX_ENTRIES": "500"}):
            assert get_env_int("PURCHASEQ_CACHE_MAX_ENTRIES", 0) == 500

    def test_int_falls_back_on_garbage(self):
        with mock.patch.dict(os.environ, {"PURCHASEQ_CACHE_MAX_ENTRIES": "lots"}):
            assert get_env_int("PURCHASEQ_CACHE_MAX_ENTRIES", 0) == 0

    def test_int_missing_uses_default(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            assert get_env_int("PURCHASEQ_CACHE_MAX_ENTRIES", 7) == 7

    def test_bool_accepts_common_spellings(self):
        for raw in ("true", "1", "YES", "on"):
            with mock.patch.dict(os.environ, {"PURCHASEQ_REQUIRE_SINK": raw}):
                assert get_env_bool("PURCHASEQ_REQUIRE_SINK", False)
        for raw in ("false", "0", "no", "OFF"):
            with mock.patch.dict(os.environ, {"PURCHASEQ_REQUIRE_SINK": raw}):
                assert not get_env_bool("PURCHASEQ_REQUIRE_SINK", True)

    def test_bool_unknown_value_uses_default(self):
        with mock.patch.dict(os.environ, {"PURCHASEQ_REQUIRE_SINK": "maybe"}):
            assert get_env_bool("PURCHASEQ_REQUIRE_SINK", True)
