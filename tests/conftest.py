# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - registry      → CodecRegistry with the built-in codecs
# - introspector  → CountingIntrospector (counts resolve_members calls)
# - mapper        → TypeMapper with default config and conventions
# - clean_config  → resets the config singleton around a test
#
# ==============================================

import pytest

from docmap.codec import CodecRegistry
from docmap.config import AppConfig, reset_config
from docmap.introspection import AnnotationInclusion, TypeIntrospector
from docmap.mapper import TypeMapper


class CountingIntrospector(TypeIntrospector):
    """TypeIntrospector that records how often members are resolved."""

    def __init__(self):
        super().__init__()
        self.calls = 0

    def resolve_members(self, tp, inclusion=AnnotationInclusion.INCLUDE_AND_INHERIT_IF_INHERITED):
        self.calls += 1
        return super().resolve_members(tp, inclusion)


@pytest.fixture
def registry():
    return CodecRegistry()


@pytest.fixture
def introspector():
    return CountingIntrospector()


@pytest.fixture
def mapper():
    return TypeMapper(config=AppConfig())


@pytest.fixture
def clean_config():
    reset_config()
    yield
    reset_config()
