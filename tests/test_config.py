# ==============================================
# Tests for Configuration
# ==============================================

import pytest

from docmap.config import AppConfig, MongoConfig, get_config
from docmap.introspection import AnnotationInclusion


@pytest.fixture
def env(monkeypatch, clean_config):
    for name in (
        "MONGO_HOST", "MONGO_PORT", "MONGO_USER", "MONGO_PASSWORD", "MONGO_DATABASE",
        "DOCMAP_ANNOTATION_INCLUSION", "DOCMAP_CLASS_NAME_PRIORITY",
        "DOCMAP_ATTRIBUTE_PRIORITY", "DOCMAP_SNAKE_CASE_FIELDS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestMongoConfig:
    def test_uri_without_credentials(self):
        assert MongoConfig().uri == "mongodb://localhost:27017/docmap"

    def test_uri_with_credentials(self):
        config = MongoConfig(host="db", port=27018, user="app", password="secret", database="prod")
        assert config.uri == "mongodb://app:secret@db:27018/prod"


class TestGetConfig:
    def test_defaults(self, env):
        config = get_config()
        assert config.mongo.host == "localhost"
        assert config.mapping.inclusion is AnnotationInclusion.INCLUDE_AND_INHERIT_IF_INHERITED
        assert config.mapping.snake_case_fields is True

    def test_environment_overrides(self, env):
        env.setenv("MONGO_HOST", "mongo.internal")
        env.setenv("MONGO_PORT", "27100")
        env.setenv("DOCMAP_ANNOTATION_INCLUSION", "none")
        env.setenv("DOCMAP_ATTRIBUTE_PRIORITY", "50")
        env.setenv("DOCMAP_SNAKE_CASE_FIELDS", "off")

        config = get_config()
        assert config.mongo.host == "mongo.internal"
        assert config.mongo.port == 27100
        assert config.mapping.inclusion is AnnotationInclusion.DONT_INCLUDE
        assert config.mapping.attribute_priority == 50
        assert config.mapping.snake_case_fields is False

    def test_singleton(self, env):
        assert get_config() is get_config()

    def test_invalid_inclusion(self, env):
        env.setenv("DOCMAP_ANNOTATION_INCLUSION", "sometimes")
        with pytest.raises(ValueError, match="DOCMAP_ANNOTATION_INCLUSION"):
            get_config()

    def test_app_config_defaults(self):
        config = AppConfig()
        assert config.mongo.database == "docmap"
        assert config.mapping.class_name_priority == 0
