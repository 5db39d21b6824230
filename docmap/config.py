# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules.
#
# CLASSES:
# --------
# - MongoConfig (dataclass)
#     host: str            (default "localhost")
#     port: int            (default 27017)
#     user: str | None     (default None)
#     password: str | None (default None)
#     database: str        (default "docmap")
#
# - MappingConfig (dataclass)
#     annotation_inclusion: str  (default "include_and_inherit")
#     class_name_priority: int   (default 0)
#     attribute_priority: int    (default 10)
#     snake_case_fields: bool    (default True)
#
# - AppConfig (dataclass)
#     mongo: MongoConfig
#     mapping: MappingConfig
#
# FUNCTIONS:
# ----------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - reset_config() -> None
#     Forget the singleton (tests, reloading a changed environment).
#
# USAGE:
# ------
#   from docmap.config import get_config
#   config = get_config()
#   print(config.mongo.uri)
#   print(config.mapping.attribute_priority)
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

from docmap.introspection.introspector import AnnotationInclusion

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class MongoConfig:
    """MongoDB connection configuration."""
    host: str = "localhost"
    port: int = 27017
    user: Optional[str] = None
    password: Optional[str] = None
    database: str = "docmap"

    @property
    def uri(self) -> str:
        if self.user and self.password:
            return f"mongodb://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"
        return f"mongodb://{self.host}:{self.port}/{self.database}"


@dataclass
class MappingConfig:
    """How types are modeled and which conventions apply."""
    annotation_inclusion: str = AnnotationInclusion.INCLUDE_AND_INHERIT_IF_INHERITED.value
    class_name_priority: int = 0
    attribute_priority: int = 10
    snake_case_fields: bool = True

    @property
    def inclusion(self) -> AnnotationInclusion:
        return AnnotationInclusion(self.annotation_inclusion)


@dataclass
class AppConfig:
    """Main application configuration."""
    mongo: MongoConfig = field(default_factory=MongoConfig)
    mapping: MappingConfig = field(default_factory=MappingConfig)


# Singleton instance
_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration

    Raises:
        ValueError: If DOCMAP_ANNOTATION_INCLUSION is not a known policy
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    mongo_config = MongoConfig(
        host=os.getenv("MONGO_HOST", "localhost"),
        port=int(os.getenv("MONGO_PORT", "27017")),
        user=os.getenv("MONGO_USER") or None,
        password=os.getenv("MONGO_PASSWORD") or None,
        database=os.getenv("MONGO_DATABASE", "docmap")
    )

    mapping_config = MappingConfig(
        annotation_inclusion=os.getenv(
            "DOCMAP_ANNOTATION_INCLUSION",
            AnnotationInclusion.INCLUDE_AND_INHERIT_IF_INHERITED.value
        ),
        class_name_priority=int(os.getenv("DOCMAP_CLASS_NAME_PRIORITY", "0")),
        attribute_priority=int(os.getenv("DOCMAP_ATTRIBUTE_PRIORITY", "10")),
        snake_case_fields=os.getenv("DOCMAP_SNAKE_CASE_FIELDS", "true").lower() in _TRUE_VALUES
    )
    valid = {policy.value for policy in AnnotationInclusion}
    if mapping_config.annotation_inclusion not in valid:
        raise ValueError(
            f"DOCMAP_ANNOTATION_INCLUSION must be one of {sorted(valid)}, "
            f"got {mapping_config.annotation_inclusion!r}"
        )

    _config_instance = AppConfig(mongo=mongo_config, mapping=mapping_config)
    return _config_instance


def reset_config() -> None:
    global _config_instance
    _config_instance = None
