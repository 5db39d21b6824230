# ==============================================
# TypeMapper - Model Cache & Orchestrator
# ==============================================
#
# PURPOSE:
#   The entry point users interact with. It owns the shared
#   collaborators and hands out one fully prepared TypeModel per type.
#
# HOW A MODEL IS PREPARED:
#
#   model_for(Person)
#       │
#       ├── cached?  ──yes──► return it
#       │
#       ▼
#   TypeModel(registry, introspector, Person)   default-constructor check
#       │
#       ▼
#   model.discover()                            fields, methods, generics
#       │
#       ▼
#   conventions.apply(model)                    collection name, doc keys
#       │
#       ▼
#   cache + return
#
#   model_for(Pair[str, int]) is served as specialize(Pair, [str, int]):
#   the template Pair is prepared once and every specialization shares
#   its collection name.
#
# CLASS: TypeMapper
# -----------------
#   - model_for(tp) -> TypeModel
#   - specialize(tp, arguments) -> TypeModel
#   - codec_for(tp) -> ModelCodec
#   - clear() -> None
#
#   The mapper registers itself as a codec provider on its registry, so
#   a field typed with another mappable class gets a nested ModelCodec.
#
# ==============================================

import logging
import threading
from typing import Any, Dict, Iterable, Optional, get_args, get_origin

from docmap.codec.model_codec import ModelCodec
from docmap.codec.registry import BSON_NATIVE_TYPES, CodecRegistry
from docmap.config import AppConfig, get_config
from docmap.conventions.conventions import Convention, default_conventions
from docmap.errors import TypeMappingError
from docmap.introspection.generics import is_parameterized, type_name
from docmap.introspection.introspector import TypeIntrospector
from docmap.model.type_model import TypeModel

logger = logging.getLogger(__name__)


class TypeMapper:
    """
    Builds, discovers, applies conventions to and caches TypeModels.
    """

    def __init__(
        self,
        registry: Optional[CodecRegistry] = None,
        introspector: Optional[TypeIntrospector] = None,
        conventions: Optional[Convention] = None,
        config: Optional[AppConfig] = None
    ):
        """
        Args:
            registry: Codec registry shared by every model (default: built-ins)
            introspector: Shared introspector (default: a new one)
            conventions: Convention (or ConventionPack) applied after discovery
            config: Optional configuration. If None, loads from environment.
        """
        self.config = config or get_config()
        self.registry = registry or CodecRegistry()
        self.introspector = introspector or TypeIntrospector()
        self.conventions = conventions if conventions is not None else default_conventions(self.config.mapping)

        self._models: Dict[Any, TypeModel] = {}
        self._codecs: Dict[Any, ModelCodec] = {}
        self._lock = threading.RLock()

        self.registry.add_provider(self._provide_codec)

    def model_for(self, tp: Any) -> TypeModel:
        """
        Return the prepared model for a class or parameterized alias.

        Raises:
            TypeMappingError: If the type cannot be modeled
        """
        if is_parameterized(tp):
            return self.specialize(get_origin(tp), get_args(tp))

        with self._lock:
            model = self._models.get(tp)
            if model is None:
                model = TypeModel(self.registry, self.introspector, tp, inclusion=self.config.mapping.inclusion)
                model.discover()
                self.conventions.apply(model)
                self._models[tp] = model
                logger.debug("Mapped %s to collection %r", model.name, model.get_collection_name())
        return model

    def specialize(self, tp: Any, arguments: Iterable[Any]) -> TypeModel:
        """
        Return the model of generic class ``tp`` bound to ``arguments``.

        Raises:
            TypeParameterMismatchError: If the argument count is wrong
        """
        arguments = tuple(arguments)
        key = (tp, arguments)
        with self._lock:
            model = self._models.get(key)
            if model is None:
                model = TypeModel.specialize(self.model_for(tp), arguments)
                self._models[key] = model
        return model

    def codec_for(self, tp: Any) -> ModelCodec:
        with self._lock:
            codec = self._codecs.get(tp)
            if codec is None:
                codec = ModelCodec(self.model_for(tp))
                self._codecs[tp] = codec
        return codec

    def _provide_codec(self, tp: Any) -> Optional[ModelCodec]:
        origin = get_origin(tp) or tp
        if not isinstance(origin, type) or origin in BSON_NATIVE_TYPES or origin.__module__ == "builtins":
            return None
        try:
            return self.codec_for(tp)
        except TypeMappingError as e:
            logger.debug("No model codec for %s: %s", type_name(tp), e)
            return None

    def clear(self) -> None:
        """Forget every cached model and codec."""
        with self._lock:
            self._models.clear()
            self._codecs.clear()

    def __contains__(self, tp: Any) -> bool:
        if is_parameterized(tp):
            return (get_origin(tp), get_args(tp)) in self._models
        return tp in self._models

    def __len__(self) -> int:
        return len(self._models)
