# ==============================================
# ModelStore
# ==============================================
#
# PURPOSE:
#   Persist mapped objects to MongoDB. The collection for an object is
#   the collection name its TypeModel resolved through conventions, and
#   documents are produced by the type's ModelCodec.
#
# CLASS: ModelStore
# -----------------
#   Stateful - holds connection to MongoDB.
#
#   Constructor:
#   ------------
#   - __init__(mapper, config=None, client_factory=pymongo.MongoClient)
#
#   Methods:
#   --------
#   - connect() -> None
#   - disconnect() -> None
#   - collection_for(tp) -> pymongo Collection
#       Raises TypeMappingError if the model has no collection name.
#   - insert(obj, tp=None) -> inserted_id
#   - insert_many(objs, tp=None) -> list of inserted ids
#   - find(tp, query=None) -> list of objects
#   - find_one(tp, query=None) -> object | None
#
#   tp defaults to type(obj); pass it for instances of generic classes
#   (e.g. tp=Pair[str, int]) so the specialized model is used.
#
#   Context Manager:
#   ----------------
#   - __enter__ / __exit__ for `with ModelStore(...) as store:` usage.
#
# ==============================================

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from pymongo import MongoClient as PyMongoClient
from pymongo.errors import ConnectionFailure, OperationFailure

from docmap.config import MongoConfig
from docmap.errors import TypeMappingError

logger = logging.getLogger(__name__)


class ModelStore:
    """Reads and writes mapped objects through pymongo."""

    def __init__(
        self,
        mapper,
        config: Optional[MongoConfig] = None,
        client_factory: Callable[[str], Any] = PyMongoClient
    ):
        # Store connection params. Don't connect yet.
        self.mapper = mapper
        self.config = config or mapper.config.mongo
        self.client_factory = client_factory
        self.client = None

    def connect(self) -> None:
        try:
            self.client = self.client_factory(self.config.uri)
            self.client.admin.command("ping")
            logger.info("Connected to MongoDB at %s:%s", self.config.host, self.config.port)
        except ConnectionFailure as e:
            logger.error("Could not connect to MongoDB: %s", e)
            raise
        except OperationFailure as e:
            logger.error("Authentication failed: %s", e)
            raise

    def disconnect(self) -> None:
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB.")
            self.client = None

    def collection_for(self, tp: Any):
        """
        The pymongo collection for a mapped type.

        Args:
            tp: A mapped class or parameterized alias

        Returns:
            A Collection configured with the registry's codec options

        Raises:
            RuntimeError: If not connected
            TypeMappingError: If no convention named a collection for tp
        """
        if not self.client:
            raise RuntimeError("Not connected to MongoDB.")
        model = self.mapper.model_for(tp)
        name = model.get_collection_name()
        if not name:
            raise TypeMappingError(f"No collection name resolved for {model.name}")
        return self.client[self.config.database].get_collection(
            name, codec_options=self.mapper.registry.codec_options()
        )

    def insert(self, obj: Any, tp: Any = None) -> Any:
        tp = tp or type(obj)
        document = self.mapper.codec_for(tp).encode(obj)
        collection = self.collection_for(tp)
        result = collection.insert_one(document)
        logger.debug("Inserted %s into '%s'", result.inserted_id, collection.name)
        return result.inserted_id

    def insert_many(self, objs: Iterable[Any], tp: Any = None) -> List[Any]:
        """
        Insert objects of a single type.

        Returns:
            The inserted ids, in input order (empty for no objects)
        """
        objs = list(objs)
        if not objs:
            return []
        tp = tp or type(objs[0])
        codec = self.mapper.codec_for(tp)
        collection = self.collection_for(tp)
        result = collection.insert_many([codec.encode(obj) for obj in objs])
        logger.info("Inserted %d document(s) into '%s'", len(result.inserted_ids), collection.name)
        return list(result.inserted_ids)

    def find(self, tp: Any, query: Optional[Dict[str, Any]] = None) -> List[Any]:
        codec = self.mapper.codec_for(tp)
        return [codec.decode(document) for document in self.collection_for(tp).find(query or {})]

    def find_one(self, tp: Any, query: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        document = self.collection_for(tp).find_one(query or {})
        if document is None:
            return None
        return self.mapper.codec_for(tp).decode(document)

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
