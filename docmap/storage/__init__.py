# ==============================================
# STORAGE (MongoDB)
# ==============================================
#
# This package writes mapped objects to MongoDB and reads them back.
#
# Modules:
# --------
# - mongo_store.py → ModelStore: collection routing + pymongo operations
#
# ==============================================

from .mongo_store import ModelStore

__all__ = ["ModelStore"]
