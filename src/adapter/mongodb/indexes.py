"""Index creation for the users collection.

A deployment may already carry an index under the same name with an older key
spec, or the same keys under an older name. Either one blocks
``create_index``, so the stale index is dropped and the wanted one rebuilt.
"""

from logging import getLogger

from pymongo.errors import OperationFailure

logger = getLogger(__name__)

# Server error codes for index conflicts
INDEX_OPTIONS_CONFLICT = 85
INDEX_KEY_SPECS_CONFLICT = 86


def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing a conflicting one if present."""
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except OperationFailure as e:
        if e.code not in (INDEX_OPTIONS_CONFLICT, INDEX_KEY_SPECS_CONFLICT):
            raise

    stale = _find_conflicting_index(collection, keys, name)
    if stale is None:
        logger.error("Index conflict could not be resolved", extra={"index": name})
        return False

    logger.warning("Replacing conflicting index", extra={"index": name, "stale": stale})
    collection.drop_index(stale)
    collection.create_index(keys, name=name, **kwargs)
    return True


def _find_conflicting_index(collection, keys: list, name: str) -> str | None:
    wanted = dict(keys)
    for existing_name, info in collection.index_information().items():
        if existing_name == '_id_':
            continue
        existing_keys = dict(info.get('key', []))
        if (existing_name == name) != (existing_keys == wanted):
            return existing_name
    return None


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()
