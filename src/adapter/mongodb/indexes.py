"""MongoDB index creation that survives renamed or reshaped indexes."""

from logging import getLogger

from pymongo.errors import OperationFailure

logger = getLogger(__name__)

# server codes for IndexOptionsConflict / IndexKeySpecsConflict
_CONFLICT_CODES = {85, 86}


def _is_conflict(error: OperationFailure) -> bool:
    return error.code in _CONFLICT_CODES or "already exists" in str(error)


def create_index_safe(collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing an existing one that clashes with it.

    A clash is an index with our name but other keys, or our keys under
    another name. Returns False if the clash could not be located.
    """
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except OperationFailure as e:
        if not _is_conflict(e):
            raise

    wanted = dict(keys)
    for existing, info in collection.index_information().items():
        if existing == '_id_':
            continue
        same_keys = dict(info.get('key', [])) == wanted
        if (existing == name) != same_keys:
            logger.warning("Replacing conflicting index", extra={"index": existing, "replacement": name})
            collection.drop_index(existing)
            collection.create_index(keys, name=name, **kwargs)
            return True

    logger.error("Index conflict could not be resolved", extra={"index": name})
    return False


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for the users and messages collections."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()
