from typing import Optional
from bson import ObjectId


def is_object_id(token) -> bool:
    """
    Check whether a token is a well-formed document identity.

    Only the 24 character hex form counts. ObjectId.is_valid also accepts any
    12 byte string, which would turn names like "Cold Coffees" into ids.
    """
    return isinstance(token, str) and len(token) == 24 and ObjectId.is_valid(token)


def parse_object_id(value) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if is_object_id(value):
        return ObjectId(value)
    return None


async def resolve_by_id_or_name(repository, token: str, session=None):
    """
    Find one document by identity when the token looks like one, otherwise by
    exact name. Returns None when nothing matches.
    """
    if is_object_id(token):
        return await repository.find_by_id(token, session=session)
    return await repository.find_by_name(token, session=session)
