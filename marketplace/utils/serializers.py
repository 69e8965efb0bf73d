"""
MongoDB document serialization utilities
"""
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId

# Never leave the API boundary
PRIVATE_USER_FIELDS = ("password_hash", "reset_token_hash", "reset_token_expires")


def convert_object_ids(doc: Any) -> Any:
    """
    Recursively convert ObjectId instances to strings in a document
    Useful for nested documents or complex structures

    Args:
        doc: Document that may contain ObjectIds at any level

    Returns:
        Document with all ObjectIds converted to strings
    """
    if isinstance(doc, dict):
        return {key: convert_object_ids(value) for key, value in doc.items()}
    elif isinstance(doc, list):
        return [convert_object_ids(item) for item in doc]
    elif isinstance(doc, ObjectId):
        return str(doc)
    else:
        return doc


def serialize_doc(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Convert a MongoDB document into a JSON-friendly dict

    Args:
        doc: MongoDB document dictionary

    Returns:
        Serialized copy with every ObjectId converted to string, or None if input is None
    """
    if doc is None:
        return None
    return convert_object_ids(dict(doc))


def serialize_docs(docs: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Serialize a list of MongoDB documents

    Args:
        docs: List of MongoDB document dictionaries

    Returns:
        List of serialized documents
    """
    return [serialize_doc(doc) for doc in docs if doc is not None]


def public_user(user: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Serialize a user document without credentials or reset tokens."""
    if user is None:
        return None
    cleaned = {k: v for k, v in user.items() if k not in PRIVATE_USER_FIELDS}
    return serialize_doc(cleaned)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Coerce a string or ObjectId to ObjectId, returning None when invalid."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None
