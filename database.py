import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from pymongo import MongoClient

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

# Module-level handle for the API; None when the environment is not configured.
db = None
if DATABASE_URL and DATABASE_NAME:
    _client = MongoClient(DATABASE_URL)
    db = _client[DATABASE_NAME]


@contextmanager
def connect(uri: str, client_factory=MongoClient) -> Iterator[MongoClient]:
    """
    Open a client, confirm the server answers, and always close it on exit.

    MongoClient connects lazily, so the ping is what surfaces an unreachable
    server as ConnectionFailure before any collection work starts.
    """
    client = client_factory(uri)
    try:
        client.admin.command("ping")
        logger.info("Connected to MongoDB at %s", uri)
        yield client
    finally:
        client.close()
        logger.info("MongoDB connection closed")


def get_documents(
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    sort: Optional[List[tuple]] = None,
    skip: int = 0,
    limit: int = 0,
) -> List[Dict[str, Any]]:
    if db is None:
        raise RuntimeError("Database not available")
    cursor = db[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if skip:
        cursor = cursor.skip(skip)
    if limit:
        cursor = cursor.limit(limit)
    docs = list(cursor)
    for d in docs:
        d["_id"] = str(d["_id"]) if "_id" in d else None
    return docs
