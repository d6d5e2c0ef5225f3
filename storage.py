"""Picks the storage backend for a deployment.

Every store answers the same calls:

    count_thread_starts() -> int
    list_thread_starts(limit, offset) -> [Post]   most recently bumped first
    list_thread(threadid) -> [Post]               ascending id
    fetch_post(postid) -> Post | None
    insert_post(post) -> id
    set_thread_id(postid, threadid)
    create_thread(post) -> id                     insert + self-reference, atomically
    update_bump_timestamp(threadid, timestamp)
    create() / reset()

and raises errors.StorageError when it cannot.
"""
from db_main import SqlStore
from db_doc import DocumentStore
from db_kv import ShelfStore


def _path(uri, scheme):
    return uri[len(scheme) + len(':///'):]


def open_store(master, slave=None, debug=False):
    """ json:///path and shelve:///path are single-node stores;
    anything else is handed to sqlalchemy as a database url.
    """
    if master.startswith('json:///'):
        return DocumentStore(_path(master, 'json'))
    if master.startswith('shelve:///'):
        return ShelfStore(_path(master, 'shelve'))
    return SqlStore(master, slave, debug)
