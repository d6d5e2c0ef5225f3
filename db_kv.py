from models import Post
import errors as err

import dbm
import shelve
import pickle
import logging
import threading
from contextlib import contextmanager

logger = logging.getLogger(__name__)

# keys:
#   next_id      the id the next post will get
#   post:<id>    one entry per post, the post's dict
# shelve is not thread-safe, so the shelf is only ever opened under the lock.


def _key(postid):
    return 'post:%d' % postid


class ShelfStore():
    """ posts as independent entries of an embedded key-value store """

    def __init__(self, path):
        self.path = path
        self._lock = threading.Lock()

    @contextmanager
    def _shelf(self):
        with self._lock:
            try:
                shelf = shelve.open(self.path)
            except (OSError,) + dbm.error as e:
                logger.exception('could not open %s', self.path)
                raise err.StorageError('Could not open the board') from e
            try:
                yield shelf
            except (OSError, pickle.PickleError) + dbm.error as e:
                logger.exception('shelf operation failed on %s', self.path)
                raise err.StorageError('Board storage failed') from e
            finally:
                shelf.close()

    def _posts(self, shelf):
        return [shelf[k] for k in shelf.keys() if k.startswith('post:')]

    def create(self):
        with self._shelf() as shelf:
            shelf.setdefault('next_id', 1)

    def reset(self):
        with self._shelf() as shelf:
            shelf.clear()
            shelf['next_id'] = 1

    def count_thread_starts(self):
        with self._shelf() as shelf:
            return sum(1 for p in self._posts(shelf) if p['id'] == p['thread_id'])

    def list_thread_starts(self, limit, offset):
        with self._shelf() as shelf:
            ops = [p for p in self._posts(shelf) if p['id'] == p['thread_id']]
        ops.sort(key=lambda p: (p['bump_timestamp'] or 0, p['id']), reverse=True)
        return [Post.from_dict(p) for p in ops[offset:offset + limit]]

    def list_thread(self, threadid):
        with self._shelf() as shelf:
            thread = [p for p in self._posts(shelf) if p['thread_id'] == threadid]
        return [Post.from_dict(p) for p in sorted(thread, key=lambda p: p['id'])]

    def fetch_post(self, postid):
        with self._shelf() as shelf:
            data = shelf.get(_key(postid))
        return Post.from_dict(data) if data else None

    def _put(self, shelf, post, self_thread=False):
        postid = shelf.get('next_id', 1)
        shelf['next_id'] = postid + 1
        data = post.to_dict()
        data['id'] = postid
        if self_thread:
            data['thread_id'] = postid
        shelf[_key(postid)] = data
        return postid

    def insert_post(self, post):
        with self._shelf() as shelf:
            return self._put(shelf, post)

    def set_thread_id(self, postid, threadid):
        with self._shelf() as shelf:
            data = shelf.get(_key(postid))
            if data:
                data['thread_id'] = threadid
                shelf[_key(postid)] = data

    def create_thread(self, post):
        with self._shelf() as shelf:
            return self._put(shelf, post, self_thread=True)

    def update_bump_timestamp(self, threadid, timestamp):
        with self._shelf() as shelf:
            data = shelf.get(_key(threadid))
            if data:
                data['bump_timestamp'] = timestamp
                shelf[_key(threadid)] = data
