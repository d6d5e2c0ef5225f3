from models import Post
import errors as err

import os
import json
import logging
import tempfile
import threading
from contextlib import contextmanager

logger = logging.getLogger(__name__)

# The whole board lives in one json document:
#   {"next_id": 4, "posts": [{post}, {post}, ..]}
# Every read, and every read-modify-write, happens under one exclusive lock.
# Two writers that each read the document and write it back
# would otherwise silently drop one of the posts.


class DocumentStore():
    """ posts kept in a single mutable document on disk """

    def __init__(self, path):
        self.path = path
        self._lock = threading.Lock()

    def _empty(self):
        return {'next_id': 1, 'posts': []}

    def _read(self):
        if not os.path.exists(self.path):
            return self._empty()
        try:
            with open(self.path, encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.exception('could not read %s', self.path)
            raise err.StorageError('Could not read the board') from e

    def _write(self, doc):
        """ swaps the new document in, so a failed write never leaves half a board """
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp = tempfile.mkstemp(dir=directory, suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(doc, f)
            os.replace(tmp, self.path)
        except OSError as e:
            logger.exception('could not write %s', self.path)
            raise err.StorageError('Could not write the board') from e

    @contextmanager
    def _document(self, write=False):
        with self._lock:
            doc = self._read()
            yield doc
            if write:
                self._write(doc)

    def create(self):
        with self._document() as doc:
            if not os.path.exists(self.path):
                self._write(doc)

    def reset(self):
        with self._lock:
            self._write(self._empty())

    def count_thread_starts(self):
        with self._document() as doc:
            return sum(1 for p in doc['posts'] if p['id'] == p['thread_id'])

    def list_thread_starts(self, limit, offset):
        with self._document() as doc:
            ops = [p for p in doc['posts'] if p['id'] == p['thread_id']]
        ops.sort(key=lambda p: (p['bump_timestamp'] or 0, p['id']), reverse=True)
        return [Post.from_dict(p) for p in ops[offset:offset + limit]]

    def list_thread(self, threadid):
        with self._document() as doc:
            thread = [p for p in doc['posts'] if p['thread_id'] == threadid]
        return [Post.from_dict(p) for p in sorted(thread, key=lambda p: p['id'])]

    def fetch_post(self, postid):
        with self._document() as doc:
            for p in doc['posts']:
                if p['id'] == postid:
                    return Post.from_dict(p)
        return None

    def _append(self, doc, post):
        data = post.to_dict()
        data['id'] = doc['next_id']
        doc['next_id'] += 1
        doc['posts'].append(data)
        return data

    def insert_post(self, post):
        with self._document(write=True) as doc:
            return self._append(doc, post)['id']

    def set_thread_id(self, postid, threadid):
        with self._document(write=True) as doc:
            for p in doc['posts']:
                if p['id'] == postid:
                    p['thread_id'] = threadid

    def create_thread(self, post):
        with self._document(write=True) as doc:
            data = self._append(doc, post)
            data['thread_id'] = data['id']
            return data['id']

    def update_bump_timestamp(self, threadid, timestamp):
        with self._document(write=True) as doc:
            for p in doc['posts']:
                if p['id'] == threadid:
                    p['bump_timestamp'] = timestamp
