# project specific
from db_meta import DB
from models import Post
import errors as err
import db_cud

#sqlalchemy
import sqlalchemy.exc
from sqlalchemy import select, func, desc, asc

# python batteries
import logging
from contextlib import contextmanager
from functools import wraps

logger = logging.getLogger(__name__)

# This file contains the relational store; the entry point to db work from the flask application
# Every method here creates new connections, and consumes engines
# Every method must be decorated with with_db(slave|master)
# which will inject the relevant engine for use by the method.

# None of the methods here should build CUD queries themselves;
# writes are handed over to db_cud.


@contextmanager
def connection(engine):
    """ spawns, and closes, a new connection """
    conn = engine.connect()
    try:
        yield conn
    finally:
        conn.close()


def with_db(target):
    """ Simple decorator to inject the target db as the engine.
    Any database failure comes back out as a StorageError.
    """
    def wrap(fn):
        @wraps(fn)
        def wrapped(self, *args, **kwargs):
            engine = self.db.slave if target == 'slave' else self.db.engine
            try:
                return fn(self, *args, engine=engine, **kwargs)
            except sqlalchemy.exc.SQLAlchemyError as e:
                logger.exception('%s failed', fn.__name__)
                raise err.StorageError('Database error') from e
        return wrapped
    return wrap


def _to_post(row):
    return Post(**row._mapping) if row is not None else None


class SqlStore():
    """ posts as rows of a relational table """

    def __init__(self, maindb, slavedb=None, debug=False):
        self.db = DB(maindb, slavedb, debug)
        self.posts = self.db.posts

    def create(self):
        try:
            self.db.create_db()
        except sqlalchemy.exc.SQLAlchemyError as e:
            raise err.StorageError('Could not create the database') from e

    def reset(self):
        try:
            self.db.reset_db()
        except sqlalchemy.exc.SQLAlchemyError as e:
            raise err.StorageError('Could not reset the database') from e

    @with_db('slave')
    def count_thread_starts(self, engine=None):
        posts = self.posts
        q = select(func.count(posts.c.id)).where(posts.c.id == posts.c.thread_id)
        with connection(engine) as conn:
            return conn.execute(q).scalar_one()

    @with_db('slave')
    def list_thread_starts(self, limit, offset, engine=None):
        """ Gets a page of ops, most recently bumped first
            Args:
                limit (int): max ops returned
                offset (int): ops skipped
            Returns:
                list(Post)
        """
        posts = self.posts
        q = select(posts).\
                where(posts.c.id == posts.c.thread_id).\
                order_by(desc(posts.c.bump_timestamp), desc(posts.c.id)).\
                limit(limit).\
                offset(offset)
        with connection(engine) as conn:
            return [_to_post(r) for r in conn.execute(q)]

    @with_db('slave')
    def list_thread(self, threadid, engine=None):
        """ gets all the posts for a single thread
            Returns:
                list(Post): the op, followed by every other post in order of id
        """
        posts = self.posts
        q = select(posts).where(posts.c.thread_id == threadid).order_by(asc(posts.c.id))
        with connection(engine) as conn:
            return [_to_post(r) for r in conn.execute(q)]

    @with_db('master')
    def fetch_post(self, postid, engine=None):
        q = select(self.posts).where(self.posts.c.id == postid)
        with connection(engine) as conn:
            return _to_post(conn.execute(q).fetchone())

    @with_db('master')
    def insert_post(self, post, engine=None):
        with connection(engine) as conn:
            return db_cud.insert_post(conn, self.posts, post)

    @with_db('master')
    def set_thread_id(self, postid, threadid, engine=None):
        with connection(engine) as conn:
            db_cud.set_thread_id(conn, self.posts, postid, threadid)

    @with_db('master')
    def create_thread(self, post, engine=None):
        with connection(engine) as conn:
            return db_cud.create_thread(conn, self.posts, post)

    @with_db('master')
    def update_bump_timestamp(self, threadid, timestamp, engine=None):
        with connection(engine) as conn:
            db_cud.update_bump_timestamp(conn, self.posts, threadid, timestamp)
