import sqlalchemy
from sqlalchemy import Table, Column, Integer, BigInteger, String, Text, MetaData, Index
from sqlalchemy.pool import StaticPool


def _make_engine(uri, debug=False):
    """ sqlite connections get shared across request threads, so they must not
    be pinned to the thread that opened them. An in-memory db only exists
    for a single connection, so every thread has to get that same one.
    """
    kwargs = {'echo': debug}
    if uri.startswith('sqlite'):
        kwargs['connect_args'] = {'check_same_thread': False}
        if uri in ('sqlite://', 'sqlite:///:memory:'):
            kwargs['poolclass'] = StaticPool
    return sqlalchemy.create_engine(uri, **kwargs)


class DB():
    engine   = None
    slave    = None
    metadata = None
    posts    = None

    def __init__(self, maindb, slavedb=None, debug=False):
        self.engine   = _make_engine(maindb, debug)
        self.slave    = _make_engine(slavedb, debug) if slavedb else self.engine
        self.metadata = MetaData()
        self.create_schema()

    def create_schema(self):
        """ defines the full schema; does not touch the database """
        # the op of a thread is the post with id == thread_id
        # bump_timestamp is only meaningful on the op
        self.posts = Table('posts', self.metadata,
                Column('id'             , Integer     , primary_key=True),
                Column('thread_id'      , Integer     , index=True),
                Column('bump_timestamp' , BigInteger),
                Column('created_at'     , String(20)  , nullable=False),
                Column('name'           , Text        , nullable=False),
                Column('subject'        , Text),
                Column('message'        , Text        , nullable=False),
                Column('filename'       , String(255)), # max length of linux filenames
                Column('thumbname'      , String(255)),
                Index('ix_posts_bump', 'bump_timestamp'))

    def create_db(self):
        """ create any missing tables """
        self.metadata.create_all(self.engine)

    def reset_db(self):
        """ drop all tables, create all tables. """
        self.metadata.drop_all(self.engine)
        self.metadata.create_all(self.engine)
