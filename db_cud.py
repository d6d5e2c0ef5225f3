from sqlalchemy import update
from contextlib import contextmanager

# this file handles all CUD operations
# every function here consumes a connection
# and operates using transactions (regardless of complexity and strict-dependencies of sql interaction)
#  life is just easier with a consistent assumption

# a function called from inside another's transaction joins it,
# so functions here can call each other freely

# NOTE: NO FUNCTION IN THIS FILE WILL CLOSE THE CONNECTION


@contextmanager
def transaction(conn):
    if conn.in_transaction():
        yield
    else:
        with conn.begin():
            yield


def _post_values(post):
    data = post.to_dict()
    data.pop('id')
    return data


def insert_post(conn, posts, post):
    """ Inserts a post exactly as given, without value validation
        Args:
            posts (Table): the posts table
            post (Post): the post; its id is ignored
        Returns:
            int: the new post's id
    """
    with transaction(conn):
        result = conn.execute(posts.insert().values(**_post_values(post)))
    return result.inserted_primary_key[0]


def set_thread_id(conn, posts, postid, threadid):
    with transaction(conn):
        conn.execute(update(posts).
                where(posts.c.id == postid).
                values(thread_id=threadid))


def create_thread(conn, posts, post):
    """ Submits a new op. The post and its self-referencing thread_id
    are written in one transaction, so no reader ever sees an op without its thread.
        Returns:
            int: post_id, which is also the thread_id
    """
    with transaction(conn):
        postid = insert_post(conn, posts, post)
        set_thread_id(conn, posts, postid, postid)
    return postid


def update_bump_timestamp(conn, posts, threadid, timestamp):
    """ bumps the thread; only the op row is touched """
    with transaction(conn):
        conn.execute(update(posts).
                where(posts.c.id == threadid).
                values(bump_timestamp=timestamp))
