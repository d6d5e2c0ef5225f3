from config import cfg
import models
import errors as err

import dateutil.relativedelta as du

from collections import namedtuple
import datetime
import logging
import math

logger = logging.getLogger(__name__)

# op: the Post starting the thread
# replies: the replies being displayed
# reply_count: every reply in the thread, displayed or not
# omitted: replies left out of the preview
ThreadView = namedtuple('ThreadView', ['op', 'replies', 'reply_count', 'omitted'])


def total_pages(thread_count, per_page=None):
    per_page = per_page or cfg.threads_per_page
    return max(1, math.ceil(thread_count / per_page))


def clamp_page(page, pages):
    return min(max(page, 1), pages)


def preview(replies, shown=None):
    """ the last n replies; all of them when there are n or less """
    shown = cfg.index_replies_shown if shown is None else shown
    if len(replies) <= shown:
        return list(replies)
    return list(replies[len(replies) - shown:])


def pagination(page, pages):
    """ the navigation for an index page
        Args:
            page (int): the current page, already clamped
            pages (int): total number of pages
        Returns:
            list(tuple): (kind, page number) in display order
                kind is one of prev, page, current, gap, next; gap's number is None.
                Empty when there is only one page.
    """
    if pages <= 1:
        return []
    nav = []
    if page > 1:
        nav.append(('prev', page - 1))
    start = max(1, page - 2)
    end = min(pages, page + 2)
    if start > 1:
        nav.append(('page', 1))
        if start > 2:
            nav.append(('gap', None))
    for p in range(start, end + 1):
        nav.append(('current' if p == page else 'page', p))
    if end < pages:
        if end < pages - 1:
            nav.append(('gap', None))
        nav.append(('page', pages))
    if page < pages:
        nav.append(('next', page + 1))
    return nav


def fetch_page(store, page=1):
    """ Generates a board index page
    Gets the page's threads, ordered by their bump time, with the last few replies of each
        Args:
            store: the board's store
            page (int): requested page number; clamped into range
        Returns:
            dict: page, pages, threads (list(ThreadView)), nav (see pagination)
    """
    pages = total_pages(store.count_thread_starts())
    page = clamp_page(page, pages)
    offset = (page - 1) * cfg.threads_per_page

    threads = list()
    for op in store.list_thread_starts(cfg.threads_per_page, offset):
        posts = store.list_thread(op.id)
        # an op that is not yet readable as its own thread is left off the page
        if not posts or posts[0].id != op.id:
            logger.debug('thread %s is not complete yet; skipped', op.id)
            continue
        replies = posts[1:]
        shown = preview(replies)
        threads.append(ThreadView(posts[0], shown, len(replies), len(replies) - len(shown)))
    return {'page': page, 'pages': pages, 'threads': threads,
            'nav': pagination(page, pages)}


def fetch_thread(store, threadid):
    """ gets all the posts for a single thread
        Returns:
            ThreadView: the op and every reply, in order of id
        Raises:
            DNE: no such thread
    """
    posts = store.list_thread(threadid)
    if not posts or posts[0].id != threadid:
        raise err.DNE('Thread not found')
    return ThreadView(posts[0], posts[1:], len(posts) - 1, 0)


def rel_timestamp(created_at, now=None):
    """ returns a human readable time-delta between created_at and the current time,
    with only the biggest time unit
    ie 40 hr difference => 1 day
        Args:
            created_at (str): a Post's created_at
        Returns:
            str: "1 minute ago"; "20 minutes ago"; "3 hours ago"; "0 seconds ago"
    """
    try:
        timestamp = datetime.datetime.strptime(created_at, models.TIME_FORMAT)
    except (TypeError, ValueError):
        return ''
    # created_at is written in utc
    now = now or datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
    # normalized just forces integer values for time-units
    delta = du.relativedelta(now, timestamp).normalized()
    attrs = ['years', 'months', 'days', 'hours', 'minutes', 'seconds']
    ts = '{} {} ago'
    for a in attrs:
        num = getattr(delta, a)
        if num:
            return ts.format(num, a if num > 1 else a[:-1]) # a = minutes, a[:-1] = minute
    return ts.format(0, 'seconds')
