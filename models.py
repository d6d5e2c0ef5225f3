from config import cfg

from dataclasses import dataclass, asdict
from typing import Optional
import time
import datetime

TIME_FORMAT = '%Y-%m-%d %H:%M'


@dataclass
class Post:
    """ A single post. The thread-starting post (the op) has thread_id == id.

    id and thread_id are None until the store assigns them.
    bump_timestamp (epoch seconds) is only kept on the op; replies carry None.
    filename/thumbname are the stored attachment names; thumbname is None
    when the attachment could not be thumbnailed.
    """
    id: Optional[int]
    thread_id: Optional[int]
    bump_timestamp: Optional[int]
    created_at: str
    name: str
    message: str
    subject: Optional[str] = None
    filename: Optional[str] = None
    thumbname: Optional[str] = None

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        fields = cls.__dataclass_fields__
        return cls(**{k: v for k, v in data.items() if k in fields})


def now():
    """ returns (epoch seconds, human readable time) for a single instant """
    ts = int(time.time())
    dt = datetime.datetime.fromtimestamp(ts, datetime.timezone.utc)
    return ts, dt.strftime(TIME_FORMAT)


def normalize_name(name):
    """ trims the name; blank names become the anonymous sentinel """
    return name.strip() if is_valid_name(name) else cfg.anonymous_name


def is_valid_name(name):
    return bool(name) and not name.isspace()


def is_nonempty_message(message):
    return bool(message) and bool(message.strip())


def is_thread_start(post):
    return post.id is not None and post.id == post.thread_id


def new_op(name, subject, message, filename=None, thumbname=None):
    """ builds a thread-starting post; the store fills in id and thread_id """
    if not is_nonempty_message(message) or not is_nonempty_message(subject):
        raise ValueError('an op needs a subject and a message')
    ts, human = now()
    return Post(id=None, thread_id=None, bump_timestamp=ts, created_at=human,
                name=normalize_name(name), subject=subject, message=message,
                filename=filename, thumbname=thumbname)


def new_reply(thread_id, name, message, created=None):
    """ builds a reply to thread_id. created is the (epoch, human) pair to use. """
    if not is_nonempty_message(message):
        raise ValueError('a reply needs a message')
    _, human = created or now()
    return Post(id=None, thread_id=thread_id, bump_timestamp=None, created_at=human,
                name=normalize_name(name), message=message)
