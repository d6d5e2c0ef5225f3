import datetime

import pytest

from config import cfg
from db_main import SqlStore
from models import Post, TIME_FORMAT
import chan
import models

PNG = b'\x89PNG\r\n\x1a\n' + b'\x00' * 32


def fake_thumbnailer(data, max_width, max_height):
    """ thumbnails anything that looks like a png; everything else isn't an image """
    return b'thumb' if data.startswith(b'\x89PNG') else None


class Clock():
    """ stands in for models.now; every call is one second later """
    def __init__(self, start=1700000000):
        self.ts = start

    def __call__(self):
        self.ts += 1
        dt = datetime.datetime.fromtimestamp(self.ts, datetime.timezone.utc)
        return self.ts, dt.strftime(TIME_FORMAT)


def make_op(bump, subject='subject', message='message', name='Anonymous'):
    return Post(id=None, thread_id=None, bump_timestamp=bump, created_at='2024-01-01 00:00',
                name=name, subject=subject, message=message)


def make_reply(threadid, message='reply'):
    return Post(id=None, thread_id=threadid, bump_timestamp=None, created_at='2024-01-01 00:01',
                name='Anonymous', message=message)


@pytest.fixture
def clock(monkeypatch):
    c = Clock()
    monkeypatch.setattr(models, 'now', c)
    return c


@pytest.fixture
def board_dirs(monkeypatch, tmp_path):
    monkeypatch.setattr(cfg, 'upload_dir', str(tmp_path / 'uploads'))
    monkeypatch.setattr(cfg, 'thumb_dir', str(tmp_path / 'thumbs'))
    return tmp_path


@pytest.fixture
def store():
    s = SqlStore('sqlite://')
    s.create()
    return s


@pytest.fixture
def app(board_dirs, store, clock):
    app = chan.create_app(store=store, thumbnailer=fake_thumbnailer)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
