import threading

import pytest

import errors as err
import storage
from db_doc import DocumentStore
from db_kv import ShelfStore
from db_main import SqlStore
from conftest import make_op, make_reply


@pytest.fixture(params=['sql', 'json', 'shelve'])
def any_store(request, tmp_path):
    if request.param == 'sql':
        s = SqlStore('sqlite:///' + str(tmp_path / 'board.sqlite'))
    elif request.param == 'json':
        s = DocumentStore(str(tmp_path / 'board.json'))
    else:
        s = ShelfStore(str(tmp_path / 'board.shelf'))
    s.create()
    return s


def test_open_store_picks_backend(tmp_path):
    assert isinstance(storage.open_store('sqlite://'), SqlStore)
    doc = storage.open_store('json:///' + str(tmp_path / 'b.json'))
    assert isinstance(doc, DocumentStore)
    assert doc.path == str(tmp_path / 'b.json')
    assert isinstance(storage.open_store('shelve:///board.shelf'), ShelfStore)


def test_empty_store(any_store):
    assert any_store.count_thread_starts() == 0
    assert any_store.list_thread_starts(15, 0) == []
    assert any_store.list_thread(1) == []
    assert any_store.fetch_post(1) is None


def test_create_thread_self_references(any_store):
    tid = any_store.create_thread(make_op(10, subject='hi'))
    op = any_store.fetch_post(tid)
    assert op.id == op.thread_id == tid
    assert op.subject == 'hi'
    assert any_store.count_thread_starts() == 1


def test_ids_increase_and_are_not_reused(any_store):
    a = any_store.create_thread(make_op(1))
    b = any_store.insert_post(make_reply(a))
    c = any_store.create_thread(make_op(2))
    assert a < b < c


def test_insert_then_set_thread_id(any_store):
    pid = any_store.insert_post(make_op(5))
    assert any_store.count_thread_starts() == 0
    any_store.set_thread_id(pid, pid)
    assert any_store.count_thread_starts() == 1
    assert [p.id for p in any_store.list_thread(pid)] == [pid]


def test_list_thread_in_id_order(any_store):
    tid = any_store.create_thread(make_op(1))
    other = any_store.create_thread(make_op(2))
    r1 = any_store.insert_post(make_reply(tid, 'one'))
    any_store.insert_post(make_reply(other))
    r2 = any_store.insert_post(make_reply(tid, 'two'))
    posts = any_store.list_thread(tid)
    assert [p.id for p in posts] == [tid, r1, r2]
    assert posts[2].message == 'two'


def test_list_thread_starts_by_bump_with_paging(any_store):
    ids = {bump: any_store.create_thread(make_op(bump)) for bump in (5, 1, 9, 3)}
    assert [p.bump_timestamp for p in any_store.list_thread_starts(2, 0)] == [9, 5]
    assert [p.bump_timestamp for p in any_store.list_thread_starts(2, 2)] == [3, 1]
    any_store.update_bump_timestamp(ids[1], 20)
    assert any_store.list_thread_starts(1, 0)[0].id == ids[1]


def test_replies_never_listed_as_threads(any_store):
    tid = any_store.create_thread(make_op(1))
    any_store.insert_post(make_reply(tid))
    assert [p.id for p in any_store.list_thread_starts(15, 0)] == [tid]


def test_reset(any_store):
    any_store.create_thread(make_op(1))
    any_store.reset()
    assert any_store.count_thread_starts() == 0


def test_concurrent_creates_lose_nothing(any_store):
    def worker(n):
        for i in range(10):
            any_store.create_thread(make_op(n * 100 + i))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert any_store.count_thread_starts() == 40
    ids = [p.id for p in any_store.list_thread_starts(100, 0)]
    assert len(set(ids)) == 40


def test_unreadable_document_is_a_storage_error(tmp_path):
    path = tmp_path / 'board.json'
    path.write_text('{not json')
    with pytest.raises(err.StorageError):
        DocumentStore(str(path)).count_thread_starts()


def test_sql_failure_is_a_storage_error():
    s = SqlStore('sqlite://')
    # no tables were created
    with pytest.raises(err.StorageError):
        s.count_thread_starts()
