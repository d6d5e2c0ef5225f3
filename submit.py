import models
import media
import errors as err

from collections import namedtuple
import logging

logger = logging.getLogger(__name__)

# Parsing -> Validating -> (StoringAttachment)? -> Persisting -> Done | Rejected
# Nothing here keeps state between submissions.
# Rejection is an errors.BadInput; nothing has been stored when it is raised.

CREATE_FIELDS = ('name', 'subject', 'message')
REPLY_FIELDS  = ('name', 'message')

Upload = namedtuple('Upload', ['filename', 'data'])


def parse_fields(items, accepted):
    """ walks the form fields in arrival order; unknown fields are ignored
        Args:
            items (iterable): (field name, value) pairs
            accepted (tuple): the field names this form takes
        Returns:
            dict: name (normalized), subject, message; raw and untrimmed otherwise
    """
    data = {'name': '', 'subject': None, 'message': None}
    for key, value in items:
        if key in accepted:
            data[key] = value
    data['name'] = models.normalize_name(data['name'])
    return data


def read_upload(files):
    """ pulls the whole file out of the request, even one that will be rejected
        Args:
            files (MultiDict): werkzeug's request.files, or any mapping of FileStorage
        Returns:
            Upload: None if no file was picked; data may be empty
    """
    f = files.get('file') if files else None
    if f is None or not f.filename:
        return None
    return Upload(f.filename, f.read())


def validate_thread(data, upload):
    if upload and not media.allowed_file(upload.filename):
        raise err.BadMedia(media.invalid_type_message())
    if not models.is_nonempty_message(data['subject']) or \
       not models.is_nonempty_message(data['message']):
        raise err.BadInput('Missing subject or comment')


def validate_reply(data):
    if not models.is_nonempty_message(data['message']):
        raise err.BadInput('Missing comment')


def create_thread(store, items, files=None, thumbnailer=media.make_thumbnail):
    """ handles the entire new thread process, and validation
        Args:
            store: the board's store
            items (iterable): (field name, value) pairs from the form
            files (MultiDict): the uploaded files
            thumbnailer (callable): bytes, width, height -> bytes | None
        Returns:
            int: the new thread's id
    """
    data = parse_fields(items, CREATE_FIELDS)
    upload = read_upload(files)
    try:
        validate_thread(data, upload)
    except err.BadInput as e:
        logger.info('thread rejected: %s', e.message)
        raise

    filename, thumbname = None, None
    # an empty file passes the type check but is not stored
    if upload and upload.data:
        filename, thumbname = media.save_upload(upload.filename, upload.data, thumbnailer)

    post = models.new_op(data['name'], data['subject'], data['message'], filename, thumbname)
    try:
        threadid = store.create_thread(post)
    except err.StorageError:
        # TODO: decide whether an upload whose post never got stored should be deleted
        if filename:
            logger.warning('%s was saved but its post was not', filename)
        raise
    logger.info('new thread %s', threadid)
    return threadid


def reply(store, threadid, items):
    """ adds a reply to threadid, then bumps the thread
        Args:
            store: the board's store
            threadid (int): the thread being replied to
            items (iterable): (field name, value) pairs from the form
        Returns:
            int: the new post's id
    """
    data = parse_fields(items, REPLY_FIELDS)
    try:
        validate_reply(data)
    except err.BadInput as e:
        logger.info('reply to %s rejected: %s', threadid, e.message)
        raise

    op = store.fetch_post(threadid)
    if op is None or not models.is_thread_start(op):
        raise err.DNE('Specified thread does not exist')

    created = models.now()
    post = models.new_reply(threadid, data['name'], data['message'], created)
    postid = store.insert_post(post)
    store.update_bump_timestamp(threadid, created[0])
    logger.info('new reply %s in thread %s', postid, threadid)
    return postid


def seed_board(store):
    """ starts an empty board off with a welcome thread """
    op = models.new_op('', 'Welcome', 'First post! Say hello.\n>greentext works')
    threadid = store.create_thread(op)
    logger.info('seeded welcome thread %s', threadid)
    return threadid
