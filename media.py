from config import cfg
import errors as err

import os
import uuid
import logging
import subprocess

logger = logging.getLogger(__name__)


def file_extension(filename):
    """ lowercased extension without the dot; '' if there is none """
    _, e = os.path.splitext(filename)
    return e[1:].lower()


def allowed_file(filename):
    return file_extension(filename) in cfg.allowed_extensions


def invalid_type_message():
    return 'Invalid file type. Allowed: %s' % ', '.join(cfg.allowed_extensions)


def unique_names(ext):
    """ storage names for a new upload, from a random 128-bit uuid
        Returns:
            str, str: '<uuid>.<ext>', '<uuid>_thumb.jpg'
    """
    basename = str(uuid.uuid4())
    return '%s.%s' % (basename, ext), '%s_thumb.jpg' % basename


def make_thumbnail(data, max_width=None, max_height=None):
    """ asks imagemagick for a jpeg thumbnail of data
        Args:
            data (bytes): the raw upload
        Returns:
            bytes: the thumbnail; None if data isn't an image imagemagick can read
    """
    w = max_width or cfg.thumb_max_width
    h = max_height or cfg.thumb_max_height
    size = '{w}x{h}>'.format(w=w, h=h) # the > stops small images from being enlarged in imagemagick
    command = [cfg.convert_path,
                '-[0]'        ,          # [0] gets page0 from stdin; first frame of a gif
                '-filter'     , 'Lanczos',
                '-thumbnail'  , size     ,
                '-background' , 'white'  ,
                '-alpha'      , 'remove' ,
                'jpg:-']
    try:
        done = subprocess.run(command, input=data, capture_output=True, check=True)
    except subprocess.CalledProcessError as e:
        logger.warning('not an image: %s', e.stderr.decode('utf-8', 'replace').strip())
        return None
    except OSError:
        logger.warning('could not run %s; storing without a thumbnail', cfg.convert_path)
        return None
    return done.stdout or None


def write_file(directory, name, data):
    """ writes data to directory/name; the name is assumed unique """
    try:
        os.makedirs(directory, exist_ok=True)
        with open(os.path.join(directory, name), 'wb') as f:
            f.write(data)
    except OSError as e:
        logger.exception('could not write %s', name)
        raise err.StorageError('Could not save the file') from e


def save_upload(filename, data, thumbnailer=make_thumbnail):
    """ stores an upload and its thumbnail, if it has one
        Args:
            filename (str): the name the file was uploaded with
            data (bytes): the file itself
            thumbnailer (callable): bytes -> thumbnail bytes | None
        Returns:
            str, str: the stored filename; the thumbnail name, or None
    """
    ext = file_extension(filename)
    if ext not in cfg.allowed_extensions:
        raise err.BadMedia(invalid_type_message())

    newname, thumbname = unique_names(ext)
    write_file(cfg.upload_dir, newname, data)

    thumb = thumbnailer(data, cfg.thumb_max_width, cfg.thumb_max_height)
    if thumb is None:
        return newname, None
    write_file(cfg.thumb_dir, thumbname, thumb)
    return newname, thumbname
