import os

# this will be imported into all other modules
# every setting can be overridden with an environment variable
# named MINICHAN_<SETTING>, ie MINICHAN_MASTER=sqlite:///other.sqlite

# Values are assumed to be reasonable. ie, not -1 for threads_per_page.


def _env(name, default):
    """ reads MINICHAN_<NAME> from the environment, coerced to the default's type """
    raw = os.environ.get('MINICHAN_' + name.upper())
    if raw is None:
        return default
    if isinstance(default, bool):
        return raw.strip().lower() in ('1', 'true', 'yes', 'on')
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, list):
        return [r.strip().lower() for r in raw.split(',') if r.strip()]
    return raw


class Config():
    debug = _env('debug', False)
    # Master/Slave URIs, if replicating the DB.
    # Master handles writes, and any reads immediately following a write
    # Only pure reads should use the slave. Only relational stores replicate.
    #   sqlite:///board.sqlite, postgresql://..  relational rows
    #   json:///board.json                       single mutable document
    #   shelve:///board.shelf                    embedded key-value store
    master = _env('master', "sqlite:///board.sqlite")
    slave  = _env('slave', None) # if None, slave == master aka there is only one db.

    secret_key = _env('secret_key', 'dev-secret-key')
    seed_on_start = _env('seed_on_start', False) # drop everything and seed the welcome thread

    board_title    = _env('board_title', '/b/ - Random')
    board_subtitle = _env('board_subtitle', 'General discussion')
    anonymous_name = _env('anonymous_name', 'Anonymous')

    # index settings
    threads_per_page    = _env('threads_per_page', 15) # n threads per index page
    index_replies_shown = _env('index_replies_shown', 3) # latest n replies per thread, on index pages

    # upload settings
    max_upload_bytes   = _env('max_upload_bytes', 16 * 1024 * 1024)
    allowed_extensions = _env('allowed_extensions', ['jpg', 'jpeg', 'png', 'gif', 'webp'])
    upload_dir         = _env('upload_dir', os.path.join('static', 'uploads'))
    thumb_dir          = _env('thumb_dir', os.path.join('static', 'thumbs'))

    # thumbnail settings; must be supported by imagemagick
    convert_path     = _env('convert_path', 'convert')
    thumb_max_height = _env('thumb_max_height', 150)
    thumb_max_width  = _env('thumb_max_width', 150)


cfg = Config()
