from config import cfg
import board
import media
import render
import submit
import storage
import errors as err

from flask import Flask, Blueprint, request, render_template, current_app
from flask import url_for, redirect, send_from_directory
from werkzeug.exceptions import RequestEntityTooLarge

import os

views = Blueprint('board', __name__)


def get_store():
    return current_app.extensions['minichan_store']


@views.route('/', methods=['GET'])
def index():
    page = request.args.get('page', default=1, type=int) # ?page=TOMFOOLERY is page 1
    pagedata = board.fetch_page(get_store(), page)
    return render_template('board_index.html',
            error=request.args.get('error'),
            **pagedata)


@views.route('/thread/<int:threadid>', methods=['GET'])
def thread(threadid):
    thread_data = board.fetch_thread(get_store(), threadid)
    return render_template('thread.html',
            error=request.args.get('error'),
            thread=thread_data)


@views.route('/', methods=['POST'])
def newthread():
    try:
        threadid = submit.create_thread(get_store(),
                        request.form.items(multi=True),
                        request.files,
                        current_app.config['THUMBNAILER'])
    except err.BadInput as e:
        return redirect(url_for('.index', error=e.message))
    current_app.logger.info('thread %s created', threadid)
    return redirect(url_for('.index'))


@views.route('/thread/<int:threadid>', methods=['POST'])
def newpost(threadid):
    try:
        submit.reply(get_store(), threadid, request.form.items(multi=True))
    except err.BadInput as e:
        return redirect(url_for('.thread', threadid=threadid, error=e.message))
    except err.DNE:
        # the thread view answers with not found
        return redirect(url_for('.thread', threadid=threadid))
    return redirect(url_for('.thread', threadid=threadid))


@views.route('/uploads/<path:name>', methods=['GET'])
def upload(name):
    return send_from_directory(os.path.abspath(cfg.upload_dir), name)


@views.route('/thumbs/<path:name>', methods=['GET'])
def thumb(name):
    return send_from_directory(os.path.abspath(cfg.thumb_dir), name)


@views.app_errorhandler(err.DNE)
def handle_DNE(error):
    return render_template('not_found.html', error_message=error.message), 404


@views.app_errorhandler(err.StorageError)
def handle_storage(error):
    return render_template('error.html', error_message=error.message), 500


@views.app_errorhandler(RequestEntityTooLarge)
def handle_too_large(error):
    message = 'File too large (max %d MB)' % (cfg.max_upload_bytes // (1024 * 1024))
    return render_template('error.html', error_message=message), 413


def create_app(store=None, thumbnailer=None):
    """ builds the board application; settings come from cfg
        Args:
            store: an already opened store; otherwise one is opened from cfg.master
            thumbnailer (callable): replaces imagemagick thumbnailing
        Returns:
            Flask
    """
    app = Flask(__name__)
    app.secret_key = cfg.secret_key
    app.config['MAX_CONTENT_LENGTH'] = cfg.max_upload_bytes
    app.config['THUMBNAILER'] = thumbnailer or media.make_thumbnail
    app.jinja_env.line_statement_prefix = '#'  # enables jinja2 line mode
    app.jinja_env.line_comment_prefix = '##'  # enables jinja2 line mode

    # makes our config and formatters available to all jinja templates
    app.add_template_global(cfg, 'cfg')
    app.add_template_filter(render.render_message, 'render_message')
    app.add_template_filter(board.rel_timestamp, 'ago')

    if store is None:
        store = storage.open_store(cfg.master, cfg.slave, cfg.debug)
        if cfg.seed_on_start:
            store.reset()
            submit.seed_board(store)
        else:
            store.create()
    app.extensions['minichan_store'] = store
    app.register_blueprint(views)
    return app
