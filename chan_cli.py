#!/usr/bin/env python
from config import cfg
import storage
import submit
import errors as err

import click

import logging


def _store():
    return storage.open_store(cfg.master, cfg.slave, cfg.debug)


@click.group()
@click.option('--debug/--no-debug', default=None, help='verbose logging and echoed sql')
def cli(debug):
    if debug is not None:
        cfg.debug = debug
    logging.basicConfig(level=logging.DEBUG if cfg.debug else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')


@cli.command('init-db')
def init_db():
    """ creates the store if it does not exist yet """
    _store().create()
    click.echo('store ready at %s' % cfg.master)


@cli.command('reset-db')
@click.confirmation_option(prompt='This deletes every post. Continue?')
def reset_db():
    _store().reset()
    click.echo('store emptied at %s' % cfg.master)


@cli.command('seed')
def seed():
    """ adds the welcome thread """
    store = _store()
    store.create()
    threadid = submit.seed_board(store)
    click.echo('welcome thread is %s' % threadid)


@cli.command('serve')
@click.option('--host', default='127.0.0.1')
@click.option('--port', default=3000, type=int)
def serve(host, port):
    """ runs the development server; one thread per request """
    from chan import create_app
    try:
        app = create_app()
    except err.StorageError as e:
        raise click.ClickException(e.message)
    app.run(host=host, port=port, debug=cfg.debug, threaded=True)


if __name__ == '__main__':
    cli()
