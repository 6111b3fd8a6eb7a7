import logging
import os

from flask import Flask, abort, redirect, send_from_directory

logger = logging.getLogger('safe_links.app')


def create_app(site_dir, base_path=''):
    """Serve a built site the way it will be deployed, mounted under ``/<base_path>/``."""
    site_dir = os.path.abspath(site_dir)
    if not os.path.isdir(site_dir):
        raise FileNotFoundError(f'Site directory not found: {site_dir}')
    base_path = (base_path or '').strip('/')
    prefix = '/' + base_path if base_path else ''

    app = Flask(__name__, static_folder=None)
    app.config['SITE_DIR'] = site_dir
    app.config['BASE_PATH'] = base_path

    def serve(path):
        full = os.path.join(site_dir, path)
        if os.path.isdir(full):
            path = (path.rstrip('/') + '/index.html').lstrip('/')
            full = os.path.join(site_dir, path)
        if not os.path.isfile(full):
            logger.debug('[preview] not found: %s', full)
            abort(404)
        # send_from_directory refuses paths escaping site_dir
        return send_from_directory(site_dir, path)

    @app.route(prefix + '/', defaults={'path': ''})
    @app.route(prefix + '/<path:path>')
    def site(path):
        return serve(path)

    if prefix:
        @app.route('/')
        def root():
            return redirect(prefix + '/')

    return app
