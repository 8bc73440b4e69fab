# app.py
from flask import Flask, jsonify, request, g, current_app
from flask_cors import CORS
from routes.verses import verses_bp
from config import Config
from utils.async_runner import BackgroundLoop
from utils.bible_api import BibleApiClient
from utils.resolver import build_resolver
import atexit
import os
import logging
import time
import sys
from werkzeug.middleware.proxy_fix import ProxyFix

# Configure logging to output to stdout
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

def create_app(config=Config, resolver=None, loop=None, bible_api=None):
    app = Flask(__name__)

    # Use ProxyFix to handle proxy headers properly
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    app.json.sort_keys = False  # Preserve order of keys in JSON responses
    app.json.compact = True
    app.json.ensure_ascii = False  # Danish verse text stays readable
    app.config['REQUEST_BUDGET_SECONDS'] = config.REQUEST_BUDGET_SECONDS

    # The proxy is called from the browser on any origin
    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "OPTIONS"],
            "allow_headers": ["Content-Type"],
        }
    })

    app.url_map.strict_slashes = False

    if resolver is None:
        logger.info("Building verse resolver...")
        resolver = build_resolver(config)
    if bible_api is None:
        bible_api = BibleApiClient.from_config(config)
        if not bible_api.configured:
            logger.warning("BIBLE_API_KEY is not set; /api/verses/search will answer 503")
    if loop is None:
        loop = BackgroundLoop()
        atexit.register(_shutdown, loop, resolver.remote_fetcher, bible_api)
    app.extensions['verse_resolver'] = resolver
    app.extensions['bible_api'] = bible_api
    app.extensions['verse_loop'] = loop

    app.register_blueprint(verses_bp, url_prefix='/api/verses')

    @app.before_request
    def before_request():
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - g.get('start_time', time.time())
        logger.info(f"Request to {request.path} took {duration:.2f} seconds")
        return response

    @app.route('/health', methods=['GET'])
    def health():
        """Health check that also reports which verse datasets are in memory"""
        store = current_app.extensions['verse_resolver'].local_store
        return jsonify({
            'status': 'healthy',
            'datasets_loaded': store.loaded_languages() if store is not None else [],
            'timestamp': time.time()
        })

    return app

def _shutdown(loop, *clients):
    if not loop.started:
        return
    try:
        for client in clients:
            if client is not None:
                loop.run(client.close(), timeout=5)
        loop.stop()
    except Exception as e:
        logger.warning(f"Shutdown cleanup failed: {str(e)}")

app = create_app()

if __name__ == '__main__':
    print("Starting Flask server...")
    port = int(os.getenv('PORT', Config.PORT))
    app.run(debug=True, port=port)
