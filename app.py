# app.py
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix
import logging
import time
import sys

from config import Config
from routes.scripture import scripture_bp
from routes.rpc import rpc_bp
from scripture_service import get_service
from utils.rpc import build_dispatcher

# Configure logging to output to stdout
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def create_app(service=None):
    """Build the Flask app around a scripture service (the shared one by default)."""
    app = Flask(__name__)

    # Use ProxyFix to handle proxy headers properly
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    app.json.sort_keys = False  # Preserve order of keys in JSON responses
    app.json.compact = True
    app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024
    app.config['CORS_HEADERS'] = 'Content-Type'

    CORS(app, resources={
        r"/api/*": {"origins": "*", "methods": ["GET", "POST", "OPTIONS"]},
        r"/rpc": {"origins": "*", "methods": ["POST", "OPTIONS"]},
    })

    # Ensure URLs with or without trailing slashes are handled the same way
    app.url_map.strict_slashes = False

    # The corpus is loaded here, before the first request is served
    if service is None:
        logger.info("Loading scripture corpus...")
        service = get_service()
    app.extensions['scripture_service'] = service
    app.extensions['scripture_rpc'] = build_dispatcher(service)

    app.register_blueprint(scripture_bp, url_prefix='/api/scripture')
    app.register_blueprint(rpc_bp)

    @app.before_request
    def before_request():
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - g.get('start_time', time.time())
        logger.info(f"Request to {request.path} took {duration:.3f} seconds")
        return response

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint that also reports the loaded corpus size"""
        stats = service.store.stats()
        return jsonify({
            'status': 'healthy' if stats['verses'] else 'empty',
            'corpus': stats,
            'timestamp': time.time()
        })

    return app


if __name__ == '__main__':
    print("Starting Flask server...")
    create_app().run(debug=True, port=Config.PORT)
