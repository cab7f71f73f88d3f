"""
Flask application exposing linked-data authorities for search and term lookup.
Contains the routes, error mapping and application entry point.
"""

import argparse
import logging

from flask import Flask, jsonify, request
from logging.handlers import RotatingFileHandler

from ld_authority import PROJECT_ROOT
from ld_authority.authorities import AuthorityManager
from ld_authority.config_loader import ConfigLoader, default_language
from ld_authority.errors import (
    InvalidAuthority,
    InvalidConfiguration,
    ServiceError,
    ServiceUnavailable,
    TermNotFound,
)

logger = logging.getLogger(__name__)

# Query parameters consumed by the routes rather than passed to URL templates
RESERVED_PARAMS = {'q', 'lang'}


def _replacements(args):
    return {k: v for k, v in args.items() if k not in RESERVED_PARAMS}


def create_app(manager):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    @app.errorhandler(InvalidAuthority)
    def invalid_authority(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(InvalidConfiguration)
    def invalid_configuration(e):
        logger.error(f"Configuration error: {e}")
        return jsonify({"error": str(e)}), 500

    @app.errorhandler(TermNotFound)
    def term_not_found(e):
        return jsonify({"error": str(e), "url": e.url}), 404

    @app.errorhandler(ServiceError)
    def service_error(e):
        logger.warning(f"Authority service error: {e}")
        return jsonify({"error": str(e), "url": e.url}), 502

    @app.errorhandler(ServiceUnavailable)
    def service_unavailable(e):
        logger.warning(f"Authority unavailable: {e}")
        return jsonify({"error": str(e), "url": e.url}), 503

    # --- Routes ---

    @app.route('/qa/authorities', methods=['GET'])
    def list_authorities():
        """List configured authorities"""
        return jsonify({
            "authorities": manager.list_authorities(),
            "default_language": list(manager.languages.snapshot()),
        })

    @app.route('/qa/search/linked_data/<vocab>', methods=['GET'])
    @app.route('/qa/search/linked_data/<vocab>/<subauthority>', methods=['GET'])
    def search(vocab, subauthority=None):
        """Search an authority; returns a JSON list of results"""
        query = request.args.get('q')
        if not query:
            return jsonify({"error": "q is required"}), 400
        authority = manager.get_authority(vocab)
        logger.info(f"Search request: '{query}' (authority: {vocab}, subauthority: {subauthority})")
        results = authority.search(
            query,
            language=request.args.get('lang'),
            replacements=_replacements(request.args),
            subauth=subauthority,
        )
        return jsonify(results)

    @app.route('/qa/show/linked_data/<vocab>/<path:id>', methods=['GET'])
    def show(vocab, id):
        """Fetch a single term; a leading configured sub-authority segment selects it"""
        authority = manager.get_authority(vocab)
        subauthority = None
        if '/' in id:
            head, rest = id.split('/', 1)
            if authority.term_subauthority(head):
                subauthority, id = head, rest
        term = authority.find(
            id,
            language=request.args.get('lang'),
            replacements=_replacements(request.args),
            subauth=subauthority,
        )
        return jsonify(term)

    return app


def main():
    """Entry point: parse CLI args, configure logging, create app, and run."""
    log_dir = PROJECT_ROOT / 'logs'
    log_dir.mkdir(exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            RotatingFileHandler(str(log_dir / 'app.log'), maxBytes=10485760, backupCount=5),
            logging.StreamHandler()
        ]
    )

    parser = argparse.ArgumentParser(description='Linked Data Authority Service')
    parser.add_argument('--env', type=str, help='Path to environment file')
    parser.add_argument('--port', type=int, default=None, help='Port to listen on (overrides PORT)')
    parser.add_argument('--language', type=str, default=None,
                        help='Comma-separated default language(s); pass "" to disable language filtering')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging.')
    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.info("Debug logging enabled")

    config = ConfigLoader.load_config(args.env)
    default_language.set(config["default_language"] if args.language is None else args.language)

    authority_configs = ConfigLoader.load_authority_configs(config["authorities_dir"])
    if not authority_configs:
        logger.warning(f"No authorities configured in {config['authorities_dir']}")

    manager = AuthorityManager(authority_configs, config)
    app = create_app(manager)
    port = args.port or config.get("port", 5002)

    print(f"Starting linked data authority service on http://localhost:{port}")
    print(f"Configured authorities: {', '.join(authority_configs) or 'none'}")
    print(f"Default language: {', '.join(default_language.snapshot()) or 'none'}")
    app.run(debug=False, host='127.0.0.1', port=port)


if __name__ == '__main__':
    main()
