# routes/scripture.py
from flask import Blueprint, jsonify, request, current_app
import logging

scripture_bp = Blueprint('scripture', __name__)
logger = logging.getLogger(__name__)


def _service():
    return current_app.extensions['scripture_service']


def _respond(result, key='results'):
    """Map a ToolResult onto an HTTP response."""
    if result.is_error:
        return jsonify({"error": result.text}), 400
    body = {key: result.payload, "text": result.text}
    if not result.found:
        body["message"] = result.text
    return jsonify(body), 200


def _arguments():
    """Query string merged with an optional JSON body."""
    arguments = request.args.to_dict()
    if request.is_json:
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            arguments.update(body)
    return arguments


@scripture_bp.route('/search', methods=['GET', 'POST'])
def search():
    try:
        return _respond(_service().search(_arguments()))
    except Exception as e:
        logger.error(f"Search error: {str(e)}", exc_info=True)
        return jsonify({'error': 'An error occurred during search.'}), 500


@scripture_bp.route('/verses', methods=['GET'])
def get_verses():
    try:
        return _respond(_service().get_verses(_arguments()))
    except Exception as e:
        logger.error(f"Error in get_verses: {str(e)}", exc_info=True)
        return jsonify({"error": str(e)}), 500


@scripture_bp.route('/chapter', methods=['GET'])
def get_chapter():
    try:
        return _respond(_service().get_chapter(_arguments()))
    except Exception as e:
        logger.error(f"Error in get_chapter: {str(e)}", exc_info=True)
        return jsonify({"error": str(e)}), 500


@scripture_bp.route('/collections', methods=['GET'])
def list_collections():
    try:
        return _respond(_service().list_collections(), key='collections')
    except Exception as e:
        logger.error(f"Error in list_collections: {str(e)}", exc_info=True)
        return jsonify({"error": str(e)}), 500


@scripture_bp.route('/books', methods=['GET'])
def list_books():
    try:
        return _respond(_service().list_books(_arguments()), key='books')
    except Exception as e:
        logger.error(f"Error in list_books: {str(e)}", exc_info=True)
        return jsonify({"error": str(e)}), 500


@scripture_bp.route('/term-counts', methods=['GET', 'POST'])
def count_terms():
    try:
        arguments = _arguments()
        # ?terms=faith&terms=hope or ?terms=faith,hope
        if 'terms' in request.args:
            terms = []
            for value in request.args.getlist('terms'):
                terms.extend(part for part in value.split(',') if part.strip())
            if not isinstance(arguments.get('terms'), list):
                arguments['terms'] = terms
        return _respond(_service().count_terms(arguments), key='counts')
    except Exception as e:
        logger.error(f"Error counting terms: {str(e)}", exc_info=True)
        return jsonify({"error": str(e)}), 500
