# routes/rpc.py
from flask import Blueprint, jsonify, request, current_app
import logging

from utils.rpc import INVALID_REQUEST, PARSE_ERROR

rpc_bp = Blueprint('rpc', __name__)
logger = logging.getLogger(__name__)


@rpc_bp.route('/rpc', methods=['POST'])
def rpc():
    dispatcher = current_app.extensions['scripture_rpc']

    message = request.get_json(silent=True)
    if message is None:
        logger.warning("RPC request body is not valid JSON")
        return jsonify({"jsonrpc": "2.0", "id": None,
                        "error": {"code": PARSE_ERROR, "message": "Parse error"}})

    if isinstance(message, list):
        if not message:
            return jsonify({"jsonrpc": "2.0", "id": None,
                            "error": {"code": INVALID_REQUEST, "message": "Invalid Request"}})
        responses = [r for r in (dispatcher.handle(m) for m in message) if r is not None]
        return (jsonify(responses), 200) if responses else ('', 204)

    response = dispatcher.handle(message)
    if response is None:
        return '', 204
    return jsonify(response)
