# routes/clients.py
from flask import jsonify, request
from marshmallow import ValidationError

from . import clients_bp
from ..schemas.client_schema import ClientSchema
from ..services.storage_gateway import get_gateway

from agenda import logger


@clients_bp.route("", methods=["POST"])
def create_client():
    """
    Add a client
    ---
    tags:
      - Clients
    responses:
      201:
        description: Client created successfully
      400:
        description: Validation error
    """
    schema = ClientSchema()
    try:
        data = schema.load(request.get_json(silent=True) or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({"error": e.messages}), 400

    gateway = get_gateway()
    client_id = gateway.add_client(data)
    return jsonify({
        "message": "Client created successfully",
        "client": schema.dump(gateway.get_client(client_id))
    }), 201


@clients_bp.route("", methods=["GET"])
def list_clients():
    """
    Get all clients
    ---
    tags:
      - Clients
    responses:
      200:
        description: List of clients
    """
    clients = get_gateway().get_clients()
    return jsonify(ClientSchema(many=True).dump(clients)), 200
