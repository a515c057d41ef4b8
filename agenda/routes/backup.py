# routes/backup.py
from datetime import date
from io import BytesIO

from flask import request, jsonify, send_file

from . import backup_bp
from ..services.storage_gateway import get_gateway

from agenda import logger


@backup_bp.route("", methods=["GET"])
def download_backup():
    """Download every client and appointment as a JSON backup file"""
    try:
        backup = get_gateway().export_snapshot()
    except Exception as e:
        logger.error(f"Error exporting backup: {str(e)}")
        return jsonify({"error": "Erro ao exportar backup. Tente novamente."}), 500

    return send_file(
        BytesIO(backup.encode('utf-8')),
        mimetype='application/json',
        as_attachment=True,
        download_name=f"clientes_backup_{date.today().isoformat()}.json"
    )


@backup_bp.route("/restore", methods=["POST"])
def restore_backup():
    """
    Replace all data with a backup.

    Accepts either a multipart upload in the ``file`` field or the backup
    JSON as the raw request body. The current data is left untouched when
    the backup cannot be read.
    """
    upload = request.files.get('file')
    raw = upload.read() if upload is not None else request.get_data()
    try:
        backup = raw.decode('utf-8')
    except UnicodeDecodeError:
        logger.error("Backup is not valid UTF-8")
        return jsonify({"error": "Erro ao importar backup. Formato inválido."}), 400

    if not backup:
        return jsonify({"error": "No backup provided"}), 400

    if not get_gateway().import_snapshot(backup):
        return jsonify({"error": "Erro ao importar backup. Formato inválido."}), 400

    return jsonify({"message": "Backup importado com sucesso!"}), 200


@backup_bp.route("/clear", methods=["POST"])
def clear_data():
    """Remove every client and appointment"""
    get_gateway().clear_all()
    return jsonify({"message": "All data removed"}), 200
