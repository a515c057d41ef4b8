# routes/exports.py
from flask import request, jsonify, send_file, current_app

from . import exports_bp
from ..services.export_service import ExportService, EXPORT_FORMATS
from ..services.storage_gateway import get_gateway

from agenda import logger

FORMAT_ALIASES = {'XLSX': 'EXCEL'}


@exports_bp.route("/history", methods=["GET"])
def export_history():
    """
    Download the appointment history
    ---
    parameters:
      - in: query
        name: format
        description: html (default), csv, pdf or xlsx
    responses:
      200:
        description: Export file
      400:
        description: Unsupported format
    """
    format_type = request.args.get('format', 'html').upper()
    format_type = FORMAT_ALIASES.get(format_type, format_type)
    if format_type not in EXPORT_FORMATS:
        return jsonify({"error": f"Unsupported export format: {format_type.lower()}"}), 400

    try:
        appointments = get_gateway().get_history_appointments()
        file_data, mimetype, filename = ExportService.generate_history_file(
            appointments,
            format_type,
            currency_symbol=current_app.config['CURRENCY_SYMBOL']
        )
    except Exception as e:
        logger.error(f"Error exporting history: {str(e)}")
        return jsonify({"error": "Erro ao exportar histórico. Tente novamente."}), 500

    return send_file(
        file_data,
        mimetype=mimetype,
        as_attachment=True,
        download_name=filename
    )
