# routes/pages.py
from flask import render_template, request, current_app
from marshmallow import ValidationError

from . import pages_bp
from ..services.storage_gateway import get_gateway
from ..utils.helpers import format_date_br, format_value
from ..validation import parse_list_query

from agenda import logger


@pages_bp.app_template_filter('date_br')
def date_br_filter(value):
    return format_date_br(value)


@pages_bp.app_template_filter('money')
def money_filter(value):
    return format_value(value, current_app.config['CURRENCY_SYMBOL'])


@pages_bp.route("/dashboard", methods=["GET"])
def dashboard():
    """Rendered list of upcoming appointments"""
    try:
        today = parse_list_query(request.args)
        appointments = get_gateway().get_future_appointments(today)
        return render_template('pages/dashboard.html', appointments=appointments)
    except ValidationError as e:
        return f"Invalid query: {e.messages}", 400
    except Exception as e:
        logger.error(f"Error loading appointments: {str(e)}")
        return '<p class="empty-message">Erro ao carregar agendamentos. Tente novamente.</p>', 500


@pages_bp.route("/history", methods=["GET"])
def history():
    """Rendered list of past and completed appointments"""
    try:
        today = parse_list_query(request.args)
        appointments = get_gateway().get_history_appointments(today)
        return render_template('pages/history.html', appointments=appointments)
    except ValidationError as e:
        return f"Invalid query: {e.messages}", 400
    except Exception as e:
        logger.error(f"Error loading history: {str(e)}")
        return '<p class="empty-message">Erro ao carregar histórico. Tente novamente.</p>', 500
