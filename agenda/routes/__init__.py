from flask import Blueprint

# Appointment routes
appointments_bp = Blueprint('appointments', __name__)

# Client routes
clients_bp = Blueprint('clients', __name__)

# Rendered list fragments
pages_bp = Blueprint('pages', __name__)

# History exports
exports_bp = Blueprint('exports', __name__)

# Backup, restore and reset
backup_bp = Blueprint('backup', __name__)

# Import route handlers to register routes
from . import (
    appointments,
    clients,
    pages,
    exports,
    backup
)
