# routes/appointments.py
from flask import request, jsonify, current_app
from marshmallow import ValidationError

from . import appointments_bp
from agenda import logger
from ..schemas.appointment_schemas import AppointmentSchema
from ..services.appointment_service import AppointmentService
from ..services.reminder_service import compute_reminder
from ..services.storage_gateway import get_gateway
from ..validation import validate_appointment_input, parse_list_query
from ..utils.helpers import now


def _reminder_for(appointment):
    reminder = compute_reminder(
        appointment,
        now(),
        lead_minutes=current_app.config['REMINDER_LEAD_MINUTES'],
        evening_hour=current_app.config['REMINDER_EVENING_HOUR']
    )
    if reminder:
        reminder['notify_at'] = reminder['notify_at'].isoformat()
    return reminder


@appointments_bp.route("/upcoming", methods=["GET"])
def list_upcoming():
    """
    Appointments from today on that are not completed, soonest first.
    Optional query arg ``today`` (YYYY-MM-DD) replaces the current date.
    """
    try:
        today = parse_list_query(request.args)
    except ValidationError as e:
        return jsonify({"error": e.messages}), 400

    appointments = get_gateway().get_future_appointments(today)
    return jsonify(AppointmentSchema(many=True).dump(appointments)), 200


@appointments_bp.route("/history", methods=["GET"])
def list_history():
    """Past or completed appointments, most recent first"""
    try:
        today = parse_list_query(request.args)
    except ValidationError as e:
        return jsonify({"error": e.messages}), 400

    appointments = get_gateway().get_history_appointments(today)
    return jsonify(AppointmentSchema(many=True).dump(appointments)), 200


@appointments_bp.route("/<int:appointment_id>", methods=["GET"])
def get_appointment(appointment_id):
    appointment = get_gateway().get_appointment(appointment_id)
    if appointment is None:
        return jsonify({"error": f"Appointment with ID {appointment_id} not found"}), 404
    return jsonify(AppointmentSchema().dump(appointment)), 200


@appointments_bp.route("", methods=["POST"])
def create_appointment():
    """
    Create an appointment from the form.

    JSON Payload (example):
    {
      "client_name": "Maria Souza",
      "phone": "(11) 98765-4321",
      "date": "2025-01-10",
      "start_time": "09:00",
      "end_time": "10:00",
      "value": 80.0,
      "notify": true
    }

    The client is matched by name, ignoring case, and created when missing.

    Response:
      201 Created
      {
        "message": "Appointment created successfully!",
        "appointment_id": <id>,
        "appointment": {...},
        "reminder": {...} | null
      }
    """
    data = request.get_json(silent=True) or {}
    validated_data, errors = validate_appointment_input(data)
    if errors:
        logger.error(f"Validation error: {errors}")
        return jsonify({"errors": errors}), 400

    try:
        appointment = AppointmentService.create_appointment(get_gateway(), validated_data)
    except Exception as e:
        logger.error(f"Error creating appointment: {str(e)}")
        return jsonify({"error": "Erro ao salvar agendamento. Tente novamente."}), 500

    return jsonify({
        "message": "Appointment created successfully!",
        "appointment_id": appointment.id,
        "appointment": AppointmentSchema().dump(appointment),
        "reminder": _reminder_for(appointment)
    }), 201


@appointments_bp.route("/<int:appointment_id>", methods=["PUT"])
def edit_appointment(appointment_id):
    """Replace the form fields of an existing appointment"""
    data = request.get_json(silent=True) or {}
    validated_data, errors = validate_appointment_input(data)
    if errors:
        return jsonify({"errors": errors}), 400

    # AppointmentNotFound is turned into a 404 by the app error handler
    appointment = AppointmentService.edit_appointment(get_gateway(), appointment_id, validated_data)

    return jsonify({
        "message": "Appointment updated successfully!",
        "appointment": AppointmentSchema().dump(appointment),
        "reminder": _reminder_for(appointment)
    }), 200


@appointments_bp.route("/<int:appointment_id>/complete", methods=["POST"])
def complete_appointment(appointment_id):
    appointment = get_gateway().mark_completed(appointment_id)
    return jsonify({
        "message": "Appointment marked as completed",
        "appointment": AppointmentSchema().dump(appointment)
    }), 200


@appointments_bp.route("/<int:appointment_id>", methods=["DELETE"])
def delete_appointment(appointment_id):
    get_gateway().delete_appointment(appointment_id)
    return jsonify({"message": "Appointment deleted", "appointment_id": appointment_id}), 200


@appointments_bp.route("/<int:appointment_id>/reminder", methods=["GET"])
def get_reminder(appointment_id):
    """When and how the business is reminded of this appointment, if at all"""
    appointment = get_gateway().get_appointment(appointment_id)
    if appointment is None:
        return jsonify({"error": f"Appointment with ID {appointment_id} not found"}), 404
    return jsonify({"appointment_id": appointment_id, "reminder": _reminder_for(appointment)}), 200
