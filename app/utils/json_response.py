from flask import jsonify
from ..constants.service_code import HTTP_STATUS_CODES


def prepared_response(status, status_code, message, data=None, errors=None, error=None, **extra):
    # Fields that always appear in the envelope
    mandatory_fields = ["success", "message", "status_code"]

    all_fields = {
        "success": status,
        "message": f"{message}",
        "status_code": HTTP_STATUS_CODES[status_code],
        "data": data,
        "errors": errors,
        "error": error,
    }

    response_data = {
        key: value for key, value in all_fields.items()
        if key in mandatory_fields or value is not None
    }

    # Report payloads put summary/breakdowns next to data
    for key, value in extra.items():
        response_data[key] = value

    return jsonify(response_data), HTTP_STATUS_CODES[status_code]
