from flask import jsonify


def success_response(message: str, data=None, status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def error_response(message: str, error: str, status: int, details: dict | None = None):
    payload = {"success": False, "message": message, "error": error}
    if details:
        payload["details"] = details
    return jsonify(payload), status
