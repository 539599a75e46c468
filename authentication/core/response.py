def standardized_response(success=True, data=None, message=None, error=None, error_code=None, **extra):
    """
    Build the JSON envelope shared by every API response.

    Keys with no value are left out so clients only see what applies:
    {"success": true, "message": "...", "data": {...}} or
    {"success": false, "error": "...", "error_code": "..."}
    """
    payload = {"success": success}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    if error is not None:
        payload["error"] = error
    if error_code is not None:
        payload["error_code"] = error_code
    payload.update(extra)
    return payload
