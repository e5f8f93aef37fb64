def standardized_response(success=True, data=None, message=None, error=None, error_code=None):
    """Envelope shared by every API response."""
    payload = {"success": success}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    if error is not None:
        payload["error"] = error
    if error_code is not None:
        payload["error_code"] = error_code
    return payload
