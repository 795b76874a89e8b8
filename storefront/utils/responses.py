from typing import Any, Optional


def success(data: Any = None, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def failure(message: str) -> dict:
    return {"success": False, "message": message}
