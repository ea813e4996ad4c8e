"""
Standard API response envelope.

Every response body carries `success` and an ISO-8601 UTC `timestamp`,
plus either `data`/`message` or an `error` object.

Example:
    from common.utils import success_response

    @router.get("/workouts/{workout_id}")
    async def get_workout(workout_id: str):
        workout = await workout_service.get_workout(user_id, workout_id)
        return success_response(workout)
"""

from datetime import datetime, timezone
from typing import Any, Optional, Dict


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_response(
    data: Any = None,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a standard success response.

    Args:
        data: The response data (can be dict, list, or any serializable type)
        message: Optional success message

    Returns:
        Dictionary with success=True, timestamp, and optional data/message
    """
    response: Dict[str, Any] = {"success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    response["timestamp"] = _timestamp()
    return response


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Create a standard error response.

    Args:
        message: Human-readable error message
        code: Machine-readable error code (e.g., "WORKOUT_NOT_FOUND")
        details: Additional error details (per-field errors for validation)

    Returns:
        Dictionary with success=False, error info, and timestamp
    """
    error: Dict[str, Any] = {"message": message}

    if code:
        error["code"] = code

    if details is not None:
        error["details"] = details

    return {"success": False, "error": error, "timestamp": _timestamp()}


def list_response(
    items: list,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a simple list response with a count."""
    response = success_response(items, message)
    response["count"] = len(items)
    return response
