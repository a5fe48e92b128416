# media_gallery/utils/response_helpers.py
"""
Response envelope.

Every endpoint answers with ``{"success", "message", "data"}``; failures
carry ``details`` (and optionally ``error_code``) instead of ``data``.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

Payload = Optional[Union[Dict[str, Any], List[Any]]]


class ResponseFormatter:
    @staticmethod
    def success(message: str, data: Payload = None, **extra: Any) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {"success": True, "message": message}
        if data is not None:
            envelope["data"] = data
        envelope.update(extra)
        return envelope

    @staticmethod
    def error(
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        **extra: Any,
    ) -> Dict[str, Any]:
        """
        Failure envelope.

        Args:
            message: Shown to the user as-is
            error_code: Machine readable code, omitted when empty
            details: Structured context, omitted when empty
        """
        envelope: Dict[str, Any] = {"success": False, "message": message}
        if error_code:
            envelope["error_code"] = error_code
        if details:
            envelope["details"] = details
        envelope.update(extra)
        return envelope

    @staticmethod
    def outcome(
        result: BaseModel, data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Envelope a pipeline outcome model.

        The outcome's own ``success`` and ``message`` become the envelope
        fields; the full outcome is returned as ``data`` (or ``details``)
        unless ``data`` overrides it.
        """
        payload = data if data is not None else result.model_dump(mode="json")
        message = getattr(result, "message", "")
        if getattr(result, "success", False):
            return ResponseFormatter.success(message, data=payload)
        return ResponseFormatter.error(message, details=payload)
