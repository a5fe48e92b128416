# media_gallery/routers/delete_routers.py
"""
Delete controls of the admin area.

Every delete is two requests: the first arms the confirmation gate for the
target and changes nothing, the second (within the confirmation window)
runs the deletion cascade.
"""
# NOTE: THIS FILE SHOULD NOT CONTAIN ANY BUSINESS LOGIC.

from fastapi import APIRouter

from ..dependencies import DeleteControllerDep
from ..enums import GateState
from ..models.pipeline_models import DeleteRequestResult
from ..utils.response_helpers import ResponseFormatter
from ..utils.router_helpers import handle_exceptions, validate_media_type

router = APIRouter(tags=["delete"])


def _format_request_result(result: DeleteRequestResult):
    payload = result.model_dump(mode="json")
    if result.state is GateState.ARMED:
        return ResponseFormatter.success(result.prompt, data=payload)
    if result.state is GateState.BUSY:
        return ResponseFormatter.error("A delete is already in progress", details=payload)
    return ResponseFormatter.outcome(result.outcome, data=payload)


@router.post("/media/{media_type}/{media_id}/delete")
@handle_exceptions("delete media")
async def delete_media(media_type: str, media_id: str, delete_controller: DeleteControllerDep):
    """Arm, or confirm, deletion of an image or video."""
    kind = validate_media_type(media_type)
    result = await delete_controller.request_media_delete(kind, media_id)
    return _format_request_result(result)


@router.post("/events/{event_id}/delete")
@handle_exceptions("delete event")
async def delete_event(event_id: str, delete_controller: DeleteControllerDep):
    """Arm, or confirm, deletion of an event. Linked media are kept and unlinked."""
    result = await delete_controller.request_event_delete(event_id)
    return _format_request_result(result)


@router.post("/delete/cancel")
@handle_exceptions("cancel delete")
async def cancel_delete(delete_controller: DeleteControllerDep):
    delete_controller.cancel()
    return ResponseFormatter.success("Delete cancelled")
