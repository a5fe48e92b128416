# media_gallery/services/delete_controller.py
"""
Delete controls of the admin area.

Maps "delete this image / video / event" activations onto the
confirmation gate and, once confirmed, onto the deletion pipeline. Targets
are looked up in the read model; nothing touches a store until the second
activation.
"""

from ..constants import GATE_KEY_SEPARATOR
from ..enums import GateState, MediaType
from ..exceptions import DocumentNotFoundError
from ..models.pipeline_models import DeleteRequestResult
from .confirmation_gate import ConfirmationGate
from .deletion_pipeline import DeletionPipeline
from .gallery_read_model import GalleryReadModel

EVENT_KEY_PREFIX = "event"


def media_gate_key(media_type: MediaType, media_id: str) -> str:
    return f"{media_type.value}{GATE_KEY_SEPARATOR}{media_id}"


def event_gate_key(event_id: str) -> str:
    return f"{EVENT_KEY_PREFIX}{GATE_KEY_SEPARATOR}{event_id}"


class DeleteController:
    def __init__(
        self,
        gate: ConfirmationGate,
        pipeline: DeletionPipeline,
        read_model: GalleryReadModel,
    ):
        self.gate = gate
        self.pipeline = pipeline
        self.read_model = read_model

    async def request_media_delete(
        self, media_type: MediaType, media_id: str
    ) -> DeleteRequestResult:
        """
        Raises:
            DocumentNotFoundError: The read model does not know the item
        """
        item = self.read_model.find_media(media_type, media_id)
        if item is None:
            raise DocumentNotFoundError(f"{media_type.value.capitalize()} {media_id} not found")

        key = media_gate_key(media_type, media_id)
        gate_result = await self.gate.activate(key, lambda: self.pipeline.delete_media(item))
        return DeleteRequestResult(
            state=gate_result.state,
            target_key=key,
            prompt=(
                f"Click again to delete {media_type.value} {media_id}"
                if gate_result.state is GateState.ARMED
                else ""
            ),
            outcome=gate_result.result,
        )

    async def request_event_delete(self, event_id: str) -> DeleteRequestResult:
        """
        Raises:
            DocumentNotFoundError: The read model does not know the event
        """
        event = self.read_model.find_event(event_id)
        if event is None:
            raise DocumentNotFoundError(f"Event {event_id} not found")

        key = event_gate_key(event_id)
        gate_result = await self.gate.activate(key, lambda: self.pipeline.delete_event(event))
        return DeleteRequestResult(
            state=gate_result.state,
            target_key=key,
            prompt=(
                f"Click again to delete event {event.title}"
                if gate_result.state is GateState.ARMED
                else ""
            ),
            outcome=gate_result.result,
        )

    def cancel(self) -> None:
        self.gate.cancel()
