#!/usr/bin/env python3
"""
Router Integration Tests.

Drives the HTTP API end to end against the in-memory stores: uploads,
two-step deletes, metadata edits and the gallery read endpoints.
"""

import pytest
from fastapi import status

from media_factories import make_jpeg
from media_gallery.constants import IMAGES_COLLECTION, MSG_FILES_REQUIRED


def _upload(client, name="beach.jpg", **form):
    data = {"date": "2024-07-04", **form}
    files = [("files", (name, make_jpeg((320, 240)), "image/jpeg"))]
    return client.post("/api/media/upload", data=data, files=files)


@pytest.mark.integration
class TestUploadRoutes:
    def test_upload_image(self, test_client, app_stores):
        response = _upload(test_client, caption="Waves")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "1 upload completed successfully!"
        assert body["data"]["results"][0]["media_id"] == "beach.jpg"
        assert app_stores[0].dump(IMAGES_COLLECTION)["beach.jpg"]["caption"] == "Waves"

    def test_same_name_twice_gets_suffix(self, test_client):
        _upload(test_client)
        second = _upload(test_client)

        assert second.json()["data"]["results"][0]["media_id"] == "beach-1.jpg"

    def test_upload_without_date_is_rejected(self, test_client):
        response = test_client.post(
            "/api/media/upload",
            data={"date": ""},
            files=[("files", ("beach.jpg", make_jpeg((64, 48)), "image/jpeg"))],
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unsupported_file_is_reported_per_file(self, test_client):
        response = test_client.post(
            "/api/media/upload",
            data={"date": "2024-07-04"},
            files=[("files", ("notes.txt", b"hello", "text/plain"))],
        )

        body = response.json()
        assert body["success"] is False
        assert body["details"]["results"][0]["success"] is False

    def test_upload_with_new_event(self, test_client):
        response = _upload(test_client, new_event_title="Summer Trip", new_event_emoji="🌞")

        created = response.json()["data"]["created_event_id"]
        gallery = test_client.get("/api/gallery").json()["data"]
        assert gallery["events"][0]["id"] == created
        assert gallery["events"][0]["imageIds"] == ["beach.jpg"]
        assert gallery["images"][0]["event"] == "Summer Trip"

    def test_create_event(self, test_client):
        response = test_client.post(
            "/api/events", json={"date": "2024-07-04", "title": "Summer Trip"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["event_id"]

    def test_create_event_requires_title(self, test_client):
        response = test_client.post("/api/events", json={"date": "2024-07-04", "title": ""})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_infer_date(self, test_client):
        response = test_client.post(
            "/api/media/infer-date",
            files={"file": ("a.jpg", make_jpeg((64, 48), exif_date="2023:08:01 10:00:00"), "image/jpeg")},
        )

        assert response.json()["data"] == {"date": "2023-08-01", "source": "metadata"}


@pytest.mark.integration
@pytest.mark.deletion
class TestDeleteRoutes:
    def test_two_step_delete(self, test_client, app_stores):
        _upload(test_client)

        armed = test_client.post("/api/media/image/beach.jpg/delete")
        assert armed.json()["message"] == "Click again to delete image beach.jpg"
        assert "beach.jpg" in app_stores[0].dump(IMAGES_COLLECTION)

        confirmed = test_client.post("/api/media/image/beach.jpg/delete")

        assert confirmed.json()["success"] is True
        assert app_stores[0].dump(IMAGES_COLLECTION) == {}
        assert app_stores[1].keys() == []

    def test_cancel_disarms(self, test_client, app_stores):
        _upload(test_client)

        test_client.post("/api/media/image/beach.jpg/delete")
        test_client.post("/api/delete/cancel")
        again = test_client.post("/api/media/image/beach.jpg/delete")

        assert again.json()["data"]["state"] == "armed"
        assert "beach.jpg" in app_stores[0].dump(IMAGES_COLLECTION)

    def test_unknown_media(self, test_client):
        response = test_client.post("/api/media/video/ghost.mp4/delete")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_media_type(self, test_client):
        response = test_client.post("/api/media/audio/a.mp3/delete")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_event_delete_keeps_media(self, test_client, app_stores):
        event_id = _upload(test_client, new_event_title="Trip").json()["data"]["created_event_id"]

        test_client.post(f"/api/events/{event_id}/delete")
        confirmed = test_client.post(f"/api/events/{event_id}/delete")

        assert confirmed.json()["data"]["outcome"]["cleared_media_ids"] == ["beach.jpg"]
        assert app_stores[0].dump(IMAGES_COLLECTION)["beach.jpg"]["event"] is None


@pytest.mark.integration
class TestMetadataRoutes:
    def test_patch_media(self, test_client, app_stores):
        _upload(test_client)

        response = test_client.patch(
            "/api/media/image/beach.jpg", json={"date": "2023-01-02", "event": ""}
        )

        assert response.status_code == status.HTTP_200_OK
        assert app_stores[0].dump(IMAGES_COLLECTION)["beach.jpg"]["date"] == "2023-01-02"

    def test_patch_media_bad_date(self, test_client):
        _upload(test_client)

        response = test_client.patch("/api/media/image/beach.jpg", json={"date": "soon"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_rename_event(self, test_client, app_stores):
        event_id = _upload(test_client, new_event_title="Trip").json()["data"]["created_event_id"]

        response = test_client.patch(
            f"/api/events/{event_id}", json={"date": "2024-07-04", "title": "Summer Trip"}
        )

        assert response.json()["data"]["updated_media_ids"] == ["beach.jpg"]
        assert app_stores[0].dump(IMAGES_COLLECTION)["beach.jpg"]["event"] == "Summer Trip"


@pytest.mark.integration
class TestGalleryRoutes:
    def test_search(self, test_client):
        _upload(test_client, new_event_title="Summer Trip")

        hits = test_client.get("/api/gallery/search", params={"q": "summer"}).json()
        misses = test_client.get("/api/gallery/search", params={"q": "winter"}).json()

        assert hits["message"] == "2 matches"
        assert misses["message"] == "No matches"
        assert misses["data"]["no_match"] is True

    def test_refresh_counts(self, test_client):
        _upload(test_client)

        response = test_client.post("/api/gallery/refresh")

        assert response.json()["data"] == {"images": 1, "videos": 0, "events": 0}

    def test_unknown_video_url(self, test_client):
        response = test_client.get("/api/gallery/videos/ghost.mp4/url")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_notifications_newest_first(self, test_client):
        test_client.post("/api/events", json={"date": "2024-07-04", "title": "Trip"})
        _upload(test_client)

        notifications = test_client.get("/api/notifications", params={"limit": 1}).json()["data"]

        assert len(notifications) == 1
        assert notifications[0]["message"] == "1 upload completed successfully!"
        assert len(test_client.get("/api/notifications").json()["data"]) == 2

    def test_health(self, test_client):
        body = test_client.get("/api/health").json()

        assert body["success"] is True
        assert body["data"]["database_ok"] is True
        assert body["data"]["gallery_loaded"] is True


@pytest.mark.unit
def test_files_required_message_is_client_error():
    from media_gallery.routers.upload_routers import CLIENT_ERROR_MESSAGES

    assert MSG_FILES_REQUIRED in CLIENT_ERROR_MESSAGES
