"""Tests for showing and updating the user profile."""
PROFILE_FORM = {
    "name": "Test User",
    "gender": "female",
    "country": "Portugal",
    "date_of_birth": "1990-05-01",
}


def avatar(data=b"avatar-bytes"):
    return [("avatar", ("me.jpg", data, "image/jpeg"))]


class TestProfile:

    def test_show_empty_profile(self, client, user):
        response = client.get("/profile/me")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Test User"
        assert data["handle"] == "test-user"
        assert data["avatar_url"] is None
        assert data["profile"] == {"gender": None, "country": None, "date_of_birth": None}

    def test_update_fields(self, client):
        response = client.patch("/profile/me", data=PROFILE_FORM)

        assert response.status_code == 200
        profile = response.json()["profile"]
        assert profile == {"gender": "female", "country": "Portugal", "date_of_birth": "1990-05-01"}

    def test_rename_regenerates_unique_handle(self, client, other_user):
        response = client.patch("/profile/me", data={**PROFILE_FORM, "name": "Other User"})

        assert response.status_code == 200
        assert response.json()["name"] == "Other User"
        assert response.json()["handle"] == "other-user-1"

    def test_unchanged_name_keeps_handle(self, client):
        response = client.patch("/profile/me", data=PROFILE_FORM)
        assert response.json()["handle"] == "test-user"

    def test_avatar_upload_replaces_previous_file(self, client, storage, user):
        first = client.patch("/profile/me", data=PROFILE_FORM, files=avatar(b"one")).json()
        first_path = first["avatar_url"][len(storage.base_url) + 1:]
        assert first_path.startswith(f"user/{user.id}/")
        assert storage.path(first_path).read_bytes() == b"one"

        second = client.patch("/profile/me", data=PROFILE_FORM, files=avatar(b"two")).json()
        second_path = second["avatar_url"][len(storage.base_url) + 1:]

        assert second_path != first_path
        assert storage.path(second_path).read_bytes() == b"two"
        assert not storage.path(first_path).exists()

    def test_invalid_gender(self, client):
        response = client.patch("/profile/me", data={**PROFILE_FORM, "gender": "robot"})
        assert response.status_code == 422
