"""Tests for the journal and page HTTP endpoints."""
import json

from app.schemas.journal import JournalCreate
from app.services.journal import journal_service


def post_journal(client, title="Trip", content="<p>Hello</p>", files=None, **fields):
    return client.post("/journals", data={"title": title, "content": content, **fields}, files=files)


class TestCreateJournalEndpoint:

    def test_create_with_html(self, client):
        response = post_journal(client)

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Trip"
        assert data["page"]["content"] == "<p>Hello</p>"
        assert data["notification"] is None

    def test_create_with_reminder(self, client):
        response = post_journal(client, reminder_type="monthly", reminder_time="21:15")

        assert response.status_code == 201
        assert response.json()["notification"] == {"type": "monthly", "time": "21:15"}

    def test_create_with_uploaded_image(self, client, storage):
        response = post_journal(
            client,
            content="<p>Look</p><img src='placeholder'>",
            files=[("images", ("photo.png", b"png-bytes", "image/png"))],
        )

        assert response.status_code == 201
        page = response.json()["page"]
        assert len(page["images"]) == 1
        url = page["images"][0]["url"]
        assert f"src='{url}'" in page["content"]
        relative = url[len(storage.base_url) + 1:]
        assert storage.path(relative).read_bytes() == b"png-bytes"

    def test_create_with_delta_content(self, client):
        content = json.dumps([{"insert": "Hello", "attributes": {"b": True}}])

        response = post_journal(client, content=content)

        assert response.status_code == 201
        assert response.json()["page"]["content"] == "<b><p>Hello</p></b>"

    def test_delta_with_malformed_attributes(self, client):
        content = json.dumps([{"insert": "x", "attributes": "bold"}])

        response = post_journal(client, content=content)

        assert response.status_code == 201
        assert response.json()["page"]["content"] == "<p>x</p>"

    def test_invalid_reminder_time(self, client):
        response = post_journal(client, reminder_type="daily", reminder_time="25:00")
        assert response.status_code == 422

    def test_invalid_reminder_type(self, client):
        response = post_journal(client, reminder_type="hourly", reminder_time="10:00")
        assert response.status_code == 422

    def test_reminder_type_without_time(self, client):
        response = post_journal(client, reminder_type="daily")

        assert response.status_code == 422
        assert "together" in response.json()["detail"]

    def test_missing_title(self, client):
        response = client.post("/journals", data={"content": "<p>x</p>"})
        assert response.status_code == 422

    def test_requires_authentication(self, anonymous_client):
        response = anonymous_client.get("/journals")
        assert response.status_code in (401, 403)


class TestJournalEndpoints:

    def test_list_archive_and_search(self, client):
        first = post_journal(client, title="Trip to Rome").json()
        post_journal(client, title="Groceries")

        listed = client.get("/journals").json()
        assert [j["title"] for j in listed] == ["Groceries", "Trip to Rome"]
        assert listed[1]["preview"]["content"] == "<p>Hello</p>"

        toggled = client.post("/journals/archive", json={"journal_id": first["id"]})
        assert toggled.status_code == 200
        assert toggled.json() == {"journal_id": first["id"], "archive": True}

        archived = client.get("/journals/archive").json()
        assert [j["id"] for j in archived] == [first["id"]]

        found = client.get("/journals/search", params={"title": "Groc"}).json()
        assert [j["title"] for j in found] == ["Groceries"]

    def test_add_and_list_pages(self, client):
        journal = post_journal(client).json()

        added = client.post(f"/journals/{journal['id']}/pages", data={"content": "<p>Two</p>"})
        assert added.status_code == 201

        pages = client.get(f"/journals/{journal['id']}/pages").json()
        assert [p["content"] for p in pages["pages"]] == ["<p>Two</p>", "<p>Hello</p>"]

    def test_delete_journal(self, client):
        journal = post_journal(client).json()

        response = client.delete(f"/journals/{journal['id']}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get(f"/journals/{journal['id']}/pages").status_code == 404
        assert client.get("/journals").json() == []

    def test_foreign_journal(self, client, db, storage, other_user):
        journal = journal_service.create_journal(
            db, storage, user_id=other_user.id, data=JournalCreate(title="Private", content="<p>x</p>")
        )

        assert client.get(f"/journals/{journal.id}/pages").status_code == 404
        assert client.delete(f"/journals/{journal.id}").status_code == 403
        assert client.post("/journals/archive", json={"journal_id": journal.id}).status_code == 403
        added = client.post(f"/journals/{journal.id}/pages", data={"content": "<p>y</p>"})
        assert added.status_code == 403

    def test_missing_journal(self, client):
        assert client.delete("/journals/999").status_code == 404
        assert client.get("/journals/999/pdf").status_code == 404


class TestPageEndpoints:

    def test_show_and_delete_page(self, client):
        journal = post_journal(client).json()
        page_id = journal["page"]["id"]

        shown = client.get(f"/pages/{page_id}")
        assert shown.status_code == 200
        assert shown.json()["content"] == "<p>Hello</p>"

        assert client.delete(f"/pages/{page_id}").status_code == 200
        assert client.get(f"/pages/{page_id}").status_code == 404

    def test_foreign_page(self, client, db, storage, other_user):
        journal = journal_service.create_journal(
            db, storage, user_id=other_user.id, data=JournalCreate(title="Private", content="<p>x</p>")
        )

        assert client.get(f"/pages/{journal.page.id}").status_code == 404
        assert client.delete(f"/pages/{journal.page.id}").status_code == 403
