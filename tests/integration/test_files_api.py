# tests/integration/test_files_api.py
"""
Integration tests for file upload, listing, download and deletion.
"""

import pytest


def _upload(test_client, headers, project_id, name="notes.txt", data=b"hello world", content_type="text/plain"):
    return test_client.post(
        f"/api/files/project/{project_id}",
        files={"file": (name, data, content_type)},
        headers=headers,
    )


class TestUpload:

    def test_upload(self, test_client, auth_headers, project, upload_dir):
        response = _upload(test_client, auth_headers, project["id"])

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "File uploaded successfully"
        record = data["file"]
        assert record["originalName"] == "notes.txt"
        assert record["mimeType"] == "text/plain"
        assert record["size"] == len(b"hello world")
        assert record["filename"].endswith(".txt")
        assert (upload_dir / record["filename"]).read_bytes() == b"hello world"

    @pytest.mark.parametrize("name,content_type", [
        ("report.pdf", "application/pdf"),
        ("data.json", "application/json"),
        ("table.csv", "text/csv"),
        ("script.py", "text/x-python"),
        ("doc.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
    ])
    def test_allowed_types(self, test_client, auth_headers, project, name, content_type):
        assert _upload(test_client, auth_headers, project["id"], name=name, content_type=content_type).status_code == 201

    def test_disallowed_type_leaves_nothing_on_disk(self, test_client, auth_headers, project, upload_dir):
        response = _upload(test_client, auth_headers, project["id"], name="tool.exe",
                           data=b"MZ", content_type="application/x-msdownload")

        assert response.status_code == 400
        assert response.json() == {"error": "File type not allowed"}
        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []

    def test_too_large(self, test_client, auth_headers, project, upload_dir, monkeypatch):
        from chatplatform.config import UPLOADS

        monkeypatch.setattr(UPLOADS, "max_file_size_mb", 1)
        response = _upload(test_client, auth_headers, project["id"], data=b"a" * (1024 * 1024 + 10))

        assert response.status_code == 413
        assert list(upload_dir.iterdir()) == []

    def test_no_file(self, test_client, auth_headers, project):
        response = test_client.post(
            f"/api/files/project/{project['id']}",
            data={"other": "value"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded"}

    def test_foreign_project_leaves_nothing_on_disk(self, test_client, other_headers, project, upload_dir):
        response = _upload(test_client, other_headers, project["id"])

        assert response.status_code == 404
        assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


class TestListDownloadDelete:

    def test_list_newest_first(self, test_client, auth_headers, project):
        for name in ("a.txt", "b.txt"):
            _upload(test_client, auth_headers, project["id"], name=name)

        response = test_client.get(f"/api/files/project/{project['id']}", headers=auth_headers)

        assert [f["originalName"] for f in response.json()["files"]] == ["b.txt", "a.txt"]

    def test_download(self, test_client, auth_headers, project):
        record = _upload(test_client, auth_headers, project["id"], name="report.md",
                         data=b"# Title", content_type="text/markdown").json()["file"]

        response = test_client.get(f"/api/files/{record['id']}/download", headers=auth_headers)

        assert response.status_code == 200
        assert response.content == b"# Title"
        assert response.headers["content-disposition"] == 'attachment; filename="report.md"'

    def test_download_missing_bytes(self, test_client, auth_headers, project, upload_dir):
        record = _upload(test_client, auth_headers, project["id"]).json()["file"]
        (upload_dir / record["filename"]).unlink()

        response = test_client.get(f"/api/files/{record['id']}/download", headers=auth_headers)

        assert response.status_code == 404

    def test_delete_removes_bytes(self, test_client, auth_headers, project, upload_dir):
        record = _upload(test_client, auth_headers, project["id"]).json()["file"]

        response = test_client.delete(f"/api/files/{record['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert not (upload_dir / record["filename"]).exists()
        assert test_client.get(f"/api/files/project/{project['id']}", headers=auth_headers).json()["files"] == []

    def test_failed_row_delete_keeps_bytes(self, test_client, auth_headers, project, upload_dir, monkeypatch):
        from fastapi.testclient import TestClient
        from sqlalchemy.orm import Session
        from chatplatform.main import app

        record = _upload(test_client, auth_headers, project["id"]).json()["file"]

        def failing_commit(self):
            raise RuntimeError("database unavailable")

        with monkeypatch.context() as patch:
            patch.setattr(Session, "commit", failing_commit)
            response = TestClient(app, raise_server_exceptions=False).delete(
                f"/api/files/{record['id']}", headers=auth_headers
            )

        assert response.status_code == 500
        assert (upload_dir / record["filename"]).exists()
        files = test_client.get(f"/api/files/project/{project['id']}", headers=auth_headers).json()["files"]
        assert [f["id"] for f in files] == [record["id"]]

    def test_other_user_cannot_touch_file(self, test_client, auth_headers, other_headers, project, upload_dir):
        record = _upload(test_client, auth_headers, project["id"]).json()["file"]

        assert test_client.get(f"/api/files/project/{project['id']}", headers=other_headers).status_code == 404
        assert test_client.get(f"/api/files/{record['id']}/download", headers=other_headers).status_code == 404
        assert test_client.delete(f"/api/files/{record['id']}", headers=other_headers).status_code == 404
        assert (upload_dir / record["filename"]).exists()
