# tests/integration/test_cascade.py
"""
Cascade deletes leave no orphaned rows or stored bytes.
"""

from chatplatform.db.models import Conversation, File, Message, Project, Prompt, User


def _populate(test_client, headers, name="Bot"):
    project = test_client.post("/api/projects", json={"name": name}, headers=headers).json()["project"]
    pid = project["id"]

    test_client.post(f"/api/prompts/project/{pid}", json={"name": "Tone", "content": "Nice"}, headers=headers)
    conversation_id = test_client.post(
        f"/api/chat/project/{pid}/send", json={"message": "Hi"}, headers=headers
    ).json()["conversationId"]
    test_client.post(f"/api/chat/project/{pid}/send", json={"message": "Again"}, headers=headers)
    record = test_client.post(
        f"/api/files/project/{pid}",
        files={"file": ("doc.txt", b"bytes", "text/plain")},
        headers=headers,
    ).json()["file"]

    return pid, conversation_id, record


def _counts(db, project_id, conversation_ids):
    return {
        "projects": db.query(Project).filter(Project.id == project_id).count(),
        "prompts": db.query(Prompt).filter(Prompt.project_id == project_id).count(),
        "conversations": db.query(Conversation).filter(Conversation.project_id == project_id).count(),
        "messages": db.query(Message).filter(Message.conversation_id.in_(conversation_ids)).count(),
        "files": db.query(File).filter(File.project_id == project_id).count(),
    }


class TestProjectCascade:

    def test_delete_project_removes_everything(self, test_client, auth_headers, db_session, upload_dir):
        pid, _, record = _populate(test_client, auth_headers)
        conversation_ids = [c.id for c in db_session.query(Conversation).filter(Conversation.project_id == pid)]
        assert len(conversation_ids) == 2
        assert _counts(db_session, pid, conversation_ids)["messages"] == 4

        response = test_client.delete(f"/api/projects/{pid}", headers=auth_headers)

        assert response.status_code == 200
        db_session.expire_all()
        assert _counts(db_session, pid, conversation_ids) == {
            "projects": 0, "prompts": 0, "conversations": 0, "messages": 0, "files": 0,
        }
        assert not (upload_dir / record["filename"]).exists()

    def test_other_projects_untouched(self, test_client, auth_headers, db_session):
        doomed, _, _ = _populate(test_client, auth_headers, name="Doomed")
        kept, kept_conversation, _ = _populate(test_client, auth_headers, name="Kept")

        test_client.delete(f"/api/projects/{doomed}", headers=auth_headers)

        db_session.expire_all()
        counts = _counts(db_session, kept, [kept_conversation])
        assert counts["projects"] == 1
        assert counts["prompts"] == 1
        assert counts["files"] == 1
        assert counts["messages"] == 2


class TestUserCascade:

    def test_delete_user_removes_all_projects(self, test_client, admin_headers, register, db_session, upload_dir):
        headers, user = register(email="leaving@example.com")
        first, _, first_file = _populate(test_client, headers, name="One")
        second, _, second_file = _populate(test_client, headers, name="Two")

        response = test_client.delete(f"/api/admin/users/{user['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}

        db_session.expire_all()
        assert db_session.get(User, user["id"]) is None
        assert db_session.query(Project).filter(Project.id.in_([first, second])).count() == 0
        assert db_session.query(Conversation).count() == 0
        assert db_session.query(Message).count() == 0
        assert db_session.query(Prompt).count() == 0
        assert db_session.query(File).count() == 0
        assert not (upload_dir / first_file["filename"]).exists()
        assert not (upload_dir / second_file["filename"]).exists()

        # The deleted user's token no longer resolves to an account
        assert test_client.get("/api/auth/me", headers=headers).status_code == 404
