# chatplatform/db/storage.py
"""
Storage helpers shared by the routers.

Every lookup of a child entity walks the ownership chain back to the
authenticated user; anything outside that chain is reported as not found.
Cascade deletes run children-first and return the stored filenames whose
bytes must be removed once the transaction commits.
"""

from typing import Dict, Iterable, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from chatplatform.core.exceptions import NotFoundError
from chatplatform.db.base import utcnow
from chatplatform.db.models import User, Project, Prompt, Conversation, Message, File
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)


# =============================================================================
# Ownership-scoped lookups
# =============================================================================

def get_owned_project(db: Session, project_id: str, user_id: str) -> Project:
    project = (
        db.query(Project)
        .filter(Project.id == project_id, Project.user_id == user_id)
        .first()
    )
    if not project:
        raise NotFoundError("Project")
    return project


def get_owned_prompt(db: Session, prompt_id: str, user_id: str) -> Prompt:
    prompt = (
        db.query(Prompt)
        .join(Project, Prompt.project_id == Project.id)
        .filter(Prompt.id == prompt_id, Project.user_id == user_id)
        .first()
    )
    if not prompt:
        raise NotFoundError("Prompt")
    return prompt


def get_owned_conversation(db: Session, conversation_id: str, user_id: str) -> Conversation:
    conversation = (
        db.query(Conversation)
        .join(Project, Conversation.project_id == Project.id)
        .filter(Conversation.id == conversation_id, Project.user_id == user_id)
        .first()
    )
    if not conversation:
        raise NotFoundError("Conversation")
    return conversation


def get_owned_file(db: Session, file_id: str, user_id: str) -> File:
    record = (
        db.query(File)
        .join(Project, File.project_id == Project.id)
        .filter(File.id == file_id, Project.user_id == user_id)
        .first()
    )
    if not record:
        raise NotFoundError("File")
    return record


def find_project_conversation(db: Session, conversation_id: str, project_id: str):
    """Conversation with this id under this project, or None."""
    return (
        db.query(Conversation)
        .filter(Conversation.id == conversation_id, Conversation.project_id == project_id)
        .first()
    )


# =============================================================================
# Counts
# =============================================================================

def _count_by(db: Session, column, keys: Iterable[str]) -> Dict[str, int]:
    keys = list(keys)
    if not keys:
        return {}
    rows = db.query(column, func.count()).filter(column.in_(keys)).group_by(column).all()
    counts = {key: 0 for key in keys}
    counts.update({key: count for key, count in rows})
    return counts


def project_child_counts(db: Session, project_ids: Iterable[str]) -> Dict[str, Dict[str, int]]:
    """{project_id: {"prompts": n, "conversations": n, "files": n}}"""
    project_ids = list(project_ids)
    prompts = _count_by(db, Prompt.project_id, project_ids)
    conversations = _count_by(db, Conversation.project_id, project_ids)
    files = _count_by(db, File.project_id, project_ids)
    return {
        pid: {
            "prompts": prompts.get(pid, 0),
            "conversations": conversations.get(pid, 0),
            "files": files.get(pid, 0),
        }
        for pid in project_ids
    }


def conversation_message_counts(db: Session, conversation_ids: Iterable[str]) -> Dict[str, int]:
    return _count_by(db, Message.conversation_id, conversation_ids)


def user_project_counts(db: Session, user_ids: Iterable[str]) -> Dict[str, int]:
    return _count_by(db, Project.user_id, user_ids)


def count_files(db: Session, project_id: str) -> int:
    return db.query(func.count(File.id)).filter(File.project_id == project_id).scalar() or 0


def platform_stats(db: Session) -> Dict[str, int]:
    return {
        "users": db.query(func.count(User.id)).scalar() or 0,
        "projects": db.query(func.count(Project.id)).scalar() or 0,
        "conversations": db.query(func.count(Conversation.id)).scalar() or 0,
        "messages": db.query(func.count(Message.id)).scalar() or 0,
        "files": db.query(func.count(File.id)).scalar() or 0,
    }


# =============================================================================
# Messages
# =============================================================================

def add_message(db: Session, conversation: Conversation, role: str, content: str) -> Message:
    message = Message(role=role, content=content, conversation_id=conversation.id)
    db.add(message)
    conversation.updated_at = utcnow()
    db.commit()
    db.refresh(message)
    return message


def get_history(db: Session, conversation_id: str) -> List[Message]:
    """All messages of a conversation in creation order."""
    return (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


# =============================================================================
# Cascade deletes
# =============================================================================

def delete_conversation(db: Session, conversation: Conversation) -> None:
    db.query(Message).filter(Message.conversation_id == conversation.id).delete(synchronize_session=False)
    db.query(Conversation).filter(Conversation.id == conversation.id).delete(synchronize_session=False)
    db.commit()


def _delete_projects(db: Session, project_ids: List[str]) -> List[str]:
    """Delete projects and every descendant. Does not commit."""
    if not project_ids:
        return []

    conversation_ids = [
        cid for (cid,) in db.query(Conversation.id).filter(Conversation.project_id.in_(project_ids)).all()
    ]
    stored_files = [
        name for (name,) in db.query(File.filename).filter(File.project_id.in_(project_ids)).all()
    ]

    if conversation_ids:
        db.query(Message).filter(Message.conversation_id.in_(conversation_ids)).delete(synchronize_session=False)
    db.query(Conversation).filter(Conversation.project_id.in_(project_ids)).delete(synchronize_session=False)
    db.query(Prompt).filter(Prompt.project_id.in_(project_ids)).delete(synchronize_session=False)
    db.query(File).filter(File.project_id.in_(project_ids)).delete(synchronize_session=False)
    db.query(Project).filter(Project.id.in_(project_ids)).delete(synchronize_session=False)

    return stored_files


def delete_project_cascade(db: Session, project: Project) -> List[str]:
    """
    Delete a project with its prompts, conversations, messages and files.

    Returns:
        Stored filenames whose bytes should now be removed from disk.
    """
    stored_files = _delete_projects(db, [project.id])
    db.commit()
    logger.info(f"Deleted project {project.id} ({len(stored_files)} files)")
    return stored_files


def delete_user_cascade(db: Session, user: User) -> List[str]:
    """Delete a user and, across all of their projects, every descendant."""
    project_ids = [pid for (pid,) in db.query(Project.id).filter(Project.user_id == user.id).all()]
    stored_files = _delete_projects(db, project_ids)
    db.query(User).filter(User.id == user.id).delete(synchronize_session=False)
    db.commit()
    logger.info(f"Deleted user {user.id} ({len(project_ids)} projects, {len(stored_files)} files)")
    return stored_files
