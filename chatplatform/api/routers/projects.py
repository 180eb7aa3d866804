# chatplatform/api/routers/projects.py
"""
Project CRUD. Every route is scoped to the caller's own projects.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from chatplatform.api.deps import CurrentUser, get_current_user, get_db
from chatplatform.api.schemas import (
    ProjectCreate,
    ProjectUpdate,
    serialize_conversation,
    serialize_project,
    serialize_prompt,
)
from chatplatform.config import LLM
from chatplatform.core.exceptions import NotFoundError
from chatplatform.db import storage
from chatplatform.db.models import Conversation, Project, User, DEFAULT_SYSTEM_PROMPT
from chatplatform.services.file_service import file_service
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/projects", tags=["Projects"])

RECENT_CONVERSATIONS = 10

# Body field -> ORM attribute
_UPDATABLE = {
    "name": "name",
    "description": "description",
    "system_prompt": "system_prompt",
    "ai_model": "ai_model",
}


@router.get("")
async def list_projects(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Caller's projects, most recently updated first, with child counts."""
    projects = (
        db.query(Project)
        .filter(Project.user_id == current_user.id)
        .order_by(Project.updated_at.desc())
        .all()
    )
    counts = storage.project_child_counts(db, [p.id for p in projects])
    return {
        "projects": [
            {**serialize_project(p), "_count": counts[p.id]}
            for p in projects
        ]
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    request: ProjectCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # Tokens outlive deleted accounts
    if db.get(User, current_user.id) is None:
        raise NotFoundError("User")

    project = Project(
        name=request.name,
        description=request.description,
        system_prompt=request.system_prompt or DEFAULT_SYSTEM_PROMPT,
        ai_model=request.ai_model or LLM.default_model,
        user_id=current_user.id,
    )
    db.add(project)
    db.commit()
    db.refresh(project)

    logger.info(f"Project {project.id} created by {current_user.id}")
    return {"message": "Project created successfully", "project": serialize_project(project)}


@router.get("/{project_id}")
async def get_project(
    project_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Project with its prompts, the 10 most recent conversations and a file count."""
    project = storage.get_owned_project(db, project_id, current_user.id)

    conversations = (
        db.query(Conversation)
        .filter(Conversation.project_id == project.id)
        .order_by(Conversation.updated_at.desc())
        .limit(RECENT_CONVERSATIONS)
        .all()
    )

    return {
        "project": {
            **serialize_project(project),
            "prompts": [serialize_prompt(p) for p in project.prompts],
            "conversations": [serialize_conversation(c) for c in conversations],
            "_count": {"files": storage.count_files(db, project.id)},
        }
    }


@router.put("/{project_id}")
async def update_project(
    project_id: str,
    request: ProjectUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = storage.get_owned_project(db, project_id, current_user.id)

    changes = request.model_dump(exclude_unset=True)
    for field, value in changes.items():
        # Only the description is nullable
        if value is None and field != "description":
            continue
        setattr(project, _UPDATABLE[field], value)

    db.commit()
    db.refresh(project)
    return {"message": "Project updated successfully", "project": serialize_project(project)}


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a project with every prompt, conversation, message and file under it."""
    project = storage.get_owned_project(db, project_id, current_user.id)
    stored_files = storage.delete_project_cascade(db, project)
    file_service.remove_many(stored_files)
    return {"message": "Project deleted successfully"}
