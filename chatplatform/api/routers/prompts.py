# chatplatform/api/routers/prompts.py
"""
Prompt snippets appended to a project's system prompt.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from chatplatform.api.deps import CurrentUser, get_current_user, get_db
from chatplatform.api.schemas import PromptCreate, PromptUpdate, serialize_prompt
from chatplatform.db import storage
from chatplatform.db.models import Prompt
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/prompts", tags=["Prompts"])


@router.get("/project/{project_id}")
async def list_prompts(
    project_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = storage.get_owned_project(db, project_id, current_user.id)
    prompts = (
        db.query(Prompt)
        .filter(Prompt.project_id == project.id)
        .order_by(Prompt.created_at.desc())
        .all()
    )
    return {"prompts": [serialize_prompt(p) for p in prompts]}


@router.post("/project/{project_id}", status_code=status.HTTP_201_CREATED)
async def create_prompt(
    project_id: str,
    request: PromptCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = storage.get_owned_project(db, project_id, current_user.id)

    prompt = Prompt(name=request.name, content=request.content, project_id=project.id)
    db.add(prompt)
    db.commit()
    db.refresh(prompt)

    logger.info(f"Prompt {prompt.id} added to project {project.id}")
    return {"message": "Prompt created successfully", "prompt": serialize_prompt(prompt)}


@router.put("/{prompt_id}")
async def update_prompt(
    prompt_id: str,
    request: PromptUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    prompt = storage.get_owned_prompt(db, prompt_id, current_user.id)

    for field, value in request.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(prompt, field, value)

    db.commit()
    db.refresh(prompt)
    return {"message": "Prompt updated successfully", "prompt": serialize_prompt(prompt)}


@router.delete("/{prompt_id}")
async def delete_prompt(
    prompt_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    prompt = storage.get_owned_prompt(db, prompt_id, current_user.id)
    db.delete(prompt)
    db.commit()
    return {"message": "Prompt deleted successfully"}
