import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import get_current_user
from app.models.user import User
from app.schemas.jwt_snippet import JwtSnippetCreate, JwtSnippetRead, JwtSnippetUpdate
from app.services.jwt_snippet_service import JwtSnippetService
from app.utils.errors import UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jwt-snippets", tags=["jwt-snippets"])


def _read(snippet):
    return JwtSnippetRead.model_validate(snippet).model_dump()


@router.get("")
async def list_snippets(
    search: Optional[str] = Query(None, max_length=255),
    is_favorite: Optional[bool] = None,
    algorithm: Optional[str] = Query(None, max_length=20),
    tags: Optional[List[str]] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        snippets = JwtSnippetService.list_snippets(
            db, current_user.id, search=search, is_favorite=is_favorite, algorithm=algorithm, tags=tags
        )
        return {"success": True, "data": [_read(s) for s in snippets]}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching JWT snippets: {e}")
        raise UpstreamError("Failed to fetch snippets")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_snippet(
    payload: JwtSnippetCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return {"success": True, "data": _read(JwtSnippetService.create_snippet(db, current_user.id, payload))}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error saving JWT snippet: {e}")
        raise UpstreamError("Failed to save snippet")


@router.get("/{snippet_id}")
async def get_snippet(snippet_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"success": True, "data": _read(JwtSnippetService.get_snippet(db, current_user.id, snippet_id))}


@router.put("/{snippet_id}")
async def update_snippet(
    snippet_id: str,
    payload: JwtSnippetUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        snippet = JwtSnippetService.update_snippet(db, current_user.id, snippet_id, payload)
        return {"success": True, "data": _read(snippet)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating JWT snippet {snippet_id}: {e}")
        raise UpstreamError("Failed to update snippet")


@router.patch("/{snippet_id}")
async def toggle_favorite(snippet_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Flip the favorite flag."""
    try:
        return {"success": True, "data": _read(JwtSnippetService.toggle_favorite(db, current_user.id, snippet_id))}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error toggling favorite on JWT snippet {snippet_id}: {e}")
        raise UpstreamError("Failed to update snippet")


@router.delete("/{snippet_id}")
async def delete_snippet(snippet_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        JwtSnippetService.delete_snippet(db, current_user.id, snippet_id)
        return {"success": True, "data": {"message": "Snippet deleted"}}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting JWT snippet {snippet_id}: {e}")
        raise UpstreamError("Failed to delete snippet")
