"""
Browse API endpoints
Serves the station tree to remote browsing surfaces
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request

from backend.exceptions import AppError
from browse_tree import BrowseNode, BrowserRoot, BrowseTreeSource

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/browse", tags=["browse"])


def get_browse_source(request: Request) -> BrowseTreeSource:
  source = getattr(request.app.state, "browse_source", None)
  if source is None:
    raise AppError(
      description="Browse tree is not configured",
      name="BROWSE_NOT_CONFIGURED",
      source="browse",
    )
  return source


@router.get("/root", response_model=BrowserRoot)
async def get_root(
  client_package: Optional[str] = None,
  client_uid: Optional[int] = None,
  source: BrowseTreeSource = Depends(get_browse_source),
) -> BrowserRoot:
  """Return the root id and its rendering hints. Any client is accepted."""
  identity = None
  if client_package is not None or client_uid is not None:
    identity = f"{client_package or 'unknown'}:{client_uid if client_uid is not None else '-'}"
  return source.resolve_root(identity)


@router.get("/children/{node_id}", response_model=List[BrowseNode])
async def get_children(
  node_id: str,
  source: BrowseTreeSource = Depends(get_browse_source),
) -> List[BrowseNode]:
  """Return the ordered children of a node; unknown ids give an empty list"""
  children = await source.load_children(node_id)
  logger.debug(f"{len(children)} children for {node_id}")
  return children
