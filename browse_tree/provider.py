"""Browse tree sources: the contract hosts call into, plus the static catalog tree"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Literal, Optional

from .catalog import DEFAULT_CATALOG, StationCatalog, StationRecord
from .models import (
  FOLDER_ALL_STATIONS,
  FOLDER_FAVORITES,
  ROOT_ID,
  BrowseNode,
  BrowserRoot,
  LayoutHint,
  NodeKind,
  hint_extras,
)

logger = logging.getLogger(__name__)

UnknownFolderFallback = Literal["empty", "sample"]


class BrowseTreeSource(ABC):
  """Abstract base class for hierarchical browse providers"""

  @abstractmethod
  def resolve_root(self, client_identity: Optional[str] = None) -> BrowserRoot:
    """Return the root node for a browsing client

    Args:
      client_identity: Opaque caller identity (package name, uid, user agent).
        Every caller gets the same root.
    """
    raise NotImplementedError

  @abstractmethod
  def list_children(self, node_id: str) -> List[BrowseNode]:
    """Return the ordered children of a node; unknown ids yield an empty list"""
    raise NotImplementedError

  async def load_children(self, node_id: str) -> List[BrowseNode]:
    """Asynchronous delivery of `list_children` for hosts that await results"""
    return self.list_children(node_id)


@dataclass(frozen=True)
class BrowsePolicy:
  attach_root_hints: bool = True
  favorites_layout_hint: Optional[LayoutHint] = None
  all_stations_layout_hint: Optional[LayoutHint] = LayoutHint.GRID
  unknown_folder_fallback: UnknownFolderFallback = "empty"

  def __post_init__(self):
    if self.unknown_folder_fallback not in ("empty", "sample"):
      raise ValueError(
        f"Invalid unknown folder fallback: {self.unknown_folder_fallback}. "
        "Must be 'empty' or 'sample'"
      )


def _station_node(station: StationRecord) -> BrowseNode:
  return BrowseNode(
    id=station.id,
    kind=NodeKind.STATION,
    title=station.title,
    subtitle=station.subtitle,
    icon_ref=station.icon_ref,
  )


class StaticBrowseTree(BrowseTreeSource):
  """Root -> {Favorites, All Stations} -> stations, synthesized per query"""

  def __init__(
    self,
    catalog: StationCatalog = DEFAULT_CATALOG,
    policy: BrowsePolicy = BrowsePolicy(),
  ):
    self.catalog = catalog
    self.policy = policy

  def resolve_root(self, client_identity: Optional[str] = None) -> BrowserRoot:
    logger.debug(f"Root requested by {client_identity or 'anonymous client'}")
    extras = hint_extras(LayoutHint.LIST) if self.policy.attach_root_hints else {}
    return BrowserRoot(root_id=ROOT_ID, extras=extras)

  def list_children(self, node_id: str) -> List[BrowseNode]:
    if node_id == ROOT_ID:
      return self._folders()
    if node_id == FOLDER_ALL_STATIONS:
      return [_station_node(s) for s in self.catalog.stations]
    if node_id == FOLDER_FAVORITES:
      return self._favorites()

    logger.debug(f"No children for unknown node {node_id!r}")
    if self.policy.unknown_folder_fallback == "sample":
      return self._favorites()
    return []

  def _folders(self) -> List[BrowseNode]:
    return [
      BrowseNode(
        id=FOLDER_FAVORITES,
        kind=NodeKind.FOLDER,
        title="Favorites",
        subtitle="Your favorite stations",
        layout_hint=self.policy.favorites_layout_hint,
      ),
      BrowseNode(
        id=FOLDER_ALL_STATIONS,
        kind=NodeKind.FOLDER,
        title="All Stations",
        subtitle="Listen to all stations",
        layout_hint=self.policy.all_stations_layout_hint,
      ),
    ]

  def _favorites(self) -> List[BrowseNode]:
    return [_station_node(s) for s in self.catalog.favorites()]
