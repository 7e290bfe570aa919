"""
Station catalog
Immutable table of stations and favorites, built in or loaded once from YAML
"""

from pathlib import Path
from typing import Tuple

import yaml
from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class StationRecord(BaseModel):
  """One row of the station table"""

  model_config = ConfigDict(frozen=True)

  id: str
  title: str
  subtitle: str = ""
  icon_ref: str | None = None

  @field_validator("id", mode="before")
  @classmethod
  def parse_id(cls, v) -> str:
    """Accept numeric ids from YAML (`id: 1`) and reject blanks"""
    if isinstance(v, int) and not isinstance(v, bool):
      v = str(v)
    if not isinstance(v, str) or not v.strip():
      raise ValueError(f"Station id must be a non-empty string, got: {v!r}")
    return v


class StationCatalog(BaseModel):
  """Ordered stations plus the ids shown in the Favorites folder"""

  model_config = ConfigDict(frozen=True)

  stations: Tuple[StationRecord, ...]
  favorite_ids: Tuple[str, ...] = ()

  @field_validator("favorite_ids", mode="before")
  @classmethod
  def parse_favorite_ids(cls, v):
    if v is None:
      return ()
    return tuple(str(item) for item in v)

  @model_validator(mode="after")
  def validate_references(self):
    """Station ids are unique and every favorite points at a station"""
    seen = set()
    for station in self.stations:
      if station.id in seen:
        raise ValueError(f"Duplicate station id: {station.id}")
      seen.add(station.id)

    missing = [fav for fav in self.favorite_ids if fav not in seen]
    if missing:
      raise ValueError(f"Favorites refer to unknown stations: {', '.join(missing)}")
    return self

  def get(self, station_id: str) -> StationRecord | None:
    for station in self.stations:
      if station.id == station_id:
        return station
    return None

  def favorites(self) -> Tuple[StationRecord, ...]:
    by_id = {station.id: station for station in self.stations}
    return tuple(by_id[fav] for fav in self.favorite_ids)


DEFAULT_CATALOG = StationCatalog(
  stations=(
    StationRecord(id="1", title="Kral FM", subtitle="Arabesk", icon_ref="https://example.com/kral.jpg"),
    StationRecord(id="2", title="Power Turk", subtitle="Pop", icon_ref="https://example.com/power.jpg"),
    StationRecord(id="3", title="Joy FM", subtitle="Slow", icon_ref="https://example.com/joy.jpg"),
    StationRecord(id="4", title="Metro FM", subtitle="Hit", icon_ref="https://example.com/metro.jpg"),
    StationRecord(id="5", title="Fenomen", subtitle="Pop", icon_ref="https://example.com/fenomen.jpg"),
    StationRecord(id="6", title="Number 1", subtitle="Hit", icon_ref="https://example.com/nr1.jpg"),
  ),
  favorite_ids=("1",),
)


def load_catalog(config_path: Path | str) -> StationCatalog:
  """
  Parse a station catalog from a YAML file

  Expected layout:

    stations:
      - id: "1"
        title: Kral FM
        subtitle: Arabesk
        icon: https://example.com/kral.jpg
    favorites: ["1"]

  Args:
      config_path: Path to the YAML file

  Returns:
      Validated StationCatalog, in file order

  Raises:
      FileNotFoundError: If the file doesn't exist
      yaml.YAMLError: If YAML is malformed
      pydantic.ValidationError: If the data doesn't match the schema
  """
  config_path = Path(config_path)

  if not config_path.exists():
    raise FileNotFoundError(f"Catalog file not found: {config_path}")

  with open(config_path, "r") as f:
    raw = yaml.safe_load(f) or {}

  stations = []
  for entry in raw.get("stations") or []:
    match entry:
      case {"icon": icon, **rest}:
        entry = {**rest, "icon_ref": icon}
      case _:
        pass
    stations.append(entry)

  return StationCatalog(stations=stations, favorite_ids=raw.get("favorites"))
