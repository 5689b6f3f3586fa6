#!/usr/bin/env python3
"""
Scene template loading utilities.

A template describes the startup body set of a universe, plus optional
overrides for the universe settings. Templates live in universe/templates/.

Schema
======
Template JSON (templates/*.json):
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "universe": {                       # optional, any subset of SimulationConfig
    "gravitational_constant": 0.05,
    "tick_interval_ms": 34,
    "forecast_steps": 1000,
    "active": false
  },
  "bodies": [
    {
      "id": "left",
      "name": "Left",                 # optional, defaults to id
      "mass": 100.0,
      "position": [0.0, 0.0, 0.0],
      "velocity": [0.0, 0.0, 0.0],
      "color": [255, 0, 0]            # optional
    }
  ]
}

Unlike free-form user input, a template is configuration: anything malformed is
rejected with ConfigurationError instead of being skipped.
"""
import json
import logging
import os
from typing import Any, Dict, List, Tuple

from .constants import DEFAULT_BODY_COLOR
from .data_models import Body, SimulationConfig
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")
DEFAULT_TEMPLATE = "three_body.json"

_CONFIG_FIELDS = tuple(SimulationConfig.__dataclass_fields__)


def _read_json(path: str) -> dict:
  try:
    with open(path, "r", encoding="utf-8") as f:
      data = json.load(f)
  except OSError as exc:
    raise ConfigurationError(f"Cannot read template {path}: {exc}") from exc
  except json.JSONDecodeError as exc:
    raise ConfigurationError(f"Template {path} is not valid JSON: {exc}") from exc
  if not isinstance(data, dict):
    raise ConfigurationError(f"Template {path} must contain a JSON object")
  return data


def _coerce_color(c) -> Tuple[int, int, int]:
  try:
    r, g, b = int(c[0]), int(c[1]), int(c[2])
  except (TypeError, ValueError, IndexError, KeyError) as exc:
    raise ConfigurationError(f"Color must be three integers, got {c!r}") from exc
  r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
  return (r, g, b)


def body_from_dict(b: Dict[str, Any]) -> Body:
  """Build a Body from one template entry."""
  if not isinstance(b, dict):
    raise ConfigurationError(f"Body entry must be an object, got {b!r}")
  try:
    body_id = b["id"]
    mass = b["mass"]
  except KeyError as exc:
    raise ConfigurationError(f"Body entry is missing field {exc.args[0]!r}: {b!r}") from exc
  try:
    mass = float(mass)
  except (TypeError, ValueError) as exc:
    raise ConfigurationError(f"Body {body_id!r} mass must be a number, got {mass!r}") from exc
  return Body(
    id=str(body_id),
    mass=mass,
    position=b.get("position", [0.0, 0.0, 0.0]),
    velocity=b.get("velocity", [0.0, 0.0, 0.0]),
    name=b.get("name", ""),
    color=_coerce_color(b.get("color", DEFAULT_BODY_COLOR)),
  )


def config_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
  """Validate the optional "universe" block and return it as keyword overrides."""
  universe = data.get("universe", {})
  if not isinstance(universe, dict):
    raise ConfigurationError("Template 'universe' block must be an object")
  unknown = sorted(set(universe) - set(_CONFIG_FIELDS))
  if unknown:
    raise ConfigurationError(f"Unknown universe settings in template: {', '.join(unknown)}")
  # Validate eagerly so a bad template fails at load time
  SimulationConfig(**universe)
  return dict(universe)


def list_templates() -> List[Tuple[str, str]]:
  """
  Return (file_name, display_name) for every bundled template that loads cleanly.
  Broken templates are logged and left out, so the picker only offers usable scenes.
  """
  if not os.path.isdir(TEMPLATES_DIR):
    return []
  usable: List[Tuple[str, str]] = []
  for fn in sorted(f for f in os.listdir(TEMPLATES_DIR) if f.lower().endswith(".json")):
    try:
      _, _, display_name = load_template(os.path.join(TEMPLATES_DIR, fn))
    except ConfigurationError as exc:
      logger.warning("Skipping template %s: %s", fn, exc)
      continue
    usable.append((fn, display_name))
  return usable


def load_template(file_name: str) -> Tuple[List[Body], Dict[str, Any], str]:
  """
  Load a template JSON by file name or path.
  Returns (bodies, config_overrides, display_name)
  """
  path = file_name if os.path.isabs(file_name) or os.path.exists(file_name) \
    else os.path.join(TEMPLATES_DIR, file_name)
  data = _read_json(path)
  display_name = data.get("name") or os.path.splitext(os.path.basename(path))[0]
  entries = data.get("bodies", [])
  if not isinstance(entries, list):
    raise ConfigurationError(f"Template {display_name!r} 'bodies' must be a list")
  bodies = [body_from_dict(b) for b in entries]
  seen = set()
  for body in bodies:
    if body.id in seen:
      raise ConfigurationError(f"Template {display_name!r} repeats body id {body.id!r}")
    seen.add(body.id)
  overrides = config_overrides(data)
  logger.info("Loaded template %s with %d bodies", display_name, len(bodies))
  return bodies, overrides, display_name


def default_bodies() -> List[Body]:
  """The startup body set used when no template is given."""
  bodies, _, _ = load_template(DEFAULT_TEMPLATE)
  return bodies
