# habilitation/grids/researcher/loaders.py
import json
import os
from typing import Any, Dict, List

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_DATA_ROOT = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "data", "researcher"
)


def _read_json(path: str) -> Any:
    logger.debug("grid_file_loaded", path=path)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_points(root: str) -> List[Dict[str, Any]]:
    return _read_json(os.path.join(root, "points.json"))


def load_policy(root: str) -> Dict[str, Any]:
    return _read_json(os.path.join(root, "policy.json"))


def load_messages(root: str) -> Dict[str, Dict[str, str]]:
    return _read_json(os.path.join(root, "messages.json"))
