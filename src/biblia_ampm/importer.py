"""Load catechism and canon definitions from JSON/YAML files or URLs."""
import json
import logging
from pathlib import Path
from urllib.parse import urlparse

import requests
import yaml

from biblia_ampm.corpus import Canon, canon_from_dict
from biblia_ampm.errors import ImportFormatError
from biblia_ampm.models import WeeklyItem

logger = logging.getLogger(__name__)

CATECHISM_SIZE = 107
REQUEST_TIMEOUT = 30


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def read_source(source: str) -> tuple[str, str]:
    """Return (text, suffix) for a local path or an http(s) URL."""
    if is_url(source):
        logger.info("Fetching %s", source)
        resp = requests.get(source, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.text, Path(urlparse(source).path).suffix.lower()
    path = Path(source)
    return path.read_text(encoding="utf-8"), path.suffix.lower()


def parse_structured(text: str, suffix: str):
    try:
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ImportFormatError(f"Could not parse data: {e}") from e


def parse_catechism(data, limit: int = CATECHISM_SIZE) -> list[WeeklyItem]:
    """Turn ``[{"number", "q", "a"}, ...]`` into WeeklyItems numbered 1..limit."""
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        raise ImportFormatError("Catechism data must be a list of questions")
    items = []
    for entry in data:
        try:
            number = int(entry["number"])
            question = entry.get("q", entry.get("question"))
            answer = entry.get("a", entry.get("answer"))
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Skipping malformed catechism entry: %r", entry)
            continue
        if not 1 <= number <= limit:
            logger.warning("Skipping catechism question %d outside 1-%d", number, limit)
            continue
        if question is None or answer is None:
            logger.warning("Skipping catechism question %d without question or answer text", number)
            continue
        items.append(WeeklyItem(number, str(question).strip(), str(answer).strip()))
    if not items:
        raise ImportFormatError(f"No valid questions found (expected numbers 1-{limit})")
    items.sort(key=lambda i: i.number)
    return items


def load_catechism(source: str, limit: int = CATECHISM_SIZE) -> list[WeeklyItem]:
    text, suffix = read_source(source)
    items = parse_catechism(parse_structured(text, suffix), limit)
    if len(items) < limit:
        logger.warning("Expected %d questions but only found %d", limit, len(items))
    return items


def load_canon(source: str) -> Canon:
    text, suffix = read_source(source)
    data = parse_structured(text, suffix)
    if not isinstance(data, dict):
        raise ImportFormatError("Canon definition must be a mapping")
    return canon_from_dict(data)
