"""Message templates for ``IRCLogger.log_event``, keyed by (domain, action).

The templates live in ``event_templates.json`` next to this module, as
``{"domain": {"action": "template with {fields}"}}``. Entries that are not
strings are skipped. A missing or unreadable file leaves a single
``("app", "load_error")`` entry describing the problem.
"""

from __future__ import annotations

import json
from pathlib import Path

EventKey = tuple[str, str]

DEFAULT_PATH = Path(__file__).with_name("event_templates.json")
EVENT_TEMPLATES: dict[EventKey, str] = {}


def _load_event_templates(path: Path | None = None) -> dict[EventKey, str]:
    path = path or DEFAULT_PATH
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {("app", "load_error"): "Event templates file missing"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Failed to load event templates: {e}"[:200]}
    if not isinstance(raw, dict):
        return {("app", "load_error"): "Event templates file is not a JSON object"}
    return {
        (domain, action): template
        for domain, actions in raw.items()
        if isinstance(actions, dict)
        for action, template in actions.items()
        if isinstance(template, str)
    }


def reload_event_templates(path: Path | None = None) -> int:
    """Replace the catalog contents in place and return the template count."""
    templates = _load_event_templates(path)
    EVENT_TEMPLATES.clear()
    EVENT_TEMPLATES.update(templates)
    return len(EVENT_TEMPLATES)


reload_event_templates()

__all__ = ["EVENT_TEMPLATES", "reload_event_templates"]
