"""Field normalization and validation applied at the write boundary.

Validators return an error message, or None when the fields are valid.
Normalizers return a new dict and never mutate their input.
"""

import re
from datetime import datetime, timezone
from typing import Any

TEMPLATES = {
    "minimal": "Minimal",
    "modern": "Modern",
    "creative": "Creative",
    "professional": "Professional",
}
DEFAULT_TEMPLATE = "minimal"


def slugify(title: str) -> str:
    """Derive a URL slug from a title: ``"Hello, World!"`` -> ``"hello-world"``."""
    slug = re.sub(r"[^a-z0-9\s-]", "", title.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def parse_technologies(value: str | list[str] | None) -> list[str]:
    """Accept the form's comma-separated text or a list; drop blanks."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _require(fields: dict[str, Any], *names: str) -> str | None:
    missing = [name for name in names if _blank(fields.get(name))]
    if missing:
        return f"{' and '.join(missing)} {'is' if len(missing) == 1 else 'are'} required"
    return None


def _check_date_range(fields: dict[str, Any], current_flag: str) -> str | None:
    start_date = fields.get("start_date")
    end_date = fields.get("end_date")
    if fields.get(current_flag):
        return None
    if start_date and end_date and end_date < start_date:
        return "end_date cannot be before start_date"
    return None


# --- Projects ---


def normalize_project(fields: dict[str, Any], existing: dict[str, Any] | None = None) -> dict[str, Any]:
    normalized = dict(fields)
    if "technologies" in normalized:
        normalized["technologies"] = parse_technologies(normalized["technologies"])
    return normalized


def validate_project(fields: dict[str, Any]) -> str | None:
    return _require(fields, "title")


# --- Education ---


def normalize_education(fields: dict[str, Any], existing: dict[str, Any] | None = None) -> dict[str, Any]:
    normalized = dict(fields)
    if normalized.get("current_education"):
        normalized["end_date"] = None
    return normalized


def validate_education(fields: dict[str, Any]) -> str | None:
    return _require(fields, "institution", "degree") or _check_date_range(fields, "current_education")


# --- Experience ---


def normalize_experience(fields: dict[str, Any], existing: dict[str, Any] | None = None) -> dict[str, Any]:
    normalized = dict(fields)
    if normalized.get("current_job"):
        normalized["end_date"] = None
    return normalized


def validate_experience(fields: dict[str, Any]) -> str | None:
    return _require(fields, "company", "position") or _check_date_range(fields, "current_job")


# --- Blogs ---


def normalize_blog(fields: dict[str, Any], existing: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Derive ``slug`` from the title and keep ``published_at`` in step with
    ``published``: stamped when a post goes live, kept while it stays
    published, cleared when it is unpublished.
    """
    normalized = dict(fields)
    normalized["slug"] = slugify(normalized.get("title") or "")
    was_published = bool(existing and existing.get("published"))
    if normalized.get("published"):
        if not was_published or not normalized.get("published_at"):
            normalized["published_at"] = datetime.now(timezone.utc)
    else:
        normalized["published"] = False
        normalized["published_at"] = None
    return normalized


def validate_blog(fields: dict[str, Any]) -> str | None:
    error = _require(fields, "title", "content")
    if error:
        return error
    if not fields.get("slug"):
        return "title must contain at least one letter or digit"
    return None


# --- Profiles ---


def validate_profile(fields: dict[str, Any]) -> str | None:
    template = fields.get("selected_template")
    if template is not None and template not in TEMPLATES:
        return f"selected_template must be one of: {', '.join(TEMPLATES)}"
    return None
