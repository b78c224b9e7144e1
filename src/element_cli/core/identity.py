"""Block identity validation: display name, published name and category."""

import json
import re
from collections.abc import Sequence
from pathlib import Path

from element_cli.domain.errors import PreconditionError
from element_cli.models import BlockIdentity

_SLUG_PARTS = re.compile(r"[a-z0-9]+")


def published_name_from(display_name: str) -> str:
    """Lowercase, dash-separated slug (``"My Widget!"`` -> ``"my-widget"``)"""
    return "-".join(_SLUG_PARTS.findall(display_name.lower()))


def _package_name(workspace: Path) -> str | None:
    package_file = workspace / "package.json"
    if not package_file.is_file():
        return None
    try:
        payload = json.loads(package_file.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    name = payload.get("name") if isinstance(payload, dict) else None
    return name if isinstance(name, str) else None


def _invalid(message: str) -> PreconditionError:
    return PreconditionError(message=message, code="invalid_identity")


def validate_inputs(
    name: str | None,
    category: str,
    categories: Sequence[str] | None,
    workspace: Path,
) -> tuple[BlockIdentity, str]:
    """Derive the block identity and canonical category.

    The display name falls back to ``package.json``'s ``name`` and then to the
    workspace directory name.

    Returns:
        (identity, category) with the category in its canonical casing

    Raises:
        PreconditionError: If a name cannot be derived or the category is unknown
    """
    display_name = (name or "").strip() or (_package_name(workspace) or "").strip()
    if not display_name:
        display_name = workspace.resolve().name.strip()
    if not display_name:
        raise _invalid("Block name is required")

    published_name = published_name_from(display_name)
    if not published_name:
        raise _invalid(f"Block name '{display_name}' must contain letters or digits")

    category = (category or "").strip()
    if not category:
        raise _invalid("Block category is required")
    if categories:
        matches = [known for known in categories if known.lower() == category.lower()]
        if not matches:
            available = ", ".join(categories)
            raise _invalid(f"Unknown category '{category}'. Available categories: {available}")
        category = matches[0]

    identity = BlockIdentity(display_name=display_name, published_name=published_name)
    return identity, category
