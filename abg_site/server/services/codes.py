"""Generated identifiers: check-in codes and URL slugs."""

import re
import secrets
import string
from typing import Awaitable, Callable

from abg_site.server.core import constant

_ALPHABET = string.ascii_uppercase + string.digits


def generate_check_in_code(length: int = constant.CHECK_IN_CODE_LENGTH) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def slugify(title: str) -> str:
    """Lowercase, hyphen-separated form of ``title`` ("Hello, World!" -> "hello-world")."""
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower())
    return slug.strip("-") or "untitled"


async def unique_slug(title: str, taken: Callable[[str], Awaitable[bool]]) -> str:
    """First of ``base``, ``base-1``, ``base-2``... for which ``taken`` is False."""
    base = slugify(title)
    slug, counter = base, 1
    while await taken(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug
