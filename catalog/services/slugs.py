import logging
import re

from django.utils.text import slugify

from authentication.core.exceptions import InvalidName

logger = logging.getLogger(__name__)

_NON_SLUG_CHARS = re.compile(r'[^a-z0-9-]')
_REPEATED_DASHES = re.compile(r'-{2,}')


def normalize_slug(name):
    """Lowercase ASCII slug made only of [a-z0-9-], no leading/trailing dashes."""
    slug = slugify(name or '')
    slug = _NON_SLUG_CHARS.sub('-', slug)
    slug = _REPEATED_DASHES.sub('-', slug)
    return slug.strip('-')


def assign_slug(name, model, current_id=None, field='slug'):
    """
    Return a slug for ``name`` that is unique among ``model`` rows.

    When the base slug is taken by a different row, a numeric suffix is added.
    The counter starts one past the number of rows already sharing the base
    (``base`` or ``base-N``), and moves up until a free value is found.
    The row identified by ``current_id`` never collides with itself.
    """
    base = normalize_slug(name)
    if not base:
        raise InvalidName(f"'{name}' does not produce a valid slug")

    manager = model._default_manager
    count = manager.filter(**{f'{field}__iregex': rf'^{re.escape(base)}(-\d+)?$'}).count()
    if count > 0:
        count += 1

    slug = base
    existing = manager.filter(**{field: slug}).first()
    while existing is not None and existing.pk != current_id:
        slug = f"{base}-{count}"
        count += 1
        existing = manager.filter(**{field: slug}).first()

    if slug != base:
        logger.debug(f"Slug '{base}' taken on {model.__name__}, using '{slug}'")
    return slug
