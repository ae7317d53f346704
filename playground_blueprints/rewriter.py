"""Rewrite numeric entity references in template parts into tokens.

Block markup embeds database ids: a ``wp:navigation`` block points at a
``wp_navigation`` post through ``"ref"``, and that post's
``wp:navigation-link`` blocks point at pages through ``"id"``. Those ids are
meaningless on a freshly provisioned site, so the template part is exported
with symbolic tokens instead:

* each resolvable navigation reference gets the next local index ``n`` and its
  id is replaced with ``REFERENCE_n`` in the template part;
* inside the referenced navigation post, each resolvable link target id is
  replaced with ``NAV_ITEM_<id>``.

The replay payload later swaps the tokens for the ids the target assigns.

Example
-------
>>> body = '<!-- wp:navigation {"ref":42} /-->'
>>> result = rewrite_references(body, lambda post_id: None)
>>> result.content == body
True
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import re
import typing as typ

from .models import ContentItem, NavItem, Reference, RewrittenTemplatePart

logger = logging.getLogger(__name__)

NAVIGATION_PATTERN = re.compile(r"<!-- wp:navigation\s+(.*?) /-->")
NAVIGATION_LINK_PATTERN = re.compile(r"<!-- wp:navigation-link\s+(.*?) /-->")

PostLookup = typ.Callable[[int], "ContentItem | None"]


@dc.dataclass(frozen=True, slots=True)
class RewriteResult:
    """Rewritten body plus the side tables needed to replay it."""

    content: str
    references: tuple[Reference, ...]
    nav_items: tuple[NavItem, ...]


def reference_token(index: int) -> str:
    return f"REFERENCE_{index}"


def nav_item_token(post_id: int) -> str:
    return f"NAV_ITEM_{post_id}"


def _numeric_id(value: typ.Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


def _marker_attribute(payload: str, attribute: str) -> int | None:
    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError:
        return None
    if not isinstance(decoded, dict):
        return None
    return _numeric_id(decoded.get(attribute))


def replace_id(text: str, post_id: int, token: str) -> str:
    """Replace every standalone occurrence of ``post_id`` in ``text``.

    Occurrences glued to other digits, letters or underscores are left alone,
    so ``42`` matches neither ``142`` nor ``420`` and an already inserted
    ``REFERENCE_42`` token is never rewritten again.

    Examples
    --------
    >>> replace_id('{"ref":42} 142 NAV_ITEM_42 42', 42, "REFERENCE_0")
    '{"ref":REFERENCE_0} 142 NAV_ITEM_42 REFERENCE_0'
    """
    return re.sub(rf"(?<!\w){post_id}(?!\d)", token, text)


def _rewrite_nav_links(
    content: str, lookup: PostLookup, nav_items: dict[int, NavItem]
) -> str:
    for payload in NAVIGATION_LINK_PATTERN.findall(content):
        target_id = _marker_attribute(payload, "id")
        if target_id is None:
            continue
        target = lookup(target_id)
        if target is None:
            logger.debug("Navigation link target %s does not exist", target_id)
            continue
        nav_items[target.id] = NavItem(
            id=target.id, name=target.name, post_type=target.post_type
        )
        content = replace_id(content, target_id, nav_item_token(target.id))
    return content


def rewrite_references(content: str, lookup: PostLookup) -> RewriteResult:
    """Tokenize the navigation references embedded in ``content``.

    Parameters
    ----------
    content : str
        Raw block markup of a template part.
    lookup : Callable[[int], ContentItem | None]
        Fetches an entity by id; ``None`` means it does not exist.

    Returns
    -------
    RewriteResult
        The rewritten markup, the references in index order and the nav
        items they link to. References that do not resolve are skipped and
        their ids stay in the markup untouched.
    """
    references: list[Reference] = []
    nav_items: dict[int, NavItem] = {}
    seen: set[int] = set()
    rewritten = content
    for payload in NAVIGATION_PATTERN.findall(content):
        ref_id = _marker_attribute(payload, "ref")
        if ref_id is None or ref_id in seen:
            continue
        referenced = lookup(ref_id)
        if referenced is None:
            logger.debug("Navigation reference %s does not exist; left as-is", ref_id)
            continue
        seen.add(ref_id)
        index = len(references)
        references.append(
            Reference(
                index=index,
                source_id=ref_id,
                post_type=referenced.post_type,
                title=referenced.title,
                name=referenced.name,
                content=_rewrite_nav_links(referenced.content, lookup, nav_items),
            )
        )
        rewritten = replace_id(rewritten, ref_id, reference_token(index))
    return RewriteResult(
        content=rewritten,
        references=tuple(references),
        nav_items=tuple(nav_items.values()),
    )


def rewrite_template_part(item: ContentItem, lookup: PostLookup) -> RewrittenTemplatePart:
    """Return ``item`` with its references tokenized alongside the side tables."""
    result = rewrite_references(item.content, lookup)
    return RewrittenTemplatePart(
        item=dc.replace(item, content=result.content),
        references=result.references,
        nav_items=result.nav_items,
    )


__all__ = [
    "NAVIGATION_LINK_PATTERN",
    "NAVIGATION_PATTERN",
    "PostLookup",
    "RewriteResult",
    "nav_item_token",
    "reference_token",
    "replace_id",
    "rewrite_references",
    "rewrite_template_part",
]
