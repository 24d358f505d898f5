from __future__ import annotations

from typing import Dict, List, Sequence

from .types import LinkGroup, LinkItem


def merge_groups(
    common_groups: Sequence[LinkGroup],
    context_groups: Sequence[LinkGroup],
) -> List[LinkGroup]:
    """Coalesce groups by primary-locale title, common document first.

    Groups keep their first-appearance position; links of same-titled groups
    are concatenated in arrival order without de-duplication. title_en comes
    from the first group seen for a key.
    """
    titles_en: Dict[str, str] = {}
    buckets: Dict[str, List[LinkItem]] = {}
    for group in [*common_groups, *context_groups]:
        key = group.merge_key
        if key not in buckets:
            titles_en[key] = group.title_en or key
            buckets[key] = []
        buckets[key].extend(group.links)
    return [
        LinkGroup(title=key, title_en=titles_en[key], links=tuple(links))
        for key, links in buckets.items()
    ]
