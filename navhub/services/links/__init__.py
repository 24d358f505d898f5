from .aggregator import merge_groups
from .loader import COMMON_CONTEXT, ConfigLoader, link_document_path
from .types import UNNAMED_TITLE, LinkDocument, LinkGroup, LinkItem

__all__ = [
    "COMMON_CONTEXT",
    "ConfigLoader",
    "LinkDocument",
    "LinkGroup",
    "LinkItem",
    "UNNAMED_TITLE",
    "link_document_path",
    "merge_groups",
]
