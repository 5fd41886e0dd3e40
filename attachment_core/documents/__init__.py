"""Document persistence engine.

Provides the Document base class with declared fields, change tracking and
lifecycle hooks, plus MIME helpers used when naming stored content.
"""

from .document import HOOK_EVENTS, Document, Hook, HookEvent
from .fields import Field
from .mime_type import DEFAULT_MIME_TYPE, detect_mime_type_from_name

__all__ = [
    "DEFAULT_MIME_TYPE",
    "Document",
    "Field",
    "HOOK_EVENTS",
    "Hook",
    "HookEvent",
    "detect_mime_type_from_name",
]
