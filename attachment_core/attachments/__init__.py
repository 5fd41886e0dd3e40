"""Attachment lifecycle: declarations, slots, proxies and the save/destroy coordinator.

@public
"""

from .coordinator import LifecycleCoordinator
from .document import AttachmentDescriptor, AttachmentDocument, attachment, declare_attachment
from .proxy import AttachmentProxy
from .registry import AttachmentRegistry, attachment_field_names, registry
from .resolver import resolve_name, resolve_type
from .slot import AttachmentSlot, Empty, PendingDelete, PendingUpload, Persisted, SlotState

__all__ = [
    "AttachmentDescriptor",
    "AttachmentDocument",
    "AttachmentProxy",
    "AttachmentRegistry",
    "AttachmentSlot",
    "Empty",
    "LifecycleCoordinator",
    "PendingDelete",
    "PendingUpload",
    "Persisted",
    "SlotState",
    "attachment",
    "attachment_field_names",
    "declare_attachment",
    "registry",
    "resolve_name",
    "resolve_type",
]
