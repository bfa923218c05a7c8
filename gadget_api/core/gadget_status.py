"""Gadget status values shared by the model, schemas and lifecycle service."""

STATUS_AVAILABLE = "Available"
STATUS_DEPLOYED = "Deployed"
STATUS_DESTROYED = "Destroyed"
STATUS_DECOMMISSIONED = "Decommissioned"

STATUS_CHOICES = (
    STATUS_AVAILABLE,
    STATUS_DEPLOYED,
    STATUS_DESTROYED,
    STATUS_DECOMMISSIONED,
)


__all__ = [
    "STATUS_AVAILABLE",
    "STATUS_CHOICES",
    "STATUS_DECOMMISSIONED",
    "STATUS_DEPLOYED",
    "STATUS_DESTROYED",
]
