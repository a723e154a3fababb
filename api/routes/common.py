"""
Shared helpers for route handlers.
"""

import uuid
from typing import Optional

from api.middleware.error_handler import NotFoundError, ValidationError
from database.models import RFP
from services.rfp_store import RFPStore


def parse_id(value: Optional[str], field: str = "rfp_id") -> uuid.UUID:
    """Parse a required UUID identifier from the request."""
    if not value:
        raise ValidationError(f"Missing {field}")
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value}")


async def require_rfp(store: RFPStore, rfp_id: uuid.UUID) -> RFP:
    rfp = await store.get_rfp(rfp_id)
    if rfp is None:
        raise NotFoundError("RFP not found")
    return rfp
