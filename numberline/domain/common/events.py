"""
Common event builders and helpers.
Events are defined in numberline/transport/protocols.py as OutgoingEvent types.
"""
# numberline/domain/common/events.py
from __future__ import annotations

import logging
from typing import List, Tuple

from numberline.domain.common.views import Delivery
from numberline.transport.protocols import OutgoingEvent, OutRejected

logger = logging.getLogger(__name__)

# Returns: (to_sender, to_players)
Result = Tuple[List[OutgoingEvent], List[Delivery]]


def rejection_acks_enabled(app) -> bool:
    settings = getattr(app.state, "settings", None)
    return bool(getattr(settings, "REJECTION_ACKS", False))


def reject(app, *, action: str, code: str, message: str) -> Result:
    """
    Drop an illegal action. Silent by default: no broadcast, no reply.
    With REJECTION_ACKS the sender alone gets a REJECTED event.
    """
    logger.debug("dropped %s: %s (%s)", action, code, message)
    if rejection_acks_enabled(app):
        return [OutRejected(action=action, code=code, message=message)], []
    return [], []
