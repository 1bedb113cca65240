"""Payment gateway webhook endpoint."""

import hashlib
import hmac
import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request

from apps.api.deps import get_commerce_settings, get_order_service
from core.application.dtos.payment_dto import PaymentEventDTO
from core.application.services.order_service import OrderApplicationService
from core.domain.exceptions import ExternalDependencyError, InvalidStateTransition, ValidationError
from core.settings.modules.commerce_settings import CommerceSettings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/payments", tags=["payments"])

SIGNATURE_PREFIX = "sha256="


def sign_payload(secret: str, payload: bytes) -> str:
    """Signature header value for a raw webhook body."""
    digest = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: str, payload: bytes, signature: str) -> None:
    if not secret:
        raise ExternalDependencyError("Webhook secret is not configured", dependency="payment_gateway")
    if not signature or not hmac.compare_digest(sign_payload(secret, payload), signature):
        raise ValidationError("Invalid webhook signature")


def _section(container: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = container.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"Webhook field '{key}' must be an object")
    return value


def _text(container: Dict[str, Any], key: str) -> Optional[str]:
    value = container.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"Webhook field '{key}' must be a string")
    return value


def parse_gateway_event(body: Any) -> PaymentEventDTO:
    """Flatten the gateway envelope into a PaymentEventDTO.

    Raises:
        ValidationError: Missing id or type, or a field of the wrong shape
    """
    if not isinstance(body, dict):
        raise ValidationError("Malformed webhook payload")
    event_id = _text(body, "id")
    event_type = _text(body, "type")
    if not event_id or not event_type:
        raise ValidationError("Malformed webhook payload")

    obj = _section(_section(body, "data"), "object")
    metadata = _section(obj, "metadata")
    error = _section(obj, "last_payment_error")

    if event_type.startswith("checkout.session."):
        payment_intent_ref = _text(obj, "payment_intent")
    else:
        payment_intent_ref = _text(obj, "id")

    return PaymentEventDTO(
        event_id=event_id,
        event_type=event_type,
        order_id=_text(metadata, "order_id"),
        payment_intent_ref=payment_intent_ref,
        error_code=_text(error, "code"),
        error_message=_text(error, "message"),
    )


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    x_furnibles_signature: str = Header(""),
    settings: CommerceSettings = Depends(get_commerce_settings),
    service: OrderApplicationService = Depends(get_order_service),
) -> Dict[str, Any]:
    """Receive a signed gateway event.

    A transition the order can no longer make is acknowledged with outcome
    ``rejected`` so the gateway stops redelivering it.
    """
    payload = await request.body()
    verify_signature(settings.webhook_secret, payload, x_furnibles_signature)

    try:
        body = json.loads(payload)
    except ValueError as e:
        raise ValidationError("Webhook body is not valid JSON") from e
    event = parse_gateway_event(body)

    try:
        result = await service.handle_payment_event(event)
    except InvalidStateTransition as e:
        logger.warning(f"Rejected payment event {event.event_id}: {e.message}")
        return {"event_id": event.event_id, "outcome": "rejected", "detail": e.to_dict()}

    return result.model_dump(mode="json")
