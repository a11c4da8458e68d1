"""Marketplace broadcasts.

Payloads are the serialized domain objects the frontend already renders;
they are passed through untouched.
"""

from __future__ import annotations

from typing import Any

from roamease.realtime.emitter import broadcast_event
from roamease.realtime.emitter import emit_event_to_user

NEW_SHIPMENT = "new-shipment"
SHIPMENT_UPDATED = "shipment-updated"
SHIPMENT_DELETED = "shipment-deleted"
SHIPMENT_RATED = "shipment-rated"
SHIPMENT_DELIVERED_BY_LOGISTICS = "shipment-delivered-by-logistics"
SHIPMENT_DELIVERED_BY_USER = "shipment-delivered-by-user"
NEW_BID = "new-bid"
NEW_BID_FOR_SHIPPER = "new-bid-for-shipper"
BID_UPDATED = "bid-updated"
BID_DELETED = "bid-deleted"


def publish_new_shipment(shipment: dict[str, Any]) -> None:
    broadcast_event(NEW_SHIPMENT, shipment)


def publish_shipment_updated(shipment: dict[str, Any]) -> None:
    broadcast_event(SHIPMENT_UPDATED, shipment)


def publish_shipment_deleted(shipment_id: Any) -> None:
    broadcast_event(SHIPMENT_DELETED, {"shipmentId": shipment_id})


def publish_shipment_rated(shipment: dict[str, Any]) -> None:
    broadcast_event(SHIPMENT_RATED, shipment)


def publish_new_bid(bid: dict[str, Any], *, shipper_id: Any) -> None:
    """Broadcast a new bid and tell the shipment owner directly."""

    emit_event_to_user(shipper_id, NEW_BID_FOR_SHIPPER, bid)
    broadcast_event(NEW_BID, bid)


def publish_bid_updated(bid: dict[str, Any], shipment: dict[str, Any] | None = None) -> None:
    broadcast_event(BID_UPDATED, bid)
    if shipment is not None:
        broadcast_event(SHIPMENT_UPDATED, shipment)


def publish_bid_deleted(bid_id: Any, shipment_id: Any) -> None:
    broadcast_event(BID_DELETED, {"bidId": bid_id, "shipmentId": shipment_id})


def publish_shipment_delivered(
    shipment: dict[str, Any],
    *,
    by_logistics: bool,
    counterpart_id: Any | None = None,
) -> None:
    """Broadcast a delivery confirmation and notify the other party.

    ``by_logistics`` says who confirmed: the carrier (the shipper is the
    counterpart) or the shipper (the carrier is the counterpart).
    """

    event = SHIPMENT_DELIVERED_BY_LOGISTICS if by_logistics else SHIPMENT_DELIVERED_BY_USER
    broadcast_event(event, shipment)
    if counterpart_id is not None:
        emit_event_to_user(counterpart_id, event, shipment)
