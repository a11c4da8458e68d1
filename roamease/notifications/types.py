"""Notification kinds and their delivery classification.

Admin relevance is an explicit property of each type rather than something
inferred from its name.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class NotificationType(models.TextChoices):
    # Shipments
    SHIPMENT_CREATED = "shipment_created", _("Shipment Created")
    SHIPMENT_UPDATED = "shipment_updated", _("Shipment Updated")
    SHIPMENT_DELETED = "shipment_deleted", _("Shipment Deleted")
    SHIPMENT_CANCELLED = "shipment_cancelled", _("Shipment Cancelled")
    SHIPMENT_STATUS_UPDATED = "shipment_status_updated", _("Shipment Status Updated")
    SHIPMENT_ASSIGNED = "shipment_assigned", _("Shipment Assigned")
    SHIPMENT_PICKED_UP = "shipment_picked_up", _("Shipment Picked Up")
    SHIPMENT_DELIVERED = "shipment_delivered", _("Shipment Delivered")
    SHIPMENT_RATED = "shipment_rated", _("Shipment Rated")
    NEW_SHIPMENT_AVAILABLE = "new_shipment_available", _("New Shipment Available")
    # Bids
    BID_RECEIVED = "bid_received", _("Bid Received")
    BID_PLACED = "bid_placed", _("Bid Placed")
    BID_ACCEPTED = "bid_accepted", _("Bid Accepted")
    BID_REJECTED = "bid_rejected", _("Bid Rejected")
    PRICE_UPDATE_REQUEST = "price_update_request", _("Price Update Request")
    PRICE_UPDATE_RESPONSE = "price_update_response", _("Price Update Response")
    # Payments and disputes
    PAYMENT_RECEIVED = "payment_received", _("Payment Received")
    PAYMENT_PROCESSED = "payment_processed", _("Payment Processed")
    PAYMENT_FAILED = "payment_failed", _("Payment Failed")
    DISPUTE_CREATED = "dispute_created", _("Dispute Created")
    DISPUTE_RESOLVED = "dispute_resolved", _("Dispute Resolved")
    # Account
    VERIFICATION_APPROVED = "verification_approved", _("Verification Approved")
    VERIFICATION_REJECTED = "verification_rejected", _("Verification Rejected")
    ACCOUNT_SUSPENDED = "account_suspended", _("Account Suspended")
    ACCOUNT_REACTIVATED = "account_reactivated", _("Account Reactivated")
    # Chat
    NEW_MESSAGE = "new_message", _("New Message")
    CONVERSATION_STARTED = "conversation_started", _("Conversation Started")
    # Reports
    REPORT_CREATED = "report_created", _("Report Created")
    REPORT_UPDATED = "report_updated", _("Report Updated")
    REPORT_RESOLVED = "report_resolved", _("Report Resolved")
    # Tracking
    TRACKING_STARTED = "tracking_started", _("Tracking Started")
    TRACKING_STOPPED = "tracking_stopped", _("Tracking Stopped")
    TRACKING_LOCATION_UPDATE = "tracking_location_update", _("Tracking Location Update")
    TRACKING_MILESTONE_REACHED = "tracking_milestone_reached", _(
        "Tracking Milestone Reached"
    )
    # Platform administration
    NEW_USER_REGISTERED = "new_user_registered", _("New User Registered")
    NEW_LOGISTICS_REGISTERED = "new_logistics_registered", _("New Logistics Registered")
    VERIFICATION_REQUESTED = "verification_requested", _("Verification Requested")
    DISPUTE_ESCALATED = "dispute_escalated", _("Dispute Escalated")
    PAYMENT_ISSUE = "payment_issue", _("Payment Issue")
    SYSTEM_ALERT = "system_alert", _("System Alert")
    HIGH_VOLUME_ACTIVITY = "high_volume_activity", _("High Volume Activity")
    SUSPICIOUS_ACTIVITY = "suspicious_activity", _("Suspicious Activity")
    PLATFORM_MAINTENANCE = "platform_maintenance", _("Platform Maintenance")
    FEATURE_UPDATE = "feature_update", _("Feature Update")
    POLICY_UPDATE = "policy_update", _("Policy Update")


# Types that are also pushed to the admin room, whoever the recipient is.
# New types join this set explicitly; nothing is inferred from the name.
ADMIN_NOTIFICATION_TYPES = frozenset({NotificationType.SYSTEM_ALERT})


def is_admin_notification(notification_type: str) -> bool:
    return notification_type in ADMIN_NOTIFICATION_TYPES


class Priority(models.TextChoices):
    LOW = "low", _("Low")
    MEDIUM = "medium", _("Medium")
    HIGH = "high", _("High")
    URGENT = "urgent", _("Urgent")


class Status(models.TextChoices):
    UNREAD = "unread", _("Unread")
    READ = "read", _("Read")
    ARCHIVED = "archived", _("Archived")


class RelatedEntityType(models.TextChoices):
    SHIPMENT = "shipment", _("Shipment")
    BID = "bid", _("Bid")
    PAYMENT = "payment", _("Payment")
    DISPUTE = "dispute", _("Dispute")
    USER = "user", _("User")
    SYSTEM = "system", _("System")
    REPORT = "report", _("Report")
    CONVERSATION = "conversation", _("Conversation")
