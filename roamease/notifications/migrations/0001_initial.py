import django.db.models.deletion
from django.conf import settings
from django.db import migrations
from django.db import models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "notification_type",
                    models.CharField(
                        choices=[
                            ("shipment_created", "Shipment Created"),
                            ("shipment_updated", "Shipment Updated"),
                            ("shipment_deleted", "Shipment Deleted"),
                            ("shipment_cancelled", "Shipment Cancelled"),
                            ("shipment_status_updated", "Shipment Status Updated"),
                            ("shipment_assigned", "Shipment Assigned"),
                            ("shipment_picked_up", "Shipment Picked Up"),
                            ("shipment_delivered", "Shipment Delivered"),
                            ("shipment_rated", "Shipment Rated"),
                            ("new_shipment_available", "New Shipment Available"),
                            ("bid_received", "Bid Received"),
                            ("bid_placed", "Bid Placed"),
                            ("bid_accepted", "Bid Accepted"),
                            ("bid_rejected", "Bid Rejected"),
                            ("price_update_request", "Price Update Request"),
                            ("price_update_response", "Price Update Response"),
                            ("payment_received", "Payment Received"),
                            ("payment_processed", "Payment Processed"),
                            ("payment_failed", "Payment Failed"),
                            ("dispute_created", "Dispute Created"),
                            ("dispute_resolved", "Dispute Resolved"),
                            ("verification_approved", "Verification Approved"),
                            ("verification_rejected", "Verification Rejected"),
                            ("account_suspended", "Account Suspended"),
                            ("account_reactivated", "Account Reactivated"),
                            ("new_message", "New Message"),
                            ("conversation_started", "Conversation Started"),
                            ("report_created", "Report Created"),
                            ("report_updated", "Report Updated"),
                            ("report_resolved", "Report Resolved"),
                            ("tracking_started", "Tracking Started"),
                            ("tracking_stopped", "Tracking Stopped"),
                            ("tracking_location_update", "Tracking Location Update"),
                            ("tracking_milestone_reached", "Tracking Milestone Reached"),
                            ("new_user_registered", "New User Registered"),
                            ("new_logistics_registered", "New Logistics Registered"),
                            ("verification_requested", "Verification Requested"),
                            ("dispute_escalated", "Dispute Escalated"),
                            ("payment_issue", "Payment Issue"),
                            ("system_alert", "System Alert"),
                            ("high_volume_activity", "High Volume Activity"),
                            ("suspicious_activity", "Suspicious Activity"),
                            ("platform_maintenance", "Platform Maintenance"),
                            ("feature_update", "Feature Update"),
                            ("policy_update", "Policy Update"),
                        ],
                        max_length=50,
                    ),
                ),
                ("title", models.CharField(max_length=255)),
                ("message", models.TextField(blank=True, default="")),
                (
                    "priority",
                    models.CharField(
                        choices=[
                            ("low", "Low"),
                            ("medium", "Medium"),
                            ("high", "High"),
                            ("urgent", "Urgent"),
                        ],
                        default="medium",
                        max_length=10,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("unread", "Unread"),
                            ("read", "Read"),
                            ("archived", "Archived"),
                        ],
                        default="unread",
                        max_length=10,
                    ),
                ),
                (
                    "related_entity_type",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("shipment", "Shipment"),
                            ("bid", "Bid"),
                            ("payment", "Payment"),
                            ("dispute", "Dispute"),
                            ("user", "User"),
                            ("system", "System"),
                            ("report", "Report"),
                            ("conversation", "Conversation"),
                        ],
                        default="",
                        max_length=20,
                    ),
                ),
                (
                    "related_entity_id",
                    models.CharField(blank=True, default="", max_length=64),
                ),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("actions", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                ("archived_at", models.DateTimeField(blank=True, null=True)),
                (
                    "recipient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["recipient", "status"],
                        name="notif_recipient_status_idx",
                    ),
                    models.Index(
                        fields=["recipient", "-created_at"],
                        name="notif_recipient_created_idx",
                    ),
                ],
            },
        ),
    ]
