"""Serializers for the booking domain."""

from __future__ import annotations

from django.core.validators import RegexValidator  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import MAX_SLOTS_PER_BOOKING, MIN_SLOTS_PER_BOOKING, Booking

NAME_VALIDATOR = RegexValidator(
    r"^[A-Za-z0-9 \-'.]+$",
    "Name contains invalid characters.",
)
PHONE_VALIDATOR = RegexValidator(
    r"^[+]?[\d\s\-()]+$",
    "Invalid phone number format.",
)

MAX_CART_ITEMS = 50


def flatten_errors(errors) -> dict:
    """Plain `{field: [message, ...]}` from DRF's nested ErrorDetail structure."""
    if isinstance(errors, dict):
        return {key: flatten_errors(value) for key, value in errors.items()}
    if isinstance(errors, list):
        if all(isinstance(item, str) for item in errors):
            return [str(item) for item in errors]
        return [flatten_errors(item) for item in errors]
    return str(errors)


class BookingRequestSerializer(serializers.Serializer):
    """Incoming booking request; camelCase on the wire."""

    campaignId = serializers.IntegerField(source="campaign_id", min_value=1)
    customerName = serializers.CharField(
        source="customer_name",
        min_length=2,
        max_length=100,
        validators=[NAME_VALIDATOR],
    )
    customerEmail = serializers.EmailField(source="customer_email", max_length=254)
    customerPhone = serializers.CharField(
        source="customer_phone",
        min_length=10,
        max_length=20,
        validators=[PHONE_VALIDATOR],
    )
    slotsRequired = serializers.IntegerField(
        source="slots_required",
        min_value=MIN_SLOTS_PER_BOOKING,
        max_value=MAX_SLOTS_PER_BOOKING,
    )
    company = serializers.CharField(
        max_length=200, required=False, allow_blank=True, allow_null=True, default=""
    )
    requirements = serializers.CharField(
        max_length=1000, required=False, allow_blank=True, allow_null=True, default=""
    )

    def validate_customerEmail(self, value: str) -> str:
        return value.strip().lower()

    def validate(self, attrs):  # type: ignore
        attrs["company"] = attrs.get("company") or ""
        attrs["requirements"] = attrs.get("requirements") or ""
        return attrs


class BookingSerializer(serializers.ModelSerializer):
    """Booking as returned to clients."""

    campaignId = serializers.IntegerField(source="campaign_id", read_only=True)
    customerName = serializers.CharField(source="customer_name", read_only=True)
    customerEmail = serializers.CharField(source="customer_email", read_only=True)
    customerPhone = serializers.CharField(source="customer_phone", read_only=True)
    slotsRequired = serializers.IntegerField(source="slots_required", read_only=True)
    totalPrice = serializers.DecimalField(
        source="total_price", max_digits=12, decimal_places=2, read_only=True
    )
    paymentStatus = serializers.CharField(source="payment_status", read_only=True)
    paymentReference = serializers.CharField(source="payment_reference", read_only=True)
    contractSigned = serializers.BooleanField(source="contract_signed", read_only=True)
    contractUrl = serializers.CharField(source="contract_url", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "campaignId",
            "customerName",
            "customerEmail",
            "customerPhone",
            "company",
            "slotsRequired",
            "requirements",
            "totalPrice",
            "status",
            "paymentStatus",
            "paymentReference",
            "contractSigned",
            "contractUrl",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class QuoteItemSerializer(serializers.Serializer):
    campaignId = serializers.IntegerField(source="campaign_id", min_value=1)
    slotsRequired = serializers.IntegerField(
        source="slots_required",
        min_value=MIN_SLOTS_PER_BOOKING,
        max_value=MAX_SLOTS_PER_BOOKING,
    )


class QuoteSerializer(serializers.Serializer):
    """A client-held cart to price across several campaigns."""

    items = QuoteItemSerializer(many=True, allow_empty=True, max_length=MAX_CART_ITEMS)


class PaymentUpdateSerializer(serializers.Serializer):
    paymentStatus = serializers.ChoiceField(
        source="payment_status", choices=Booking.PaymentStatus.choices
    )
    paymentReference = serializers.CharField(
        source="payment_reference", max_length=255, required=False, allow_blank=True, default=""
    )


class ContractUpdateSerializer(serializers.Serializer):
    contractSigned = serializers.BooleanField(source="contract_signed")
    contractUrl = serializers.URLField(
        source="contract_url", max_length=200, required=False, allow_blank=True, default=""
    )
