from __future__ import annotations

import logging
import time

from .models import (
    CheckoutPaymentOptions,
    PaymentSettings,
    PaymentSettingsUpdate,
)

logger = logging.getLogger(__name__)

_settings: PaymentSettings = PaymentSettings()


class PaymentSettingsError(Exception):
    """Rejected payment configuration; ``str(exc)`` is user-facing."""


def get_settings() -> PaymentSettings:
    return _settings


def enabled_methods(settings: PaymentSettings | None = None) -> list[str]:
    """Checkout payment methods currently switched on, in display order."""
    s = settings or _settings
    methods: list[str] = []
    if s.card_enabled:
        methods.append("card")
    if s.upi_enabled or (
        s.code_payment_enabled and any(c.is_active for c in s.payment_codes)
    ):
        methods.append("upi")
    if s.netbanking_enabled:
        methods.append("netbanking")
    if s.cod_enabled:
        methods.append("cod")
    return methods


def is_method_enabled(method: str) -> bool:
    return method in enabled_methods()


def update_settings(body: PaymentSettingsUpdate) -> PaymentSettings:
    global _settings
    candidate = PaymentSettings.model_validate(
        {**_settings.model_dump(), **body.model_dump(exclude_none=True)}
    )

    names = [code.name for code in candidate.payment_codes]
    if len(names) != len(set(names)):
        raise PaymentSettingsError("This payment method already exists")
    if not enabled_methods(candidate):
        raise PaymentSettingsError("Enable at least one payment method")

    _settings = candidate.model_copy(update={"updated_at": time.time()})
    logger.info("Payment settings updated: %s", ", ".join(enabled_methods(_settings)))
    return _settings


def checkout_options() -> CheckoutPaymentOptions:
    s = _settings
    return CheckoutPaymentOptions(
        methods=enabled_methods(s),
        upi_address=(s.upi_address or None) if s.upi_enabled else None,
        upi_name=s.upi_name if s.upi_enabled else None,
        payment_codes=[
            c.model_copy(update={"qr_code": ""})
            for c in s.payment_codes
            if s.code_payment_enabled and c.is_active
        ],
    )


def reset_settings() -> None:
    global _settings
    _settings = PaymentSettings()
