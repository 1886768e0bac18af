from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class PaymentCodeName(str, Enum):
    phonepe = "phonepe"
    paytm = "paytm"
    googlepay = "googlepay"
    amazon_pay = "amazon_pay"
    other = "other"


class PaymentCode(BaseModel):
    name: PaymentCodeName
    address: str = Field(..., min_length=1)
    qr_code: str = ""
    is_active: bool = True


class PaymentSettings(BaseModel):
    upi_enabled: bool = True
    upi_address: str = ""
    upi_qr_code: str = ""
    upi_name: str = "Vasstra Payments"
    code_payment_enabled: bool = True
    payment_codes: list[PaymentCode] = Field(default_factory=list)
    card_enabled: bool = True
    netbanking_enabled: bool = True
    cod_enabled: bool = True
    updated_at: float | None = None


class PaymentSettingsUpdate(BaseModel):
    upi_enabled: bool | None = None
    upi_address: str | None = None
    upi_qr_code: str | None = None
    upi_name: str | None = None
    code_payment_enabled: bool | None = None
    payment_codes: list[PaymentCode] | None = None
    card_enabled: bool | None = None
    netbanking_enabled: bool | None = None
    cod_enabled: bool | None = None


class CheckoutPaymentOptions(BaseModel):
    """What the checkout page may offer; QR images and disabled codes omitted."""

    methods: list[str]
    upi_address: str | None = None
    upi_name: str | None = None
    payment_codes: list[PaymentCode] = Field(default_factory=list)
