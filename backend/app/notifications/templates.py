# backend/app/notifications/templates.py

"""
業務モジュール × 操作ごとの通知タイトル・本文テンプレート。

本文は str.format 形式のテンプレートで、埋め込む値は Templater 側で
欠損時のプレースホルダ（"Unknown" など）に置き換えてから渡す。
未知の操作にはモジュールごとの汎用タイトル・本文を使う。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .schemas import NotificationModule, NotificationOperation

_CREATE = NotificationOperation.CREATE
_UPDATE = NotificationOperation.UPDATE
_DELETE = NotificationOperation.DELETE


@dataclass(frozen=True)
class ModuleTemplates:
    """1モジュール分のテンプレート集合。"""

    titles: Mapping[NotificationOperation, str]
    contents: Mapping[NotificationOperation, str]
    fallback_title: str
    fallback_content: str

    def title_for(self, operation: NotificationOperation) -> str:
        return self.titles.get(operation, self.fallback_title)

    def content_for(self, operation: NotificationOperation, fields: Mapping[str, Any]) -> str:
        template = self.contents.get(operation)
        if template is None:
            return self.fallback_content
        return template.format(**fields)


PATIENT_TEMPLATES = ModuleTemplates(
    titles={
        _CREATE: "New Patient Record",
        _UPDATE: "Patient Record Updated",
        _DELETE: "Patient Record Deleted",
    },
    contents={
        _CREATE: 'New patient "{name}" has been registered. Please keep track of upcoming visits.',
        _UPDATE: 'Details of patient "{name}" have been updated. Please verify the related medical records.',
        _DELETE: (
            'The record of patient "{name}" has been deleted. '
            "Related registrations and payment records were removed as well."
        ),
    },
    fallback_title="Patient Record Changed",
    fallback_content="Patient information has changed. Please review it.",
)

DOCTOR_TEMPLATES = ModuleTemplates(
    titles={
        _CREATE: "New Doctor Record",
        _UPDATE: "Doctor Record Updated",
        _DELETE: "Doctor Record Deleted",
    },
    contents={
        _CREATE: (
            'New doctor "{name}" ({department}) has been added. '
            "Please help complete the duty schedule."
        ),
        _UPDATE: (
            'Details of doctor "{name}" have been updated. '
            "Please confirm the department and specialty information."
        ),
        _DELETE: 'The record of doctor "{name}" has been deleted. Related registrations have been handled.',
    },
    fallback_title="Doctor Record Changed",
    fallback_content="Doctor information has changed. Please review it.",
)

REGISTRATION_TEMPLATES = ModuleTemplates(
    titles={
        _CREATE: "New Registration",
        _UPDATE: "Registration Updated",
        _DELETE: "Registration Cancelled",
    },
    contents={
        _CREATE: (
            'A registration was created for patient "{patientName}". '
            "Please help complete the rest of the visit."
        ),
        _UPDATE: (
            'The registration of patient "{patientName}" has been updated. '
            "Please watch for appointment time and department changes."
        ),
        _DELETE: (
            'The registration of patient "{patientName}" has been cancelled. '
            "Please refund any related payments."
        ),
    },
    fallback_title="Registration Changed",
    fallback_content="Registration information has changed. Please review it.",
)

PAYMENT_TEMPLATES = ModuleTemplates(
    titles={
        _CREATE: "New Payment Record",
        _UPDATE: "Payment Record Updated",
        _DELETE: "Payment Record Deleted",
    },
    contents={
        _CREATE: (
            'A payment record was created for patient "{patientName}", amount: ¥{amount}. '
            "Please verify the billed items and amount."
        ),
        _UPDATE: (
            'The payment record of patient "{patientName}" has been updated. '
            "Please check the billing details."
        ),
        _DELETE: (
            'The payment record of patient "{patientName}" has been deleted. '
            "Refunds must follow the standard procedure."
        ),
    },
    fallback_title="Payment Record Changed",
    fallback_content="Payment information has changed. Please review it.",
)

MEDICINE_TEMPLATES = ModuleTemplates(
    titles={
        _CREATE: "New Medicine Record",
        _UPDATE: "Medicine Record Updated",
        _DELETE: "Medicine Record Deleted",
    },
    contents={
        _CREATE: (
            'New medicine "{name}" ({code}) added, stock: {stock}. '
            "Please update the pharmacy inventory."
        ),
        _UPDATE: (
            'Details of medicine "{name}" have been updated. '
            "Please watch for stock and price changes."
        ),
        _DELETE: (
            'The record of medicine "{name}" has been deleted. '
            "Please check related prescriptions and stock status."
        ),
    },
    fallback_title="Medicine Record Changed",
    fallback_content="Medicine information has changed. Please review it.",
)

TEMPLATES: Dict[NotificationModule, ModuleTemplates] = {
    NotificationModule.PATIENT: PATIENT_TEMPLATES,
    NotificationModule.DOCTOR: DOCTOR_TEMPLATES,
    NotificationModule.REGISTRATION: REGISTRATION_TEMPLATES,
    NotificationModule.PAYMENT: PAYMENT_TEMPLATES,
    NotificationModule.MEDICINE: MEDICINE_TEMPLATES,
}
