# backend/app/notifications/templater.py

"""
業務データから通知ペイロードを組み立てて Store に送るヘルパー。

各 send_*_notification は
1. 操作文字列を NotificationOperation に変換（未知の操作は WARNING ログ＋汎用テンプレート）
2. テンプレートからタイトル・本文を生成
3. entity_id / entity_name / metadata を組み立て
4. NotificationBackend.send_notification に渡し、その結果をそのまま返す

を行う。entity_data は病院 REST API のレスポンスと同じキー名
（id, name, patientName, amount など）の dict を想定する。
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, NamedTuple, Optional, Union

from .config import DEFAULT_OPERATOR_NAME
from .schemas import (
    NEW_ENTITY_ID,
    NotificationModule,
    NotificationOperation,
    NotificationPayload,
    OperationResult,
)
from .store import NotificationBackend
from .templates import TEMPLATES

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
UNKNOWN_PATIENT = "Unknown Patient"
UNKNOWN_DOCTOR = "Unknown Doctor"
UNKNOWN_MEDICINE = "Unknown Medicine"
UNKNOWN_DEPARTMENT = "Unknown Department"

OperationLike = Union[str, NotificationOperation]
EntityData = Mapping[str, Any]


class _EntityParts(NamedTuple):
    fields: Dict[str, Any]
    entity_name: str
    metadata: Dict[str, Any]


def _value(data: EntityData, key: str, default: Any) -> Any:
    """None・空文字を欠損とみなしてプレースホルダを返す。"""
    value = data.get(key)
    if value is None or value == "":
        return default
    return value


def _patient_parts(data: EntityData) -> _EntityParts:
    return _EntityParts(
        fields={"name": _value(data, "name", UNKNOWN)},
        entity_name=str(_value(data, "name", UNKNOWN_PATIENT)),
        metadata={
            "patientId": data.get("id"),
            "patientName": data.get("name"),
            "patientPhone": data.get("phone"),
        },
    )


def _doctor_parts(data: EntityData) -> _EntityParts:
    return _EntityParts(
        fields={
            "name": _value(data, "name", UNKNOWN),
            "department": _value(data, "department", UNKNOWN_DEPARTMENT),
        },
        entity_name=str(_value(data, "name", UNKNOWN_DOCTOR)),
        metadata={
            "doctorId": data.get("id"),
            "doctorName": data.get("name"),
            "department": data.get("department"),
            "title": data.get("title"),
        },
    )


def _registration_parts(data: EntityData) -> _EntityParts:
    return _EntityParts(
        fields={"patientName": _value(data, "patientName", UNKNOWN)},
        entity_name=f"{_value(data, 'patientName', UNKNOWN_PATIENT)}'s registration",
        metadata={
            "registrationId": data.get("id"),
            "patientName": data.get("patientName"),
            "doctorName": data.get("doctorName"),
            "appointmentTime": data.get("appointmentTime"),
        },
    )


def _payment_parts(data: EntityData) -> _EntityParts:
    return _EntityParts(
        fields={
            "patientName": _value(data, "patientName", UNKNOWN),
            "amount": _value(data, "amount", "0"),
        },
        entity_name=f"{_value(data, 'patientName', UNKNOWN_PATIENT)}'s payment record",
        metadata={
            "paymentId": data.get("id"),
            "patientName": data.get("patientName"),
            "amount": data.get("amount"),
            "paymentType": data.get("paymentType"),
        },
    )


def _medicine_parts(data: EntityData) -> _EntityParts:
    return _EntityParts(
        fields={
            "name": _value(data, "name", UNKNOWN),
            "code": _value(data, "code", ""),
            "stock": _value(data, "stock", "0"),
        },
        entity_name=str(_value(data, "name", UNKNOWN_MEDICINE)),
        metadata={
            "medicineId": data.get("id"),
            "medicineName": data.get("name"),
            "code": data.get("code"),
            "stock": data.get("stock"),
        },
    )


_PARTS_BUILDERS: Dict[NotificationModule, Callable[[EntityData], _EntityParts]] = {
    NotificationModule.PATIENT: _patient_parts,
    NotificationModule.DOCTOR: _doctor_parts,
    NotificationModule.REGISTRATION: _registration_parts,
    NotificationModule.PAYMENT: _payment_parts,
    NotificationModule.MEDICINE: _medicine_parts,
}


class NotificationTemplater:
    """
    業務モジュールごとの通知送信ヘルパー。

    状態は送信先 backend と既定オペレータ名のみで、通知コレクションは持たない。
    """

    def __init__(
        self,
        backend: NotificationBackend,
        *,
        default_operator: str = DEFAULT_OPERATOR_NAME,
    ) -> None:
        self._backend = backend
        self._default_operator = default_operator

    @property
    def backend(self) -> NotificationBackend:
        return self._backend

    def build_payload(
        self,
        module: Union[str, NotificationModule],
        operation: OperationLike,
        entity_data: Optional[EntityData] = None,
        operator_name: Optional[str] = None,
    ) -> NotificationPayload:
        """
        通知ペイロードを組み立てる（送信はしない）。

        :raises ValueError: module が未知の場合
        """
        module = NotificationModule(module)
        data: EntityData = entity_data or {}

        parsed = NotificationOperation.parse(operation)
        if parsed is NotificationOperation.UNKNOWN:
            logger.warning(
                "Unrecognized operation %r for module '%s'. Falling back to the generic template.",
                operation,
                module.value,
            )

        templates = TEMPLATES[module]
        parts = _PARTS_BUILDERS[module](data)

        return NotificationPayload(
            module=module,
            operation=operation.value if isinstance(operation, NotificationOperation) else operation,
            title=templates.title_for(parsed),
            content=templates.content_for(parsed, parts.fields),
            operator_name=operator_name if operator_name is not None else self._default_operator,
            entity_id=str(_value(data, "id", NEW_ENTITY_ID)),
            entity_name=parts.entity_name,
            metadata=parts.metadata,
        )

    def send_notification(
        self,
        module: Union[str, NotificationModule],
        operation: OperationLike,
        entity_data: Optional[EntityData] = None,
        operator_name: Optional[str] = None,
    ) -> OperationResult:
        """
        ペイロードを組み立てて backend に送り、backend の結果をそのまま返す。

        組み立て時の例外は呼び出し元に伝播させず、success=False の結果に変換する。
        """
        try:
            payload = self.build_payload(module, operation, entity_data, operator_name)
        except Exception as exc:  # noqa: BLE001 - 通知は呼び出し元の処理を止めない
            logger.exception("Failed to build %s notification.", module)
            return OperationResult.fail(str(exc))

        return self._backend.send_notification(payload)

    def send_patient_notification(
        self,
        operation: OperationLike,
        patient_data: Optional[EntityData] = None,
        operator_name: Optional[str] = None,
    ) -> OperationResult:
        return self.send_notification(NotificationModule.PATIENT, operation, patient_data, operator_name)

    def send_doctor_notification(
        self,
        operation: OperationLike,
        doctor_data: Optional[EntityData] = None,
        operator_name: Optional[str] = None,
    ) -> OperationResult:
        return self.send_notification(NotificationModule.DOCTOR, operation, doctor_data, operator_name)

    def send_registration_notification(
        self,
        operation: OperationLike,
        registration_data: Optional[EntityData] = None,
        operator_name: Optional[str] = None,
    ) -> OperationResult:
        return self.send_notification(
            NotificationModule.REGISTRATION, operation, registration_data, operator_name
        )

    def send_payment_notification(
        self,
        operation: OperationLike,
        payment_data: Optional[EntityData] = None,
        operator_name: Optional[str] = None,
    ) -> OperationResult:
        return self.send_notification(NotificationModule.PAYMENT, operation, payment_data, operator_name)

    def send_medicine_notification(
        self,
        operation: OperationLike,
        medicine_data: Optional[EntityData] = None,
        operator_name: Optional[str] = None,
    ) -> OperationResult:
        return self.send_notification(NotificationModule.MEDICINE, operation, medicine_data, operator_name)
