"""CheckService: runs the binder for the CLI and reports ServiceResults."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from envbind.domain.errors import BindError
from envbind.domain.schema import RecordSchema, schema_of
from envbind.services.binder import load
from envbind.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


def _error_result(op: str, exc: BindError) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail()),
    )


def _schema_warnings(schema: RecordSchema) -> list[str]:
    """Flag declarations that bind but can never read the environment as written."""
    warnings: list[str] = []
    for path, descriptor in schema.leaves():
        rule = descriptor.rule
        if rule is None:
            continue
        if not rule.name:
            warnings.append(f"{path} has no env name and always uses its default")
        elif rule.required and rule.default:
            warnings.append(f"{path} is required; its default {rule.default!r} is never used")
    return warnings


def _leaf_values(instance: Any, schema: RecordSchema, prefix: str) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for descriptor in schema.fields:
        path = f"{prefix}.{descriptor.name}"
        value = getattr(instance, descriptor.name)
        if descriptor.record is not None:
            values.update(_leaf_values(value, descriptor.record, path))
        else:
            values[path] = value
    return values


class CheckService:
    """Validate and describe record types against an environment.

    Args:
        environ: Variable lookup; defaults to ``os.environ``.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def check(self, record_type: type) -> ServiceResult:
        """Bind a fresh instance of *record_type* and report the bound values."""
        op = "check"
        try:
            instance = load(record_type, self._environ)
            schema = schema_of(record_type)
        except BindError as exc:
            logger.debug("Check of %s failed: %s", getattr(record_type, "__name__", "?"), exc)
            return _error_result(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "record": schema.name,
                "values": _leaf_values(instance, schema, schema.name),
            },
            warnings=_schema_warnings(schema),
        )

    def describe(self, record_type: type) -> ServiceResult:
        """List every leaf field with its env name, type and options."""
        op = "describe"
        try:
            schema = schema_of(record_type)
        except BindError as exc:
            return _error_result(op, exc)

        fields: list[dict[str, Any]] = []
        for path, descriptor in schema.leaves():
            rule = descriptor.rule
            assert rule is not None
            fields.append(
                {
                    "path": path,
                    "type": descriptor.label,
                    "env": rule.name,
                    "required": rule.required,
                    "default": rule.default,
                    "min": rule.min,
                    "max": rule.max,
                }
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"record": schema.name, "count": len(fields), "fields": fields},
            warnings=_schema_warnings(schema),
        )
