import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from medix.structured.schemas import RESULT_SCHEMAS, ResultModel, SchemaKind

logger = logging.getLogger(__name__)


@dataclass
class ValidationOutcome:
    ok: bool
    data: ResultModel | None = None
    errors: list[dict[str, Any]] = field(default_factory=list)


def _format_errors(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "loc": ".".join(str(part) for part in err["loc"]) or "<root>",
            "msg": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


def validate(value: Any, kind: SchemaKind) -> ValidationOutcome:
    """Validate an extracted value against the result schema for ``kind``.

    Never raises: structural problems come back as ``ok=False`` with one
    error entry per offending location.
    """
    schema = RESULT_SCHEMAS[SchemaKind(kind)]
    if not isinstance(value, dict):
        return ValidationOutcome(
            ok=False,
            errors=[
                {
                    "loc": "<root>",
                    "msg": f"Expected a JSON object, got {type(value).__name__}",
                    "type": "object_type",
                }
            ],
        )

    try:
        data = schema.model_validate(value)
    except ValidationError as exc:
        errors = _format_errors(exc)
        logger.debug("%s validation failed with %d errors", kind, len(errors))
        return ValidationOutcome(ok=False, errors=errors)

    return ValidationOutcome(ok=True, data=data)
