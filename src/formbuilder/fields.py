from __future__ import annotations

from typing import Any

from formbuilder.config import FIELD_TYPES


def parse_bool(value: Any) -> bool:
    return str(value).lower() in {"1", "true", "on", "yes"}


def _parse_order(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_fields(raw_fields: Any) -> tuple[list[dict[str, Any]], list[dict[str, str]]]:
    """Normalize a client-supplied field list.

    Returns the cleaned fields together with a list of ``{field, message}``
    errors. Problems are reported rather than repaired.
    """
    if not isinstance(raw_fields, list):
        return [], [{"field": "fields", "message": "Fields must be an array"}]

    errors: list[dict[str, str]] = []
    fields: list[dict[str, Any]] = []
    seen_ids: set[str] = set()

    for index, raw in enumerate(raw_fields):
        loc = f"fields[{index}]"
        if not isinstance(raw, dict):
            errors.append({"field": loc, "message": "Field must be an object"})
            continue

        field_id = str(raw.get("id") or "").strip()
        if not field_id:
            errors.append({"field": f"{loc}.id", "message": "Field id is required"})
        elif field_id in seen_ids:
            errors.append({"field": f"{loc}.id", "message": f"Duplicate field id ({field_id})"})
        else:
            seen_ids.add(field_id)

        field_type = str(raw.get("type") or "").strip()
        if field_type not in FIELD_TYPES:
            errors.append({"field": f"{loc}.type", "message": f"Invalid field type ({field_type})"})

        label = str(raw.get("label") or "").strip()
        if not label:
            errors.append({"field": f"{loc}.label", "message": "Field label is required"})

        order = _parse_order(raw.get("order"))
        if order is None:
            errors.append({"field": f"{loc}.order", "message": "Field order must be an integer"})

        raw_options = raw.get("options")
        options: list[str] = []
        if raw_options is not None:
            if isinstance(raw_options, list) and all(
                isinstance(item, (str, int, float)) and not isinstance(item, bool)
                for item in raw_options
            ):
                options = [str(item) for item in raw_options]
            else:
                errors.append({"field": f"{loc}.options", "message": "Options must be a list of strings"})

        fields.append(
            {
                "id": field_id,
                "type": field_type,
                "label": label,
                "required": parse_bool(raw.get("required", False)),
                "options": options,
                "order": order,
            }
        )

    return fields, errors


def ordered_fields(fields: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(fields, key=lambda field: field.get("order") or 0)
