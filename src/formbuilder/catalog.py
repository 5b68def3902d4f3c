from __future__ import annotations

import logging
from typing import Any

from formbuilder.errors import Conflict, DuplicateKeyError, NotFound, ValidationError
from formbuilder.fields import parse_fields
from formbuilder.storage import Storage
from formbuilder.utils import new_public_slug, new_ulid, now_utc, to_iso

logger = logging.getLogger(__name__)


def _clean_title(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def _validated_fields(raw_fields: Any) -> list[dict[str, Any]]:
    fields, errors = parse_fields(raw_fields)
    if errors:
        raise ValidationError(errors=errors)
    return fields


def form_output(form: dict[str, Any], include_owner: bool = True) -> dict[str, Any]:
    output = {
        "id": form["id"],
        "title": form["title"],
        "owner_id": form["owner_id"],
        "fields": form.get("fields", []),
        "public_slug": form["public_slug"],
        "created_at": to_iso(form["created_at"]),
        "updated_at": to_iso(form["updated_at"]),
    }
    if not include_owner:
        output.pop("owner_id")
    return output


def create_form(
    storage: Storage, owner_id: str, title: Any, raw_fields: Any
) -> dict[str, Any]:
    title = _clean_title(title)
    if not title:
        raise ValidationError(
            errors=[{"field": "title", "message": "Form title is required"}]
        )
    fields = _validated_fields(raw_fields)

    now = now_utc()
    form = {
        "id": new_ulid(),
        "public_slug": new_public_slug(),
        "owner_id": owner_id,
        "title": title,
        "fields": fields,
        "created_at": now,
        "updated_at": now,
    }
    try:
        storage.forms.create_form(form)
    except DuplicateKeyError as exc:
        logger.warning("Duplicate %s on form create: %s", exc.key, exc.value)
        if exc.key == "public_slug":
            raise Conflict("Could not allocate a unique public URL, please retry")
        raise Conflict()
    logger.info("Form created: %s (owner=%s)", form["id"], owner_id)
    return form


def list_forms_for_owner(storage: Storage, owner_id: str) -> list[dict[str, Any]]:
    return storage.forms.list_forms(owner_id)


def get_form_for_owner(storage: Storage, owner_id: str, form_id: str) -> dict[str, Any]:
    form = storage.forms.get_form(form_id)
    # Another owner's form is reported exactly like a missing one.
    if not form or form.get("owner_id") != owner_id:
        raise NotFound()
    return form


def get_form_by_public_slug(storage: Storage, public_slug: str) -> dict[str, Any]:
    form = storage.forms.get_form_by_public_slug(public_slug)
    if not form:
        raise NotFound()
    return form


def update_form(
    storage: Storage, owner_id: str, form_id: str, patch: dict[str, Any]
) -> dict[str, Any]:
    updates: dict[str, Any] = {}
    errors: list[dict[str, str]] = []
    if "title" in patch:
        title = _clean_title(patch.get("title"))
        if title:
            updates["title"] = title
        else:
            errors.append({"field": "title", "message": "Form title cannot be empty"})
    if "fields" in patch:
        fields, field_errors = parse_fields(patch.get("fields"))
        errors.extend(field_errors)
        updates["fields"] = fields
    if errors:
        raise ValidationError(errors=errors)

    get_form_for_owner(storage, owner_id, form_id)
    updates["updated_at"] = now_utc()
    try:
        return storage.forms.update_form(form_id, updates)
    except KeyError:
        raise NotFound()


def delete_form(storage: Storage, owner_id: str, form_id: str) -> None:
    get_form_for_owner(storage, owner_id, form_id)
    if not storage.forms.delete_form(form_id):
        raise NotFound()
    logger.info("Form deleted: %s (owner=%s)", form_id, owner_id)
