from __future__ import annotations

import logging
from typing import Any

from formbuilder.catalog import get_form_for_owner
from formbuilder.errors import MissingFieldsError, NotFound, ValidationError
from formbuilder.fields import ordered_fields
from formbuilder.storage import Storage
from formbuilder.utils import new_ulid, now_utc, to_iso

logger = logging.getLogger(__name__)


def submission_output(submission: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": submission["id"],
        "form_id": submission["form_id"],
        "responses": submission.get("responses", []),
        "submitted_at": to_iso(submission["submitted_at"]),
        "source_address": submission.get("source_address"),
    }


def parse_responses(
    raw_responses: Any, fields: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    if not isinstance(raw_responses, list):
        raise ValidationError(
            errors=[{"field": "responses", "message": "Responses must be an array"}]
        )
    labels = {field["id"]: field.get("label", "") for field in fields}
    responses: list[dict[str, Any]] = []
    errors: list[dict[str, str]] = []
    for index, raw in enumerate(raw_responses):
        field_id = raw.get("field_id") if isinstance(raw, dict) else None
        if not isinstance(field_id, str) or not field_id:
            errors.append(
                {"field": f"responses[{index}].field_id", "message": "field_id is required"}
            )
            continue
        field_label = raw.get("field_label")
        if not isinstance(field_label, str) or not field_label:
            field_label = labels.get(field_id, "")
        responses.append(
            {"field_id": field_id, "field_label": field_label, "value": raw.get("value")}
        )
    if errors:
        raise ValidationError(errors=errors)
    return responses


def find_missing_fields(
    fields: list[dict[str, Any]], responses: list[dict[str, Any]]
) -> list[dict[str, Any]]:
    submitted = {response["field_id"] for response in responses}
    return [
        field
        for field in ordered_fields(fields)
        if field.get("required") and field["id"] not in submitted
    ]


def submit(
    storage: Storage,
    form_id: str,
    raw_responses: Any,
    source_address: str | None = None,
) -> dict[str, Any]:
    form = storage.forms.get_form(form_id)
    if not form:
        raise NotFound()
    fields = form.get("fields", [])
    responses = parse_responses(raw_responses, fields)

    missing = find_missing_fields(fields, responses)
    if missing:
        labels = [field["label"] for field in missing]
        logger.warning("Submission rejected for form %s: missing %s", form_id, labels)
        raise MissingFieldsError(labels)

    submission = {
        "id": new_ulid(),
        "form_id": form["id"],
        "responses": responses,
        "submitted_at": now_utc(),
        "source_address": source_address,
    }
    storage.submissions.create_submission(submission)
    logger.info("Submission %s stored for form %s", submission["id"], form_id)
    return submission


def list_submissions_for_form(
    storage: Storage, owner_id: str, form_id: str
) -> tuple[list[dict[str, Any]], int]:
    get_form_for_owner(storage, owner_id, form_id)
    submissions = storage.submissions.list_submissions(form_id)
    return submissions, len(submissions)
