from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from filelock import FileLock
from tinydb import Query, TinyDB

from formbuilder.errors import DuplicateKeyError
from formbuilder.utils import parse_dt, to_iso


class JSONRepoBase:
    def __init__(self, path: Path, lock: FileLock) -> None:
        self._path = path
        self._lock = lock

    @contextmanager
    def _db(self) -> Iterable[TinyDB]:
        with self._lock:
            db = TinyDB(self._path)
            try:
                yield db
            finally:
                db.close()


class JSONFormRepo(JSONRepoBase):
    def list_forms(self, owner_id: str) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("forms").search(Query().owner_id == owner_id)
        forms = [self._from_record(item) for item in items]
        return sorted(forms, key=lambda x: (x["created_at"], x["id"]), reverse=True)

    def get_form(self, form_id: str) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("forms").get(Query().id == form_id)
        return self._from_record(item) if item else None

    def get_form_by_public_slug(self, public_slug: str) -> dict[str, Any] | None:
        with self._db() as db:
            item = db.table("forms").get(Query().public_slug == public_slug)
        return self._from_record(item) if item else None

    def create_form(self, form: dict[str, Any]) -> None:
        record = self._to_record(form)
        with self._db() as db:
            table = db.table("forms")
            if table.contains(Query().id == record["id"]):
                raise DuplicateKeyError("id", record["id"])
            if table.contains(Query().public_slug == record["public_slug"]):
                raise DuplicateKeyError("public_slug", record["public_slug"])
            table.insert(record)

    def update_form(self, form_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        with self._db() as db:
            table = db.table("forms")
            item = table.get(Query().id == form_id)
            if not item:
                raise KeyError(form_id)
            item.update(self._to_record(updates))
            table.update(item, Query().id == form_id)
        return self._from_record(item)

    def delete_form(self, form_id: str) -> bool:
        with self._db() as db:
            removed = db.table("forms").remove(Query().id == form_id)
        return bool(removed)

    @staticmethod
    def _to_record(form: dict[str, Any]) -> dict[str, Any]:
        record: dict[str, Any] = {}
        for key, value in form.items():
            if key in {"created_at", "updated_at"} and isinstance(value, datetime):
                record[key] = to_iso(value)
            else:
                record[key] = value
        return record

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "public_slug": record["public_slug"],
            "owner_id": record["owner_id"],
            "title": record["title"],
            "fields": record.get("fields", []),
            "created_at": parse_dt(record.get("created_at")),
            "updated_at": parse_dt(record.get("updated_at")),
        }


class JSONSubmissionRepo(JSONRepoBase):
    def list_submissions(self, form_id: str) -> list[dict[str, Any]]:
        with self._db() as db:
            items = db.table("submissions").search(Query().form_id == form_id)
        submissions = [self._from_record(item) for item in items]
        return sorted(
            submissions, key=lambda x: (x["submitted_at"], x["id"]), reverse=True
        )

    def create_submission(self, submission: dict[str, Any]) -> None:
        record = self._to_record(submission)
        with self._db() as db:
            db.table("submissions").insert(record)

    @staticmethod
    def _to_record(submission: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": submission["id"],
            "form_id": submission["form_id"],
            "responses": submission["responses"],
            "submitted_at": to_iso(submission["submitted_at"]),
            "source_address": submission.get("source_address"),
        }

    @staticmethod
    def _from_record(record: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": record["id"],
            "form_id": record["form_id"],
            "responses": record.get("responses", []),
            "submitted_at": parse_dt(record.get("submitted_at")),
            "source_address": record.get("source_address"),
        }


class JSONStorage:
    def __init__(self, path: Path) -> None:
        self._lock = FileLock(f"{path}.lock")
        self.forms = JSONFormRepo(path, self._lock)
        self.submissions = JSONSubmissionRepo(path, self._lock)

    def close(self) -> None:
        # TinyDB handles are opened per operation.
        return None
