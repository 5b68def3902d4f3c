from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from formbuilder.errors import DuplicateKeyError
from formbuilder.models import Base, FormModel, SubmissionModel
from formbuilder.utils import dumps_json, ensure_aware, loads_json


class SQLiteFormRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_forms(self, owner_id: str) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = (
                session.query(FormModel)
                .filter(FormModel.owner_id == owner_id)
                .order_by(FormModel.created_at.desc(), FormModel.id.desc())
                .all()
            )
            return [self._to_dict(row) for row in rows]

    def get_form(self, form_id: str) -> dict[str, Any] | None:
        with self._Session() as session:
            row = session.get(FormModel, form_id)
            return self._to_dict(row) if row else None

    def get_form_by_public_slug(self, public_slug: str) -> dict[str, Any] | None:
        with self._Session() as session:
            row = (
                session.query(FormModel)
                .filter(FormModel.public_slug == public_slug)
                .first()
            )
            return self._to_dict(row) if row else None

    def create_form(self, form: dict[str, Any]) -> None:
        with self._Session() as session:
            row = FormModel(
                id=form["id"],
                public_slug=form["public_slug"],
                owner_id=form["owner_id"],
                title=form["title"],
                fields_json=dumps_json(form["fields"]),
                created_at=form["created_at"],
                updated_at=form["updated_at"],
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if "public_slug" in str(exc.orig):
                    raise DuplicateKeyError("public_slug", form["public_slug"]) from exc
                raise DuplicateKeyError("id", form["id"]) from exc

    def update_form(self, form_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        with self._Session() as session:
            row = session.get(FormModel, form_id)
            if not row:
                raise KeyError(form_id)
            for key, value in updates.items():
                if key == "fields":
                    row.fields_json = dumps_json(value)
                else:
                    setattr(row, key, value)
            session.commit()
            session.refresh(row)
            return self._to_dict(row)

    def delete_form(self, form_id: str) -> bool:
        with self._Session() as session:
            row = session.get(FormModel, form_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True

    @staticmethod
    def _to_dict(row: FormModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "public_slug": row.public_slug,
            "owner_id": row.owner_id,
            "title": row.title,
            "fields": loads_json(row.fields_json) or [],
            "created_at": ensure_aware(row.created_at),
            "updated_at": ensure_aware(row.updated_at),
        }


class SQLiteSubmissionRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_submissions(self, form_id: str) -> list[dict[str, Any]]:
        with self._Session() as session:
            rows = (
                session.query(SubmissionModel)
                .filter(SubmissionModel.form_id == form_id)
                .order_by(SubmissionModel.submitted_at.desc(), SubmissionModel.id.desc())
                .all()
            )
            return [self._to_dict(row) for row in rows]

    def create_submission(self, submission: dict[str, Any]) -> None:
        with self._Session() as session:
            row = SubmissionModel(
                id=submission["id"],
                form_id=submission["form_id"],
                responses_json=dumps_json(submission["responses"]),
                submitted_at=submission["submitted_at"],
                source_address=submission.get("source_address"),
            )
            session.add(row)
            session.commit()

    @staticmethod
    def _to_dict(row: SubmissionModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "form_id": row.form_id,
            "responses": loads_json(row.responses_json) or [],
            "submitted_at": ensure_aware(row.submitted_at),
            "source_address": row.source_address,
        }


class SQLiteStorage:
    def __init__(self, db_path: Path) -> None:
        self._engine = create_engine(f"sqlite:///{db_path}", future=True)
        self._Session = sessionmaker(self._engine, expire_on_commit=False)
        Base.metadata.create_all(self._engine)
        self.forms = SQLiteFormRepo(self._Session)
        self.submissions = SQLiteSubmissionRepo(self._Session)

    def close(self) -> None:
        self._engine.dispose()
