from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from formbuilder import catalog
from formbuilder.auth import current_owner
from formbuilder.routes.common import read_json_object

router = APIRouter(prefix="/api/forms", tags=["api/forms"])


@router.post("")
async def api_create_form(
    request: Request, owner_id: str = Depends(current_owner)
) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json_object(request)
    form = catalog.create_form(
        storage, owner_id, payload.get("title"), payload.get("fields")
    )
    return JSONResponse(
        {"success": True, "form": catalog.form_output(form)}, status_code=201
    )


@router.get("")
async def api_list_forms(
    request: Request, owner_id: str = Depends(current_owner)
) -> JSONResponse:
    storage = request.app.state.storage
    forms = catalog.list_forms_for_owner(storage, owner_id)
    return JSONResponse(
        {"success": True, "forms": [catalog.form_output(form) for form in forms]}
    )


@router.get("/public/{public_slug}")
async def api_get_public_form(request: Request, public_slug: str) -> JSONResponse:
    storage = request.app.state.storage
    form = catalog.get_form_by_public_slug(storage, public_slug)
    return JSONResponse(
        {"success": True, "form": catalog.form_output(form, include_owner=False)}
    )


@router.get("/{form_id}")
async def api_get_form(
    request: Request, form_id: str, owner_id: str = Depends(current_owner)
) -> JSONResponse:
    storage = request.app.state.storage
    form = catalog.get_form_for_owner(storage, owner_id, form_id)
    return JSONResponse({"success": True, "form": catalog.form_output(form)})


@router.put("/{form_id}")
async def api_update_form(
    request: Request, form_id: str, owner_id: str = Depends(current_owner)
) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json_object(request)
    form = catalog.update_form(storage, owner_id, form_id, payload)
    return JSONResponse({"success": True, "form": catalog.form_output(form)})


@router.delete("/{form_id}")
async def api_delete_form(
    request: Request, form_id: str, owner_id: str = Depends(current_owner)
) -> JSONResponse:
    storage = request.app.state.storage
    catalog.delete_form(storage, owner_id, form_id)
    return JSONResponse({"success": True, "message": "Form deleted successfully"})
