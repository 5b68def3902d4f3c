from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from formbuilder import intake
from formbuilder.auth import current_owner
from formbuilder.routes.common import client_address, read_json_object

router = APIRouter(prefix="/api/submissions", tags=["api/submissions"])


@router.post("/{form_id}")
async def api_submit_form(request: Request, form_id: str) -> JSONResponse:
    storage = request.app.state.storage
    payload = await read_json_object(request)
    submission = intake.submit(
        storage, form_id, payload.get("responses"), client_address(request)
    )
    return JSONResponse(
        {
            "success": True,
            "message": "Form submitted successfully",
            "submission": intake.submission_output(submission),
        },
        status_code=201,
    )


@router.get("/form/{form_id}")
async def api_list_submissions(
    request: Request, form_id: str, owner_id: str = Depends(current_owner)
) -> JSONResponse:
    storage = request.app.state.storage
    submissions, count = intake.list_submissions_for_form(storage, owner_id, form_id)
    return JSONResponse(
        {
            "success": True,
            "submissions": [intake.submission_output(item) for item in submissions],
            "count": count,
        }
    )
