# routes/transcript_route.py
from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from controller import AppState, TranscriptController

router = APIRouter(prefix="/api")


class CredentialIn(BaseModel):
    api_key: str


class InputIn(BaseModel):
    text: str


def get_controller(request: Request) -> TranscriptController:
    return request.app.state.controller


# =========================================================
# STATE + CREDENTIAL
# =========================================================
@router.get("/state", response_model=AppState)
def read_state(request: Request):
    return get_controller(request).snapshot()


@router.post("/credential", response_model=AppState)
def save_credential(data: CredentialIn, request: Request):
    return get_controller(request).set_credential(data.api_key)


@router.delete("/credential", response_model=AppState)
def delete_credential(request: Request):
    return get_controller(request).clear_credential()


# =========================================================
# INPUT
# =========================================================
@router.put("/input", response_model=AppState)
def update_input(data: InputIn, request: Request):
    return get_controller(request).set_input(data.text)


@router.post("/input/upload", response_model=AppState)
async def upload_input(request: Request, file: UploadFile = File(...)):
    controller = get_controller(request)
    # MIME check happens before the body is read
    controller.check_upload_type(file.content_type)
    try:
        data = await file.read()
    except OSError:
        raise controller.file_read_failed()
    return controller.load_file(file.filename, file.content_type, data)


@router.delete("/input", response_model=AppState)
def clear_input(request: Request):
    return get_controller(request).clear()


# =========================================================
# PROCESSING
# =========================================================
@router.post("/process", response_model=AppState)
async def process_transcript(request: Request):
    return await get_controller(request).process()


@router.post("/translate", response_model=AppState)
async def translate_result(request: Request):
    return await get_controller(request).translate()


# =========================================================
# DOWNLOAD
# =========================================================
@router.get("/download/{field}")
def download(field: str, request: Request):
    export = get_controller(request).export(field)
    return PlainTextResponse(
        export.content,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
