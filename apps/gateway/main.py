# apps/gateway/main.py
from fastapi import FastAPI, HTTPException, Body, Query
from pydantic import BaseModel, Field
from typing import Optional
import logging
from dotenv import load_dotenv

load_dotenv()  # picks up .env from the current working directory

from common.settings import settings  # uses pydantic-settings with env_file=".env"
from common.files import profile_pic_from_base64
from common.models import Entry, FieldChange, FormView, SubmitResult
from common.storage import JsonFileStorage
from registration.controller import RegistrationController
from registration.entries import EntryStore

log = logging.getLogger("candidate-registry")
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))


def build_controller(storage_path: str | None = None, storage_key: str | None = None) -> RegistrationController:
    storage = JsonFileStorage(storage_path or settings.storage_path, storage_key or settings.storage_key)
    return RegistrationController(EntryStore(storage))

# ---------- Models ----------
class ProfilePicIn(BaseModel):
    filename: str = ""
    content_type: Optional[str] = None
    content_base64: Optional[str] = Field(default=None, description="File bytes; omit or null to clear the input")

# ---------- App ----------
app = FastAPI(title="candidate-registry", version="0.1.0")
app.state.controller = None

def _controller() -> RegistrationController:
    if app.state.controller is None:
        app.state.controller = build_controller()
    return app.state.controller

@app.on_event("startup")
def _print_cfg():
    log.info(
        "CFG storage=%s key=%s port=%s",
        settings.storage_path,
        settings.storage_key,
        settings.hub_port,
    )
    _controller()

@app.get("/")
def hub_root():
    return {
        "service": "candidate-registry",
        "endpoints": {
            "health": "/health",
            "form": "GET /form",
            "change": "POST /form/fields",
            "profile_pic": "POST /form/profile-pic",
            "submit": "POST /form:submit",
            "reset": "POST /form:reset",
            "entries": "GET /entries",
            "delete": "DELETE /entries/{entry_id}",
            "docs": "/docs",
        }
    }

@app.get("/health")
async def health():
    return {
        "ok": True,
        "service": "candidate-registry",
        "entries": len(_controller().store),
        "storage": settings.storage_path,
    }

@app.get("/form", response_model=FormView)
async def get_form():
    return _controller().view()

@app.post("/form/fields", response_model=FormView)
async def change_field(change: FieldChange = Body(...)):
    try:
        _controller().change(change)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _controller().view()

@app.post("/form/profile-pic", response_model=FormView)
async def select_profile_pic(
    body: Optional[ProfilePicIn] = Body(None),
    wait: bool = Query(False, description="Return only after the preview has been read"),
):
    """
    Select (or clear) the profile picture. The preview is read in the background
    and shows up in GET /form once done, unless wait=true.
    """
    ctl = _controller()
    if body is None or body.content_base64 is None:
        ctl.select_file(None)
        return ctl.view()
    try:
        pic = profile_pic_from_base64(body.filename, body.content_base64, body.content_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    ctl.select_file(pic)
    if wait:
        await ctl.wait_preview()
    return ctl.view()

@app.post("/form:submit", response_model=SubmitResult, response_model_exclude_none=True)
async def submit_form():
    return _controller().submit()

@app.post("/form:reset", response_model=FormView)
async def reset_form():
    _controller().reset()
    return _controller().view()

@app.get("/entries", response_model=list[Entry])
async def list_entries():
    return _controller().store.entries

@app.delete("/entries/{entry_id}")
async def delete_entry(entry_id: int):
    removed = _controller().delete(entry_id)
    return {"ok": True, "removed": removed, "count": len(_controller().store)}


def run() -> None:
    import uvicorn
    uvicorn.run("apps.gateway.main:app", host="0.0.0.0", port=settings.hub_port)


if __name__ == "__main__":
    run()
