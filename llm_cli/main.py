"""FastAPI app exposing ask/compare over HTTP."""

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from . import api
from .config import AppConfig, load_config, sessions_dir
from .errors import (
    ApiError,
    DecodeError,
    LLMCliError,
    MissingCredential,
    SessionError,
    TransportError,
    UnknownModel,
    UnsupportedProvider,
)
from .models import ProviderId
from .registry import get_api_key, key_preview, list_models, resolve_model
from .sessions import SessionStore

app = FastAPI(title="LLM CLI API")


def get_app_config() -> AppConfig:
    """Configuration is re-read per request so `llm-cli config set` applies immediately."""
    return load_config()


def get_session_store() -> SessionStore:
    return SessionStore(sessions_dir())


class AskRequest(BaseModel):
    """Request to ask a single model."""
    query: str
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = Field(default=None, ge=0)


class CompareRequest(BaseModel):
    """Request to compare several models."""
    query: str
    models: List[str] = Field(min_length=1)


def _http_error(exc: LLMCliError) -> HTTPException:
    if isinstance(exc, UnknownModel):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (MissingCredential, UnsupportedProvider)):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, (ApiError, DecodeError, TransportError)):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "LLM CLI API"}


@app.get("/api/health")
async def health_check(config: AppConfig = Depends(get_app_config)):
    """
    Doctor endpoint - reports which providers have a usable credential.
    """
    api_keys: Dict[str, Dict[str, Any]] = {}
    for provider in ProviderId:
        try:
            key: Optional[str] = get_api_key(config, provider)
        except MissingCredential:
            key = None
        api_keys[provider.value] = {
            "configured": key is not None,
            "key_preview": key_preview(key),
        }

    try:
        default_provider = resolve_model(config, config.models.default).provider.value
        default_ready = api_keys[default_provider]["configured"]
    except UnknownModel:
        default_ready = False

    return {
        "status": "healthy" if default_ready else "degraded",
        "api_keys": api_keys,
        "default_model": config.models.default,
    }


@app.get("/api/models")
async def get_models(config: AppConfig = Depends(get_app_config)):
    """List the models in the registry."""
    return {
        "default": config.models.default,
        "models": [info.model_dump(mode="json") for info in list_models(config)],
    }


@app.post("/api/ask")
async def ask_model(request: AskRequest, config: AppConfig = Depends(get_app_config)):
    """Ask one model and return its normalized answer."""
    try:
        answer = await api.ask(
            config,
            request.query,
            model=request.model,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        )
    except LLMCliError as exc:
        raise _http_error(exc) from exc
    return {"model": answer.model, "provider": answer.provider.value, "content": answer.text}


@app.post("/api/compare")
async def run_comparison(request: CompareRequest, config: AppConfig = Depends(get_app_config)):
    """
    Ask several models in parallel.
    Per-model failures are reported inline; results follow the request order.
    """
    results = await api.compare_models(config, request.query, request.models)
    return {"results": [result.to_dict() for result in results]}


@app.get("/api/sessions")
async def list_sessions(store: SessionStore = Depends(get_session_store)):
    """List all session names."""
    return {"sessions": store.list()}


@app.get("/api/sessions/{name}")
async def get_session(name: str, store: SessionStore = Depends(get_session_store)):
    """Get a session with all its messages."""
    try:
        session = store.load(name)
    except SessionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session.model_dump(mode="json")


@app.delete("/api/sessions/{name}")
async def delete_session(name: str, store: SessionStore = Depends(get_session_store)):
    """Delete a session."""
    try:
        deleted = store.delete(name)
    except SessionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not deleted:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "ok", "deleted": name}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8001)
