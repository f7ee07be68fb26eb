"""REST API adapter serving a published snapshot."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query as FastQuery
from fastapi.responses import PlainTextResponse, Response

from toolsreg.domain.models import SortMode, ToolQuery
from toolsreg.errors import RegistryError
from toolsreg.models import Snapshot
from toolsreg.usecases.list_categories import list_live_categories
from toolsreg.usecases.search_tools import available_capabilities, search_tools
from toolsreg.usecases.verify_snapshot import load_snapshot


def create_app(snapshot_path: Path, hash_path: Optional[Path] = None) -> FastAPI:
    app = FastAPI(title="Tools Registry (REST)")

    def load() -> Snapshot:
        try:
            return load_snapshot(snapshot_path)
        except RegistryError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc

    @app.get("/healthz")
    def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/data/{filename}")
    def artifact(filename: str) -> Response:
        if filename == snapshot_path.name and snapshot_path.exists():
            return Response(content=snapshot_path.read_bytes(), media_type="application/json")
        if hash_path is not None and filename == hash_path.name and hash_path.exists():
            return PlainTextResponse(hash_path.read_text(encoding="utf-8"))
        raise HTTPException(status_code=404, detail="not_found")

    @app.get("/categories")
    def categories() -> Dict[str, Any]:
        snapshot = load()
        return {"categories": [category.model_dump() for category in list_live_categories(snapshot)]}

    @app.get("/capabilities")
    def capabilities() -> Dict[str, List[str]]:
        return {"capabilities": available_capabilities(load())}

    @app.get("/tools")
    def tools(
        category: Optional[str] = None,
        capability: List[str] = FastQuery(default=[]),
        q: str = "",
        sort: SortMode = SortMode.name,
    ) -> Dict[str, Any]:
        query = ToolQuery(category=category, capabilities=capability, q=q, sort=sort)
        results = search_tools(load(), query)
        return {"tools": [tool.model_dump() for tool in results]}

    return app
