"""FastAPI main application."""

from typing import Dict, List, Union

import structlog
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from ..config import settings
from ..core.adjacency import neighborhood_for
from ..core.errors import ConfigurationError
from ..core.landscape import LANDSCAPES, get_landscape
from ..core.scoring import max_placement_gain
from ..core.search import optimize
from ..render import layout_names, render_grid
from ..utils.logging import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

app = FastAPI(
    title="Loop Hero Layout Optimizer API",
    description="Branch-and-bound search for the best river and landscape layout",
    version="0.1.0",
)


# Request/Response models
class OptimizeRequest(BaseModel):
    """Request to optimize one grid."""

    rows: int = Field(..., ge=1, description="Number of grid rows")
    cols: int = Field(..., ge=1, description="Number of grid columns")
    terrain: Union[int, str] = Field(
        ..., description="Landscape family name or code (0 meadow, 1 thicket, 2 mountain, 3 suburb)"
    )


class OptimizeResponse(BaseModel):
    """Best layout found for a grid."""

    rows: int
    cols: int
    terrain: str
    value: int
    layout: List[List[str]]
    rendered: str
    stats: Dict[str, int]
    elapsed_seconds: float


class FamilyInfo(BaseModel):
    """Scoring parameters of one landscape family."""

    name: str
    code: int
    base_value: int
    label: str


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Loop Hero Layout Optimizer API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "max_cells": settings.max_cells}


@app.get("/families", response_model=List[FamilyInfo])
async def list_families():
    """List the supported landscape families."""
    return [
        FamilyInfo(
            name=spec.name,
            code=int(spec.family),
            base_value=spec.base_value,
            label=spec.label,
        )
        for spec in LANDSCAPES.values()
    ]


@app.get("/families/{terrain}/bound")
async def family_bound(terrain: str, rows: int, cols: int):
    """Largest value a single placement can add for a family on a grid shape."""
    try:
        landscape = get_landscape(terrain)
    except ConfigurationError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if rows < 1 or cols < 1:
        raise HTTPException(status_code=400, detail="rows and cols must be positive")
    cells = rows * cols
    if cells > settings.max_cells:
        raise HTTPException(
            status_code=400,
            detail=f"Grid has {cells} tiles; the limit is {settings.max_cells}",
        )

    return {
        "terrain": landscape.name,
        "rows": rows,
        "cols": cols,
        "max_tile_value": max_placement_gain(landscape, neighborhood_for(rows, cols)),
    }


@app.post("/optimize", response_model=OptimizeResponse)
def optimize_grid(request: OptimizeRequest):
    """
    Run the search synchronously and return the best layout.

    Runs in the worker thread pool; the search is CPU bound and small grids
    finish quickly.
    """
    logger.info("Optimization requested", request=request.model_dump())

    try:
        landscape = get_landscape(request.terrain)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    cells = request.rows * request.cols
    if cells > settings.max_cells:
        raise HTTPException(
            status_code=400,
            detail=f"Grid has {cells} tiles; the limit is {settings.max_cells}",
        )

    result = optimize(
        request.rows,
        request.cols,
        landscape.family,
        use_transposition_table=settings.use_transposition_table,
    )

    return OptimizeResponse(
        rows=request.rows,
        cols=request.cols,
        terrain=landscape.name,
        value=result.value,
        layout=layout_names(result.grid),
        rendered=render_grid(result.grid, landscape),
        stats=result.stats.as_dict(),
        elapsed_seconds=result.elapsed_seconds,
    )


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
