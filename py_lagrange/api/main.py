"""FastAPI main application."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List
import structlog
import logging

from .. import __version__
from ..config import settings
from ..core.biomes import BiomeDimensions, BiomeRegion, create_biome_texture
from ..core.buffers import BufferSizeError, TextureData
from ..core.color import Color
from ..core.color_ramp import ColorRamp, RampCapacityError, create_ramp_texture
from ..core.textures import TextureKind, TextureService

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Lagrange Texture API",
    description="Procedural color ramp and biome texture synthesis",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Persistent buffers reused across requests
texture_service = TextureService()


# Request/Response models
class RampStepModel(BaseModel):
    """One color stop."""

    factor: float = Field(..., ge=0.0, le=1.0, description="Position along the ramp")
    color: str = Field(..., description="Hex color, e.g. #ff8800")


class RampRequest(BaseModel):
    """Request to synthesize a color ramp texture."""

    width: int = Field(settings.surface_texture_size, ge=1, le=settings.max_texture_size, description="Texture width")
    steps: List[RampStepModel] = Field(default_factory=list, description="Color stops")


class SlotRampRequest(BaseModel):
    """Ramp steps for a persistent slot."""

    steps: List[RampStepModel] = Field(default_factory=list, description="Color stops")


class BiomeModel(BaseModel):
    """One biome region in normalized humidity/temperature space."""

    temp_min: float = Field(0.0, ge=0.0, le=1.0)
    temp_max: float = Field(1.0, ge=0.0, le=1.0)
    humi_min: float = Field(0.0, ge=0.0, le=1.0)
    humi_max: float = Field(1.0, ge=0.0, le=1.0)
    color: str = Field(..., description="Hex color, e.g. #22aa44")
    smoothness: float = Field(0.0, ge=0.0, description="Edge softening factor")


class BiomeRequest(BaseModel):
    """Request to synthesize a biome texture."""

    size: int = Field(settings.biome_texture_size, ge=1, le=settings.max_texture_size, description="Texture side")
    regions: List[BiomeModel] = Field(default_factory=list, description="Biome regions, later ones take priority")


class SlotBiomeRequest(BaseModel):
    """Biome regions for a persistent slot."""

    regions: List[BiomeModel] = Field(default_factory=list)


class TextureResponse(BaseModel):
    """Synthesized RGBA8 texture."""

    width: int
    height: int
    data: str = Field(description="Base64-encoded row-major RGBA8 pixels")


class SlotUpdateResponse(BaseModel):
    """Result of a slot re-synthesis."""

    slot: str
    applied: bool
    generation: int


def _parse_color(value: str) -> Color:
    try:
        return Color.from_hex(value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _build_ramp(steps: List[RampStepModel]) -> ColorRamp:
    try:
        return _ramp_from_models(steps)
    except RampCapacityError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _ramp_from_models(steps: List[RampStepModel]) -> ColorRamp:
    ramp = ColorRamp()
    for step in steps:
        ramp.add_step(step.factor, _parse_color(step.color))
    return ramp


def _build_regions(regions: List[BiomeModel]) -> List[BiomeRegion]:
    return [
        BiomeRegion(
            BiomeDimensions(
                temperature_min=r.temp_min,
                temperature_max=r.temp_max,
                humidity_min=r.humi_min,
                humidity_max=r.humi_max,
            ),
            _parse_color(r.color),
            r.smoothness,
        )
        for r in regions
    ]


def _texture_response(texture: TextureData) -> TextureResponse:
    return TextureResponse(width=texture.width, height=texture.height, data=texture.to_base64())


def _get_slot(name: str):
    try:
        return texture_service.slot(name)
    except KeyError:
        raise HTTPException(status_code=404, detail="Texture slot not found")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Lagrange Texture API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "slots": list(texture_service.slots)}


@app.post("/textures/ramp", response_model=TextureResponse)
def synthesize_ramp_texture(request: RampRequest):
    """Synthesize a one-off color ramp texture."""
    logger.info("Ramp texture requested", width=request.width, steps=len(request.steps))
    ramp = _build_ramp(request.steps)
    try:
        texture = create_ramp_texture(request.width, ramp.steps)
    except BufferSizeError as e:
        logger.error("Ramp synthesis failed", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    return _texture_response(texture)


@app.post("/textures/biomes", response_model=TextureResponse)
def synthesize_biome_texture(request: BiomeRequest):
    """Synthesize a one-off biome texture."""
    logger.info("Biome texture requested", size=request.size, regions=len(request.regions))
    regions = _build_regions(request.regions)
    try:
        texture = create_biome_texture(request.size, regions)
    except BufferSizeError as e:
        logger.error("Biome synthesis failed", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    return _texture_response(texture)


@app.get("/slots/{name}", response_model=TextureResponse)
def get_slot(name: str):
    """Current contents of a persistent texture slot."""
    slot = _get_slot(name)
    return TextureResponse(width=slot.texture.width, height=slot.texture.height, data=slot.snapshot_base64())


@app.post("/slots/{name}/ramp", response_model=SlotUpdateResponse)
def update_slot_ramp(name: str, request: SlotRampRequest):
    """Re-synthesize a ramp slot in place."""
    slot = _get_slot(name)
    if slot.kind != TextureKind.RAMP:
        raise HTTPException(status_code=400, detail=f"Slot '{name}' is not a ramp texture")
    ramp = _build_ramp(request.steps)
    applied = texture_service.update_ramp(name, ramp.steps)
    return SlotUpdateResponse(slot=name, applied=applied, generation=slot.generation)


@app.post("/slots/{name}/biomes", response_model=SlotUpdateResponse)
def update_slot_biomes(name: str, request: SlotBiomeRequest):
    """Re-synthesize a biome slot in place."""
    slot = _get_slot(name)
    if slot.kind != TextureKind.BIOME:
        raise HTTPException(status_code=400, detail=f"Slot '{name}' is not a biome texture")
    applied = texture_service.update_biomes(name, _build_regions(request.regions))
    return SlotUpdateResponse(slot=name, applied=applied, generation=slot.generation)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
