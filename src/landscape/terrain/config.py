"""Terrain generation configuration models."""

from pydantic import BaseModel, Field


class NoiseConfig(BaseModel):
    """Fractal noise and elevation shaping parameters."""

    octaves: int = Field(default=8, description="Number of octaves for fBm")
    persistence: float = Field(default=0.45, description="Amplitude multiplier per octave")
    lacunarity: float = Field(default=2.0, description="Frequency multiplier per octave")
    scale: float = Field(default=0.0015, description="Base frequency in cycles per cell")
    curve_exponent: float = Field(
        default=1.5, description="Power curve applied to flatten peaks and valleys"
    )
    height_multiplier: float = Field(
        default=1.2, description="Scale applied after the power curve"
    )


class ClassificationConfig(BaseModel):
    """Which optional classes are active."""

    include_snow: bool = Field(default=True, description="Keep the Snow class")
    include_urban: bool = Field(
        default=True, description="Keep the Urban class and build roads/buildings"
    )


class RoadConfig(BaseModel):
    """Road network parameters."""

    point_count: int = Field(default=50, description="Target number of settlement points")
    max_attempts: int = Field(
        default=30, description="Rejection sampling attempts per point"
    )
    elevation_penalty: float = Field(
        default=10.0, description="Cost multiplier for accumulated elevation change"
    )
    main_road_fraction: float = Field(
        default=0.15, description="Main road length as a fraction of min(width, height)"
    )


class BuildingConfig(BaseModel):
    """Building footprint placement parameters."""

    slot_length: float = Field(default=100.0, description="Road length per building slot")
    size_min_fraction: float = Field(
        default=0.10, description="Minimum footprint side as a fraction of slot length"
    )
    size_jitter_fraction: float = Field(
        default=0.05, description="Random extra footprint side as a fraction of slot length"
    )
    road_gap: float = Field(default=10.0, description="Gap between road and footprint")


class HydrologyConfig(BaseModel):
    """Lake and river parameters."""

    include_water: bool = Field(default=True, description="Build lakes and rivers")
    lake_threshold: float = Field(
        default=0.2, description="Cells at or below this elevation are lake"
    )
    max_rivers: int = Field(default=2, description="Maximum number of rivers")
    source_grid: int = Field(
        default=5, description="Source candidates per axis on the coarse grid"
    )
    source_max_elevation: float = Field(
        default=0.6, description="Sources must lie strictly below this elevation"
    )
    max_river_steps: int | None = Field(
        default=None, description="Descent step cap (None = width + height)"
    )


class TerrainConfig(BaseModel):
    """Complete terrain generation configuration."""

    seed: int | None = Field(
        default=None, description="Random seed (None = fresh entropy every run)"
    )
    width: int = Field(default=500, description="Grid width in cells")
    height: int = Field(default=500, description="Grid height in cells")

    noise: NoiseConfig = Field(default_factory=NoiseConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    roads: RoadConfig = Field(default_factory=RoadConfig)
    buildings: BuildingConfig = Field(default_factory=BuildingConfig)
    hydrology: HydrologyConfig = Field(default_factory=HydrologyConfig)

    # Debug options
    debug_output_dir: str | None = Field(
        default=None, description="Directory for debug images (None = disabled)"
    )
