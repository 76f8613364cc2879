"""Grid dimensions model for uniform sampling."""

from pydantic import BaseModel, ConfigDict, Field


class GridDimensions(BaseModel):
    """Number of patch columns and rows in a uniform layout."""

    columns: int = Field(ge=0, description="Patches per row")
    rows: int = Field(ge=0, description="Number of rows")

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={"example": {"columns": 7, "rows": 10}},
    )

    @property
    def count(self) -> int:
        """Total number of grid cells."""
        return self.columns * self.rows
