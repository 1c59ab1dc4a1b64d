from datetime import datetime, timezone
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


TargetFormat = Literal["jpeg", "png", "webp"]


class ConversionRead(BaseModel):
    """Schema for reading a conversion record, serialized with camelCase keys."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int = Field(..., description="Unique conversion record identifier", examples=[1])
    original_name: str = Field(..., description="Filename supplied by the client", examples=["photo.jpg"])
    converted_name: str = Field(
        ...,
        description="Server-generated filename of the converted image",
        examples=["converted-1700000000000.png"],
    )
    format: TargetFormat = Field(..., description="Target format of the conversion", examples=["png"])
    size: int = Field(..., ge=0, description="Size of the converted file in bytes", examples=[10240])
    created_at: datetime = Field(..., description="When the conversion was recorded")

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class ConvertResponse(BaseModel):
    """Schema returned after a successful conversion."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = Field(True, examples=[True])
    converted_image: str = Field(
        ...,
        description="Relative URL of the converted image",
        examples=["/uploads/converted-1700000000000.png"],
    )
    message: str = Field("Image converted successfully")


class DeleteResponse(BaseModel):
    """Schema returned after a record has been deleted."""

    success: bool = Field(True, examples=[True])
    message: str = Field("Image deleted successfully")


class ErrorResponse(BaseModel):
    """Error body shared by every failing endpoint."""

    error: str = Field(..., examples=["Invalid target format"])
