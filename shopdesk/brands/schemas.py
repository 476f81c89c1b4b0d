from pydantic import BaseModel, Field, field_validator


class CreateBrandRequest(BaseModel):
    """POST /brands"""
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class UpdateBrandRequest(CreateBrandRequest):
    """PUT /brands/{id}"""
