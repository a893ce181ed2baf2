from pydantic import BaseModel, Field, field_validator
from typing import Optional


class ResearcherBase(BaseModel):
    """
    Base Pydantic model for a researcher (teaching staff member).
    """

    id: int = Field(
        ...,
        description="Unique user identifier"
    )

    full_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name"
    )

    department: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Department code; researchers without one are never ranked within a department"
    )

    academic_title: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Academic title (e.g. professor, lecturer)"
    )

    @field_validator("department", "academic_title")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None


class Researcher(ResearcherBase):
    """
    Researcher as returned by the directory (read-only for scoring).
    """

    class Config:
        from_attributes = True


class DirectoryEntry(ResearcherBase):
    """
    Full user-directory row, including the fields the eligibility policy reads.
    """

    full_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    is_active: bool = True
