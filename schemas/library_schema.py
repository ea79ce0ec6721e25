"""Schemas for the shared libraries: supplements, exercise videos and guides.

Images, videos and guide files are referenced by URL; uploading them is the
front end's job.
"""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional

URL_PATTERN = r"^https?://\S+$"

Difficulty = Literal["beginner", "intermediate", "advanced"]


class SupplementCreateRequest(BaseModel):
    name: str = Field(..., min_length=2, examples=["Creatine monohydrate"])
    description: Optional[str] = None
    category: Optional[str] = Field(None, examples=["performance"])
    instructions: Optional[str] = Field(None, examples=["5 g daily with water"])
    benefits: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, pattern=URL_PATTERN)


class SupplementUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    description: Optional[str] = None
    category: Optional[str] = None
    instructions: Optional[str] = None
    benefits: Optional[List[str]] = None
    image_url: Optional[str] = Field(None, pattern=URL_PATTERN)


class SupplementResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    instructions: Optional[str] = None
    benefits: List[str]
    image_url: Optional[str] = None
    created_at: str
    updated_at: str


class ExerciseVideoCreateRequest(BaseModel):
    title: str = Field(..., min_length=3, examples=["Goblet squat"])
    description: Optional[str] = None
    video_url: str = Field(..., pattern=URL_PATTERN, examples=["https://videos.example.com/goblet-squat"])
    thumbnail_url: Optional[str] = Field(None, pattern=URL_PATTERN)
    difficulty: Difficulty = "beginner"
    muscle_group: Optional[str] = Field(None, examples=["legs"])
    is_public: bool = True


class ExerciseVideoUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = None
    video_url: Optional[str] = Field(None, pattern=URL_PATTERN)
    thumbnail_url: Optional[str] = Field(None, pattern=URL_PATTERN)
    difficulty: Optional[Difficulty] = None
    muscle_group: Optional[str] = None
    is_public: Optional[bool] = None


class ExerciseVideoResponse(BaseModel):
    id: int
    created_by: int
    title: str
    description: Optional[str] = None
    video_url: str
    thumbnail_url: Optional[str] = None
    difficulty: str
    muscle_group: Optional[str] = None
    is_public: bool
    created_at: str
    updated_at: str


class GuideCreateRequest(BaseModel):
    title: str = Field(..., min_length=3, examples=["Reading food labels"])
    description: str = Field(..., min_length=1)
    file_url: str = Field(..., pattern=URL_PATTERN, examples=["https://files.example.com/labels.pdf"])
    file_size: Optional[str] = Field(None, examples=["1.2 MB"])


class GuideUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = Field(None, min_length=1)
    file_url: Optional[str] = Field(None, pattern=URL_PATTERN)
    file_size: Optional[str] = None


class GuideResponse(BaseModel):
    id: int
    author_id: int
    author_name: Optional[str] = None
    title: str
    description: str
    file_url: str
    file_size: Optional[str] = None
    download_count: int
    created_at: str
