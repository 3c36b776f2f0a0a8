"""Summaries of the content a track item points at."""

from typing import Optional

from pydantic import BaseModel


class ArticleSummary(BaseModel):
    id: int
    title: str
    slug: str
    category: Optional[str] = None
    description: Optional[str] = None
    file_url: Optional[str] = None
    published: bool = False

    class Config:
        from_attributes = True


class LessonSummary(BaseModel):
    id: int
    title: str
    duration: Optional[str] = None
    module: Optional[str] = None
    description: Optional[str] = None
    video_url: Optional[str] = None
    image_url: Optional[str] = None

    class Config:
        from_attributes = True


class ToolSummary(BaseModel):
    id: int
    title: str
    category: str
    icon: Optional[str] = None
    description: Optional[str] = None
    file_url: Optional[str] = None

    class Config:
        from_attributes = True
