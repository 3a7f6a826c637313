# movie_api/models/movie.py

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MovieGenre(BaseModel):
    """Genre copy embedded in each movie document."""
    Name: Optional[str] = None
    Description: Optional[str] = None


class MovieDirector(BaseModel):
    """Director copy embedded in each movie document."""
    Name: Optional[str] = None
    Bio: Optional[str] = None
    Birth: Optional[str] = None


class MovieBase(BaseModel):
    """Common attributes for a movie, as stored in the 'movies' collection."""
    Title: str = Field(..., description="Movie title.")
    Description: str = Field(..., description="Movie synopsis.")
    Genre: Optional[MovieGenre] = Field(None, description="Embedded genre.")
    Director: Optional[MovieDirector] = Field(None, description="Embedded director.")
    Actors: List[str] = Field(default_factory=list, description="Actor names in billing order.")
    ImagePath: Optional[str] = Field(None, description="Poster image URL or path.")
    Featured: Optional[bool] = Field(None, description="Whether the movie is featured.")


class MovieRead(MovieBase):
    """Model for a movie returned by the API; the ObjectId is rendered as a string under '_id'."""
    id: str = Field(..., alias="_id", description="Internal database ID (MongoDB ObjectId).")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> str:
        return str(v)
