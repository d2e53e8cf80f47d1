from typing import List, Optional
from pydantic import BaseModel


class NotationParseRequest(BaseModel):
    text: str


class FillingNotationResponse(BaseModel):
    tooth: int
    surfaces: List[str]
    surface_count: int
    zones: List[str]
    note: str


class NotationParseResponse(BaseModel):
    kind: str
    text: str
    fillings: List[FillingNotationResponse] = []
    tooth: Optional[int] = None
    material: Optional[str] = None
    surface_count: Optional[int] = None
    code: Optional[str] = None


class DentalCodeResponse(BaseModel):
    id: str
    code: str
    description: str
    category: Optional[str]
    points: Optional[float]
    rate: Optional[float]

    class Config:
        from_attributes = True
