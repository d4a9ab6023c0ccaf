from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    language: str = "english"

class ChatReply(BaseModel):
    reply: str
    available: bool

class CropPredictionRequest(BaseModel):
    lat: float = Field(ge=-90, le=90)
    long: float = Field(ge=-180, le=180)

class CropPrediction(BaseModel):
    available: bool
    prediction: Optional[Dict[str, Any]] = None
