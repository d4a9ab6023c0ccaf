from fastapi import APIRouter, Depends

from kisaanmitra.schemas.advisor import ChatReply, ChatRequest, CropPrediction, CropPredictionRequest
from kisaanmitra.services.advisor import AdvisorClient, FALLBACK_REPLY

router = APIRouter()


def get_advisor() -> AdvisorClient:
    return AdvisorClient()


@router.post("/chat", response_model=ChatReply)
def chat(request: ChatRequest, advisor: AdvisorClient = Depends(get_advisor)):
    reply = advisor.chat(request.message, request.language)
    if reply is None:
        return {"reply": FALLBACK_REPLY, "available": False}
    return {"reply": reply, "available": True}


@router.post("/predict-crop", response_model=CropPrediction)
def predict_crop(request: CropPredictionRequest, advisor: AdvisorClient = Depends(get_advisor)):
    prediction = advisor.predict_crop(request.lat, request.long)
    return {"available": prediction is not None, "prediction": prediction}
