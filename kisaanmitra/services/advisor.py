"""Client for the external crop-advice service (chat and crop prediction).

The service is best-effort: every failure is logged and reported as ``None``.
"""
import logging
from typing import Any, Dict, Optional

import requests

from kisaanmitra.config import ADVISOR_API_URL, ADVISOR_TIMEOUT

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I am unable to answer right now. Please try again later."


class AdvisorClient:
    def __init__(self, base_url: str = ADVISOR_API_URL, timeout: float = ADVISOR_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _post(self, path: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url}{path}"
        try:
            response = requests.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error("Advisor request to %s failed: %s", url, e)
            return None
        except ValueError as e:
            logger.error("Advisor returned invalid JSON from %s: %s", url, e)
            return None

        if not isinstance(data, dict):
            logger.error("Advisor returned unexpected payload from %s: %r", url, data)
            return None
        return data

    def chat(self, message: str, language: str = "english") -> Optional[str]:
        data = self._post("/chat", {"message": message, "language": language})
        if data is None:
            return None
        reply = data.get("reply")
        if not reply:
            logger.warning("Advisor chat response had no reply field")
            return None
        return str(reply)

    def predict_crop(self, lat: float, long: float) -> Optional[Dict[str, Any]]:
        return self._post("/predict-crop", {"lat": lat, "long": long})
