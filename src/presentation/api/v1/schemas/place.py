from pydantic import BaseModel


class PlaceAccessResponse(BaseModel):
    place_id: str
    user_id: str
    access: str = "granted"
