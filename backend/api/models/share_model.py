from pydantic import BaseModel


class ShareViewRequest(BaseModel):
    password: str
