from typing import Optional
from pydantic import BaseModel, Field


class ReviewRequest(BaseModel):
    product_id: str
    rating: int = Field(default=5, ge=1, le=5)
    review_text: Optional[str] = Field(default=None, max_length=2000)
