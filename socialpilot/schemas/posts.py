from pydantic import BaseModel, Field
from typing import Optional, List


class PostUpdate(BaseModel):
    """Edits to a draft; omitted fields are left unchanged."""
    caption: Optional[str] = None
    hashtags: Optional[List[str]] = None
    approval_notes: Optional[str] = Field(default=None, alias="approvalNotes")

    class Config:
        populate_by_name = True
