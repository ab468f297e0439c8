from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


# Single audit entry as returned by GET /logs
class LogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    ts: datetime
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None


# One page of audit entries plus the total matching the filters
class LogPage(BaseModel):
    items: List[LogOut]
    total: int
    page: int
    page_size: int
