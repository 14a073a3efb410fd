from datetime import datetime
from enum import StrEnum

from pydantic import Field

from portal.core.db import MongoModel
from portal.utils import now


class AccessAction(StrEnum):
    DOWNLOAD = "download"


class AccessLog(MongoModel):
    """Audit record of a document interaction.

    document_id is stored as requested; it is not checked against the CMS.
    Indexed on investor_id, created_at.
    """

    investor_id: str
    document_id: str
    document_title: str
    action: AccessAction
    created_at: datetime = Field(default_factory=now)
