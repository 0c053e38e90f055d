import logging
import os
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from config import settings
from member import Member

logger = logging.getLogger(__name__)

DATA_FILE = settings.data_file


class BookRecord(BaseModel):
    title: str
    author: str
    due_date: Optional[date] = None
    overdue_fine: float = Field(default=0.0, ge=0)


class MemberRecord(BaseModel):
    name: str
    borrowed_books: List[BookRecord] = Field(default_factory=list)


_members_adapter = TypeAdapter(List[MemberRecord])


def members_to_json(members: List[Member]) -> str:
    """Serialize members to the on-disk JSON array."""
    records = [MemberRecord.model_validate(m.to_dict()) for m in members]
    return _members_adapter.dump_json(records, indent=2).decode("utf-8")


def members_from_json(payload: str) -> List[Member]:
    """Parse and validate the on-disk JSON array. Raises ``ValidationError``."""
    records = _members_adapter.validate_json(payload)
    return [Member.from_dict(r.model_dump()) for r in records]


def load_members(path: Optional[str] = None) -> List[Member]:
    """Read members from ``path``; an absent or unreadable file yields no members."""
    path = path or DATA_FILE
    if not os.path.exists(path):
        logger.info(f"No data file at {path}, starting empty")
        return []
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = f.read()
        if not payload.strip():
            return []
        members = members_from_json(payload)
        logger.info(f"Loaded {len(members)} members from {path}")
        return members
    except (OSError, ValidationError, ValueError):
        logger.exception(f"Could not load library data from {path}")
        _move_aside(path)
        return []


def _move_aside(path: str) -> Optional[str]:
    """Rename an unreadable data file to ``<path>.corrupt`` so a later save cannot erase it."""
    target = f"{path}.corrupt"
    try:
        os.replace(path, target)
    except OSError:
        logger.exception(f"Could not move unreadable data file {path} aside")
        return None
    logger.warning(f"Unreadable data file kept as {target}")
    return target


def save_members(members: List[Member], path: Optional[str] = None) -> bool:
    """Write members to ``path``. Failures are logged and reported as ``False``."""
    path = path or DATA_FILE
    try:
        payload = members_to_json(members)
        with open(path, "w", encoding="utf-8") as f:
            f.write(payload)
        logger.info(f"Saved {len(members)} members to {path}")
        return True
    except (OSError, ValidationError, ValueError):
        logger.exception(f"Could not save library data to {path}")
        return False
