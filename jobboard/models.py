"""Data models for job postings."""

import json
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Mapping, Optional


def _value(row: Mapping[str, Any], key: str, default: Any = None) -> Any:
    """Read a column from a sqlite3.Row or dict, tolerating missing keys."""
    if key not in row.keys():
        return default
    value = row[key]
    return default if value is None else value


@dataclass
class Job:
    """One posting as stored in the jobs table."""
    job_id: str
    title: str
    location: str = ''
    category: str = ''
    company: Optional[str] = None
    salary: str = ''
    description: str = ''
    tags: List[str] = field(default_factory=list)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    application_link: Optional[str] = None
    application_email: Optional[str] = None
    approved: bool = False
    created_by: Optional[str] = None
    created_at: str = ''
    posted_at: str = ''

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Job':
        """Build a Job from a sqlite3.Row or plain dict."""
        tags = _value(row, 'tags', [])
        if isinstance(tags, str):
            tags = json.loads(tags) if tags else []

        return cls(
            job_id=row['job_id'],
            title=_value(row, 'title', ''),
            location=_value(row, 'location', ''),
            category=_value(row, 'category', ''),
            company=_value(row, 'company'),
            salary=_value(row, 'salary', ''),
            description=_value(row, 'description', ''),
            tags=list(tags),
            latitude=_value(row, 'latitude'),
            longitude=_value(row, 'longitude'),
            application_link=_value(row, 'application_link'),
            application_email=_value(row, 'application_email'),
            approved=bool(_value(row, 'approved', False)),
            created_by=_value(row, 'created_by'),
            created_at=_value(row, 'created_at', ''),
            posted_at=_value(row, 'posted_at', ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
