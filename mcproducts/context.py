"""Request context and user session data."""

from __future__ import annotations

from dataclasses import dataclass, field

StringMap = dict[str, str]


@dataclass
class Session:
    """An authenticated user session."""

    id: str = ""
    token: str = ""
    created_at: int = 0
    expires_at: int = 0
    last_activity_at: int = 0
    user_id: str = ""
    device_id: str = ""
    roles: str = ""
    is_oauth: bool = False
    props: StringMap = field(default_factory=dict)


@dataclass
class Context:
    """Per-request information carried alongside errors and handlers."""

    session: Session | None = None
    request_id: str = ""
    ip_address: str = ""
    x_forwarded_for: str = ""
    path: str = ""
    user_agent: str = ""
    accept_language: str = ""