"""Identity records handed out by the auth subsystem or the demo bypass."""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime


@dataclass(frozen=True)
class Identity:
    id: str
    phone: str | None = None
    email: str | None = None
    is_demo: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Identity":
        created_at = data.get("created_at")
        return cls(
            id=data["id"],
            phone=data.get("phone"),
            email=data.get("email"),
            is_demo=bool(data.get("is_demo", False)),
            created_at=datetime.fromisoformat(created_at) if created_at else datetime.now(UTC),
        )


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    identity: Identity
