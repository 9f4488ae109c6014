"""Read-only view of the ticket being saved."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Collaborator(BaseModel):
    """A person CC'd on the ticket."""

    model_config = {"frozen": True}

    email: str | None = None
    name: str | None = None


class Ticket(BaseModel):
    """The fields of a ticket the enforcement check reads."""

    model_config = {"frozen": True}

    id: int | str | None = None
    requester_email: str | None = None
    collaborators: list[Collaborator] = Field(default_factory=list)

    @property
    def collaborator_emails(self) -> list[str | None]:
        return [c.email for c in self.collaborators]

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> Ticket:
        """Build a Ticket from a host payload.

        Accepts the host's dotted keys (``ticket.requester``,
        ``ticket.collaborators``) or the flat equivalents
        (``requester`` / ``requester_email``, ``collaborators``).
        """
        requester = data.get("ticket.requester", data.get("requester"))
        requester_email = data.get("requester_email")
        if requester_email is None and isinstance(requester, dict):
            requester_email = requester.get("email")

        raw_collaborators = data.get("ticket.collaborators", data.get("collaborators")) or []
        collaborators: list[Collaborator] = []
        for entry in raw_collaborators:
            if isinstance(entry, str):
                collaborators.append(Collaborator(email=entry))
            elif isinstance(entry, dict):
                collaborators.append(
                    Collaborator(email=entry.get("email"), name=entry.get("name"))
                )

        return cls(
            id=data.get("ticket.id", data.get("id")),
            requester_email=requester_email,
            collaborators=collaborators,
        )
