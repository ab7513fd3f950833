"""User document definitions."""

from typing import Any

from pydantic import BaseModel


class User(BaseModel):
    """Represents an application user as stored in the users collection."""

    id: str | None = None
    name: str
    email: str
    hashed_password: str

    def to_document(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'email': self.email,
            'hashed_password': self.hashed_password,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> 'User':
        return cls(
            id=str(document['_id']),
            name=document.get('name', ''),
            email=document.get('email', ''),
            hashed_password=document.get('hashed_password', ''),
        )

    def public_fields(self) -> dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'email': self.email}
