from pydantic import BaseModel

from backend.api.services.auth_service import avatar_url

class AuthenticatedUser(BaseModel):
    id: str
    username: str
    discriminator: str | None = None
    avatar: str | None

    @classmethod
    def from_discord(cls, data: dict) -> "AuthenticatedUser":
        user_id = str(data['id'])
        return cls(
            id=user_id,
            username=data['username'],
            discriminator=data.get('discriminator'),
            avatar=avatar_url(user_id, data.get('avatar')),
        )

class AuthPayload(BaseModel):
    user: AuthenticatedUser
    token: str
