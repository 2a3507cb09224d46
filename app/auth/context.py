from pydantic import BaseModel, ConfigDict


class UserContext(BaseModel):
    """Identity of the signed-in user, passed explicitly into services."""

    model_config = ConfigDict(frozen=True)

    user_id: str
