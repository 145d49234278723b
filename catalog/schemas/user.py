from pydantic import BaseModel, ConfigDict


class Identity(BaseModel):  # type: ignore[misc]
    """
    Claims embedded in an access token.

    `id` is the identifier of the User record the token was issued for.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    username: str
    id: int
