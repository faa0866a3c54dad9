from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class User:
    """The signed-in account."""

    id: int
    name: str
    email: str


@dataclass(frozen=True, slots=True)
class Session:
    """
    Authentication context for one signed-in user.

    Passed explicitly to every authenticated catalog call. Expiry is
    enforced server-side; a 401/403 means the session is no longer valid.
    """

    token: str
    user: User

    @property
    def auth_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}
