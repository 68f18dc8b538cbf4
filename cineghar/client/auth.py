"""Auth endpoint wrappers."""

from __future__ import annotations

from typing import Any, NamedTuple

from cineghar.client import endpoints
from cineghar.client.http import ApiClient, ApiError

# (filename, content, content type)
ImageFile = tuple[str, bytes, str]


class LoginResult(NamedTuple):
    user: dict[str, Any]
    token: str
    message: str | None


def _profile_form(
    name: str | None, email: str | None, date_of_birth: str | None
) -> dict[str, str]:
    fields = {"name": name, "email": email, "dateOfBirth": date_of_birth}
    return {k: v for k, v in fields.items() if v is not None}


class AuthApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def register(
        self, name: str, email: str, password: str, date_of_birth: str | None = None
    ) -> dict[str, Any]:
        return self.client.post(
            endpoints.REGISTER,
            json={
                "name": name,
                "email": email,
                "password": password,
                "confirmPassword": password,
                "dateOfBirth": date_of_birth,
            },
        )

    def login(self, email: str, password: str, remember_me: bool = False) -> LoginResult:
        body = self.client.post(
            endpoints.LOGIN,
            json={"email": email, "password": password, "rememberMe": remember_me},
        )
        if not body.get("token"):
            raise ApiError("Token missing in response")
        return LoginResult(user=body["data"], token=body["token"], message=body.get("message"))

    def logout(self) -> dict[str, Any]:
        return self.client.post(endpoints.LOGOUT)

    def whoami(self) -> dict[str, Any]:
        return self.client.get(endpoints.WHOAMI)

    def update_profile(
        self,
        name: str | None = None,
        email: str | None = None,
        date_of_birth: str | None = None,
        image: ImageFile | None = None,
    ) -> dict[str, Any]:
        return self.client.put(
            endpoints.UPDATE_PROFILE,
            data=_profile_form(name, email, date_of_birth),
            files={"image": image} if image else {},
        )

    def update_user_by_id(
        self,
        user_id: int,
        name: str | None = None,
        email: str | None = None,
        date_of_birth: str | None = None,
        image: ImageFile | None = None,
    ) -> dict[str, Any]:
        return self.client.put(
            endpoints.update_user_by_id(user_id),
            data=_profile_form(name, email, date_of_birth),
            files={"image": image} if image else {},
        )

    def forgot_password(self, email: str) -> dict[str, Any]:
        return self.client.post(endpoints.FORGOT_PASSWORD, json={"email": email})

    def reset_password(self, token: str, password: str, confirm_password: str) -> dict[str, Any]:
        return self.client.post(
            endpoints.RESET_PASSWORD,
            json={"token": token, "password": password, "confirmPassword": confirm_password},
        )
