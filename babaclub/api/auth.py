from __future__ import annotations

from babaclub.api.base import Payload, as_payload
from babaclub.api.http import ApiClient, parse_as
from babaclub.schemas.auth import AuthResponse


class AuthApi:
    def __init__(self, http: ApiClient) -> None:
        self.http = http

    async def login(self, data: Payload) -> AuthResponse:
        body = await self.http.post("/auth/login", json=as_payload(data), fallback="Erro ao fazer login.")
        return parse_as(AuthResponse, body)

    async def signup(self, data: Payload) -> AuthResponse:
        body = await self.http.post("/auth/signup", json=as_payload(data), fallback="Erro ao cadastrar usuário.")
        return parse_as(AuthResponse, body)

    async def signup_first_user(self, data: Payload) -> AuthResponse:
        body = await self.http.post(
            "/auth/signup-primeiro-usuario",
            json=as_payload(data),
            fallback="Erro ao criar associação e usuário.",
        )
        return parse_as(AuthResponse, body)
