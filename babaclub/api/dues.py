from __future__ import annotations

from typing import Any, List

from babaclub.api.base import Payload, as_payload
from babaclub.api.http import ApiClient, parse_as
from babaclub.schemas.dues import DuesConfig, Mensalidade

BASE = "/financeiro/mensalidades"


class DuesApi:
    def __init__(self, http: ApiClient) -> None:
        self.http = http

    async def mine(self, ano: int) -> List[Mensalidade]:
        body = await self.http.get(f"{BASE}/me", params={"ano": ano}, fallback="Erro ao carregar mensalidades")
        return parse_as(List[Mensalidade], body)

    async def of_member(self, usuario_id: int, ano: int) -> List[Mensalidade]:
        body = await self.http.get(
            f"{BASE}/usuario/{usuario_id}",
            params={"ano": ano},
            fallback="Erro ao carregar carnê do associado",
        )
        return parse_as(List[Mensalidade], body)

    async def generate_year(self, ano: int) -> Any:
        return await self.http.post(f"{BASE}/gerar-ano", json={"ano": ano}, fallback="Erro ao gerar mensalidades")

    async def get_config(self) -> DuesConfig:
        body = await self.http.get(f"{BASE}/config", fallback="Configuração de mensalidade não encontrada")
        return parse_as(DuesConfig, body)

    async def upsert_config(self, payload: Payload) -> DuesConfig:
        body = await self.http.post(f"{BASE}/config", json=as_payload(payload), fallback="Erro ao salvar configuração")
        return parse_as(DuesConfig, body)

    async def pay(self, mensalidade_id: int, payload: Payload) -> Mensalidade:
        body = await self.http.put(
            f"{BASE}/{mensalidade_id}/pagar",
            json=as_payload(payload),
            fallback="Erro ao registrar pagamento",
        )
        return parse_as(Mensalidade, body)
