"""Cliente da API da associação de baba (membros, jogos, estoque, vendas e mensalidades)."""

__version__ = "0.3.0"
