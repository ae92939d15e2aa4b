from babaclub.api.base import Resource
from babaclub.schemas.category import Categoria


class CategoryApi(Resource[Categoria]):
    path = "/categorias"
    model = Categoria
    unwrap = True
    fallbacks = {
        "list": "Erro ao listar categorias.",
        "get": "Erro ao obter categoria.",
        "create": "Erro ao criar categoria.",
        "update": "Erro ao atualizar categoria.",
        "delete": "Erro ao deletar categoria.",
    }
