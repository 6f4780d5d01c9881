"""
Erros de serviço
================

Hierarquia única usada pelos serviços, pelas telas e pela API JSON. A carga
de erro segue o formato ``{message, dependencias?}`` consumido pelos diálogos.
"""

from typing import Any, Dict, Optional


class ErroServico(Exception):
    """Rejeição de regra de negócio com mensagem exibível ao usuário."""

    status = 400

    def __init__(self, mensagem: str, dependencias: Optional[Dict[str, int]] = None):
        super().__init__(mensagem)
        self.mensagem = mensagem
        self.dependencias = dependencias

    def to_dict(self) -> Dict[str, Any]:
        dados: Dict[str, Any] = {'success': False, 'message': self.mensagem}
        if self.dependencias is not None:
            dados['dependencias'] = self.dependencias
        return dados


class ErroValidacao(ErroServico):
    status = 400


class NaoEncontrado(ErroServico):
    status = 404


class DependenciasEncontradas(ErroServico):
    """O registro possui vínculos e só pode ser removido com exclusão forçada."""

    status = 409

    def __init__(self, mensagem: str, dependencias: Dict[str, int]):
        super().__init__(mensagem, dependencias=dependencias)


def mensagem_de_erro(exc: BaseException, padrao: str, nao_encontrado: Optional[str] = None) -> str:
    """
    Converte uma exceção em texto para o usuário.

    Mensagens de serviço são exibidas como vieram; 404 vira a mensagem amigável
    informada; falhas de banco ou inesperadas viram a mensagem padrão.
    """
    if isinstance(exc, NaoEncontrado):
        return nao_encontrado or exc.mensagem or padrao
    if isinstance(exc, ErroServico) and exc.mensagem:
        return exc.mensagem
    return padrao
