import pytest

from gestao_merenda.listagem import Paginacao


def test_fatia_da_pagina():
    paginacao = Paginacao(pagina=1, linhas_por_pagina=10)
    assert paginacao.fatiar(list(range(25))) == list(range(10, 20))


def test_resumo_da_ultima_pagina():
    paginacao = Paginacao(pagina=2, linhas_por_pagina=10)
    assert paginacao.resumo(25) == (21, 25, 25)
    assert paginacao.texto_resumo(25, 'escolas') == 'Mostrando 21-25 de 25 escolas'


def test_resumo_sem_registros():
    assert Paginacao().resumo(0) == (0, 0, 0)
    assert Paginacao().total_paginas(0) == 0


def test_trocar_linhas_volta_para_primeira_pagina():
    paginacao = Paginacao(pagina=3, linhas_por_pagina=5)
    paginacao.mudar_linhas_por_pagina(25)
    assert paginacao.pagina == 0
    assert paginacao.total_paginas(26) == 2


def test_linhas_invalidas():
    with pytest.raises(ValueError):
        Paginacao().mudar_linhas_por_pagina(0)


def test_navegacao():
    paginacao = Paginacao(pagina=0, linhas_por_pagina=10)
    assert not paginacao.tem_anterior()
    assert paginacao.tem_proxima(11)
    paginacao.ir_para(1)
    assert paginacao.tem_anterior()
    assert not paginacao.tem_proxima(11)
