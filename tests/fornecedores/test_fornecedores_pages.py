from gestao_merenda.models import Fornecedor


def _cadastrar(db, quantidade):
    fornecedores = [
        Fornecedor(nome=f'Fornecedor {numero:02d}', cnpj=f'{numero:014d}')
        for numero in range(1, quantidade + 1)
    ]
    db.session.add_all(fornecedores)
    db.session.commit()
    return fornecedores


def test_excluir_unico_registro_da_ultima_pagina(cliente_gestor, db):
    fornecedores = _cadastrar(db, 11)

    resposta = cliente_gestor.post(f'/fornecedores/{fornecedores[-1].id}/excluir', data={'retorno': 'pagina=1'})
    assert resposta.status_code == 302
    assert 'pagina=1' in resposta.headers['Location']

    html = cliente_gestor.get(resposta.headers['Location']).get_data(as_text=True)
    assert 'Mostrando 1-10 de 10 fornecedores' in html
    assert 'Fornecedor 10' in html


def test_pagina_inexistente_mostra_ultima_pagina(cliente_gestor, db):
    _cadastrar(db, 12)

    html = cliente_gestor.get('/fornecedores/?pagina=7').get_data(as_text=True)

    assert 'Mostrando 11-12 de 12 fornecedores' in html


def test_linhas_por_pagina_fora_das_opcoes(cliente_gestor, db):
    _cadastrar(db, 12)

    html = cliente_gestor.get('/fornecedores/?linhas=3').get_data(as_text=True)

    assert 'Mostrando 1-10 de 12 fornecedores' in html
