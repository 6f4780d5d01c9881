from datetime import date
from io import BytesIO

import pandas as pd
import pytest

from gestao_merenda.erros import DependenciasEncontradas, ErroValidacao
from gestao_merenda.fornecedores.services import FornecedorService, formatar_cnpj
from gestao_merenda.models import Contrato, ContratoProduto, Fornecedor, Produto


@pytest.fixture
def servico(app):
    return FornecedorService()


def _planilha(linhas, nome='fornecedores.xlsx'):
    arquivo = BytesIO()
    pd.DataFrame(linhas).to_excel(arquivo, index=False)
    arquivo.seek(0)
    arquivo.name = nome
    return arquivo


def test_formatar_cnpj():
    assert formatar_cnpj('12345678000190') == '12.345.678/0001-90'
    assert formatar_cnpj('123') == '123'
    assert formatar_cnpj(None) == ''


def test_criar_guarda_somente_digitos(servico):
    fornecedor = servico.criar({'nome': 'Alfa Ltda', 'cnpj': '12.345.678/0001-90', 'email': ''})

    assert fornecedor['cnpj'] == '12345678000190'
    assert fornecedor['cnpj_formatado'] == '12.345.678/0001-90'
    assert fornecedor['email'] is None
    assert fornecedor['ativo'] is True


@pytest.mark.parametrize('payload, mensagem', [
    ({'nome': 'Alfa', 'cnpj': '123'}, 'CNPJ deve ter 14 dígitos'),
    ({'nome': '  ', 'cnpj': '12345678000190'}, 'campo obrigatório'),
    ({'nome': 'Alfa', 'cnpj': '12345678000190', 'email': 'sem-arroba'}, 'E-mail inválido'),
])
def test_validacoes(servico, payload, mensagem):
    with pytest.raises(ErroValidacao, match=mensagem):
        servico.criar(payload)


def test_cnpj_duplicado(servico):
    servico.criar({'nome': 'Alfa Ltda', 'cnpj': '12345678000190'})
    with pytest.raises(ErroValidacao, match='Já existe um fornecedor com o CNPJ 12.345.678/0001-90'):
        servico.criar({'nome': 'Outro', 'cnpj': '12.345.678/0001-90'})


def test_editar_o_proprio_cnpj_nao_e_duplicidade(servico):
    fornecedor = servico.criar({'nome': 'Alfa Ltda', 'cnpj': '12345678000190'})
    editado = servico.editar(fornecedor['id'], {'nome': 'Alfa Alimentos Ltda'})
    assert editado['nome'] == 'Alfa Alimentos Ltda'


def test_exclusao_forcada_remove_contratos_e_itens(servico, db):
    fornecedor = Fornecedor(nome='Alfa Ltda', cnpj='12345678000190')
    produto = Produto(nome='Arroz')
    db.session.add_all([fornecedor, produto])
    db.session.flush()
    contrato = Contrato(fornecedor_id=fornecedor.id, numero='001/2026',
                        data_inicio=date(2026, 1, 1), data_fim=date(2026, 12, 31))
    contrato.itens.append(ContratoProduto(produto_id=produto.id, quantidade_contratada=1, preco_unitario=1))
    db.session.add(contrato)
    db.session.commit()

    with pytest.raises(DependenciasEncontradas) as erro:
        servico.remover(fornecedor.id)
    assert erro.value.status == 409
    assert erro.value.dependencias == {'contratos': 1}

    servico.remover(fornecedor.id, forcar=True)

    assert db.session.query(Fornecedor).count() == 0
    assert db.session.query(Contrato).count() == 0
    assert db.session.query(ContratoProduto).count() == 0
    assert db.session.query(Produto).count() == 1


def test_importar_planilha_relata_linhas_com_erro(servico, db):
    arquivo = _planilha([
        {'NOME': 'Alfa Ltda', 'CNPJ': '12.345.678/0001-90', 'EMAIL': 'contato@alfa.com.br', 'ATIVO': 'Sim'},
        {'NOME': 'Beta ME', 'CNPJ': '999', 'EMAIL': None, 'ATIVO': 'Não'},
        {'NOME': 'Gama SA', 'CNPJ': 98765432000110, 'EMAIL': None, 'ATIVO': 'Não'},
    ])

    resultado = servico.importar_lote(arquivo)

    assert resultado['sucesso'] == 2
    assert resultado['erros'] == [{'linha': 3, 'erro': 'cnpj: CNPJ deve ter 14 dígitos'}]
    gama = db.session.query(Fornecedor).filter_by(nome='Gama SA').one()
    assert gama.cnpj == '98765432000110'
    assert gama.ativo is False


def test_importar_sem_coluna_obrigatoria(servico):
    arquivo = _planilha([{'NOME': 'Alfa Ltda'}])
    with pytest.raises(ErroValidacao, match='Colunas necessárias: CNPJ'):
        servico.importar_lote(arquivo)


def test_importar_extensao_invalida(servico):
    arquivo = _planilha([{'NOME': 'Alfa', 'CNPJ': '12345678000190'}], nome='fornecedores.csv')
    with pytest.raises(ErroValidacao, match='Arquivo deve ser .xlsx'):
        servico.importar_lote(arquivo)


def test_exportar_gera_planilha_com_cabecalhos(servico):
    servico.criar({'nome': 'Alfa Ltda', 'cnpj': '12345678000190'})

    df = pd.read_excel(servico.exportar_excel(), dtype=object)

    assert list(df.columns) == ['NOME', 'CNPJ', 'EMAIL', 'ATIVO']
    assert df.iloc[0]['NOME'] == 'Alfa Ltda'
    assert df.iloc[0]['ATIVO'] == 'Sim'


def test_importar_arquivo_corrompido(servico):
    arquivo = BytesIO(b'PK\x03\x04' + b'lixo' * 50)
    arquivo.name = 'fornecedores.xlsx'
    with pytest.raises(ErroValidacao, match='Não foi possível ler a planilha'):
        servico.importar_lote(arquivo)


def test_importar_arquivo_que_nao_e_excel(servico):
    arquivo = BytesIO(b'NOME;CNPJ\nAlfa;12345678000190\n')
    arquivo.name = 'fornecedores.xlsx'
    with pytest.raises(ErroValidacao, match='Arquivo não é um Excel válido'):
        servico.importar_lote(arquivo)


def test_importar_arquivo_corrompido_pela_pagina(cliente_gestor):
    dados = {'arquivo': (BytesIO(b'PK\x03\x04' + b'lixo' * 50), 'fornecedores.xlsx')}

    resposta = cliente_gestor.post('/fornecedores/importar', data=dados, content_type='multipart/form-data')

    assert resposta.status_code == 302
    pagina = cliente_gestor.get('/fornecedores/')
    assert 'Não foi possível ler a planilha' in pagina.get_data(as_text=True)
