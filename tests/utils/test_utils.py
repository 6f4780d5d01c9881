from datetime import date, datetime

import pandas as pd
import pytest

from gestao_merenda.utils.formatacao import formatar_data, formatar_moeda, formatar_numero
from gestao_merenda.utils.planilhas import (
    ColunaPlanilha,
    coluna_ativo,
    como_texto,
    gerar_modelo,
    texto_para_booleano,
)
from gestao_merenda.utils.precos import PrecoInvalidoError, normalizar_opcional, normalizar_preco_brl


@pytest.mark.parametrize('entrada, esperado', [
    ('R$ 1.234,56', 1234.56),
    ('2,5', 2.5),
    ('1234.50', 1234.5),
    (10, 10.0),
    (' 0,99 ', 0.99),
])
def test_normalizar_preco_brl(entrada, esperado):
    assert normalizar_preco_brl(entrada) == pytest.approx(esperado)


def test_preco_invalido():
    with pytest.raises(PrecoInvalidoError):
        normalizar_preco_brl('abc')
    with pytest.raises(PrecoInvalidoError):
        normalizar_preco_brl(None)
    assert normalizar_opcional('  ') is None


def test_formatacao_brasileira():
    assert formatar_moeda(250) == 'R$ 250,00'
    assert formatar_moeda(1234567.891) == 'R$ 1.234.567,89'
    assert formatar_moeda(-3.5) == '-R$ 3,50'
    assert formatar_moeda(None) == 'R$ 0,00'
    assert formatar_numero(1.5, casas=3) == '1,500'
    assert formatar_data('2026-10-17') == '17/10/2026'
    assert formatar_data(datetime(2026, 1, 2, 15, 30)) == '02/01/2026'
    assert formatar_data(None) == ''


def test_como_texto_recupera_codigos_numericos():
    assert como_texto(12345678000190.0) == '12345678000190'
    assert como_texto(15012345) == '15012345'
    assert como_texto('000123') == '000123'


@pytest.mark.parametrize('valor, esperado', [('Sim', True), ('não', False), ('X', True), (None, True), (False, False)])
def test_texto_para_booleano(valor, esperado):
    assert texto_para_booleano(valor) is esperado


def test_modelo_traz_linha_de_exemplo():
    colunas = (
        ColunaPlanilha('NOME', 'nome', obrigatoria=True, exemplo='EMEF Exemplo'),
        ColunaPlanilha('INÍCIO', 'data_inicio', exemplo=date(2026, 2, 1)),
        coluna_ativo(),
    )

    df = pd.read_excel(gerar_modelo(colunas), dtype=object)

    assert list(df.columns) == ['NOME', 'INÍCIO', 'ATIVO']
    assert df.iloc[0]['NOME'] == 'EMEF Exemplo'
    assert df.iloc[0]['ATIVO'] == 'Sim'
