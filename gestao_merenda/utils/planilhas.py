"""
Planilhas Excel
===============

Geração de planilhas (exportação e modelos de importação com listas
suspensas) e leitura de planilhas enviadas, com esquema fixo de colunas por
entidade.
"""

from dataclasses import dataclass
from io import BytesIO
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from zipfile import BadZipFile

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.datavalidation import DataValidation

from ..erros import ErroValidacao
from ..listagem.filtros import normalizar_texto

MIMETYPE_XLSX = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
LINHAS_COM_VALIDACAO = 1000

# .xlsx é um arquivo ZIP
ASSINATURA_XLSX = b'PK\x03\x04'

SIM_NAO = ['Sim', 'Não']


@dataclass
class ColunaPlanilha:
    cabecalho: str
    campo: str
    obrigatoria: bool = False
    opcoes: Optional[Sequence[str]] = None
    exemplo: Any = None
    largura: Optional[int] = None
    exportar: Optional[Callable[[Any], Any]] = None
    importar: Optional[Callable[[Any], Any]] = None


def booleano_para_texto(valor: Any) -> str:
    return 'Sim' if valor else 'Não'


def texto_para_booleano(valor: Any) -> bool:
    if valor is None:
        return True
    if isinstance(valor, bool):
        return valor
    return normalizar_texto(valor) in ('sim', 's', 'true', '1', 'ativo', 'x')


def como_texto(valor: Any) -> str:
    """Códigos digitados como número no Excel (CNPJ, código INEP) voltam a ser texto."""
    if isinstance(valor, float) and valor.is_integer():
        valor = int(valor)
    return str(valor)


def coluna_ativo() -> ColunaPlanilha:
    return ColunaPlanilha(
        'ATIVO', 'ativo', opcoes=SIM_NAO, exemplo='Sim',
        exportar=booleano_para_texto, importar=texto_para_booleano,
    )


def _estilizar_cabecalho(ws, total_colunas: int) -> None:
    fonte = Font(bold=True, color="FFFFFF")
    preenchimento = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    alinhamento = Alignment(horizontal="center", vertical="center")
    for coluna in range(1, total_colunas + 1):
        celula = ws.cell(row=1, column=coluna)
        celula.font = fonte
        celula.fill = preenchimento
        celula.alignment = alinhamento


def gerar_planilha(
    colunas: Sequence[ColunaPlanilha],
    linhas: Iterable[Dict[str, Any]],
    nome_aba: str = 'Dados',
) -> BytesIO:
    """Planilha em memória com cabeçalho estilizado e listas suspensas."""
    valores = []
    for linha in linhas:
        registro = []
        for coluna in colunas:
            valor = linha.get(coluna.campo)
            if coluna.exportar is not None:
                valor = coluna.exportar(valor)
            registro.append(valor)
        valores.append(registro)

    df = pd.DataFrame(valores, columns=[coluna.cabecalho for coluna in colunas])

    output = BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        df.to_excel(writer, index=False, sheet_name=nome_aba)
        ws = writer.sheets[nome_aba]
        _estilizar_cabecalho(ws, len(colunas))

        for indice, coluna in enumerate(colunas, 1):
            letra = get_column_letter(indice)
            ws.column_dimensions[letra].width = coluna.largura or max(14, len(coluna.cabecalho) + 4)
            if coluna.opcoes:
                validacao = DataValidation(
                    type='list',
                    formula1='"' + ','.join(coluna.opcoes) + '"',
                    allow_blank=not coluna.obrigatoria,
                )
                validacao.errorTitle = 'Valor inválido'
                validacao.error = f"Escolha um valor da lista para {coluna.cabecalho}."
                ws.add_data_validation(validacao)
                validacao.add(f"{letra}2:{letra}{LINHAS_COM_VALIDACAO}")

    output.seek(0)
    return output


def gerar_modelo(colunas: Sequence[ColunaPlanilha], nome_aba: str = 'Modelo') -> BytesIO:
    """Modelo de importação com uma linha de exemplo."""
    exemplo = {coluna.campo: coluna.exemplo for coluna in colunas}
    # A linha de exemplo já está no formato de planilha
    colunas_modelo = [
        ColunaPlanilha(c.cabecalho, c.campo, c.obrigatoria, c.opcoes, c.exemplo, c.largura)
        for c in colunas
    ]
    return gerar_planilha(colunas_modelo, [exemplo], nome_aba=nome_aba)


def _valor_celula(valor: Any) -> Any:
    if valor is None:
        return None
    try:
        if pd.isna(valor):
            return None
    except (TypeError, ValueError):
        pass
    if isinstance(valor, str):
        valor = valor.strip()
        return valor or None
    if hasattr(valor, 'to_pydatetime'):
        return valor.to_pydatetime().date()
    return valor


def ler_planilha(arquivo, colunas: Sequence[ColunaPlanilha]) -> List[Tuple[int, Dict[str, Any]]]:
    """
    Lê uma planilha .xlsx e devolve (número da linha, dados) por linha
    preenchida. Cabeçalhos são comparados sem acentos e sem caixa.
    """
    nome = getattr(arquivo, 'filename', None) or getattr(arquivo, 'name', '') or ''
    if not arquivo or not nome:
        raise ErroValidacao("Nenhum arquivo selecionado")
    if not str(nome).lower().endswith('.xlsx'):
        raise ErroValidacao("Arquivo deve ser .xlsx")

    cabecalho = arquivo.read(len(ASSINATURA_XLSX))
    arquivo.seek(0)
    if not cabecalho.startswith(ASSINATURA_XLSX):
        raise ErroValidacao("Arquivo não é um Excel válido")

    try:
        df = pd.read_excel(arquivo, dtype=object)
    except (ValueError, OSError, KeyError, BadZipFile, InvalidFileException) as exc:
        raise ErroValidacao(f"Não foi possível ler a planilha: {exc}")

    cabecalhos = {normalizar_texto(col): col for col in df.columns}
    faltando = [
        c.cabecalho for c in colunas
        if c.obrigatoria and normalizar_texto(c.cabecalho) not in cabecalhos
    ]
    if faltando:
        raise ErroValidacao(f"Colunas necessárias: {', '.join(faltando)}")

    linhas = []
    for index, row in df.iterrows():
        dados = {}
        for coluna in colunas:
            original = cabecalhos.get(normalizar_texto(coluna.cabecalho))
            valor = _valor_celula(row[original]) if original is not None else None
            if coluna.importar is not None and valor is not None:
                valor = coluna.importar(valor)
            dados[coluna.campo] = valor
        # Pular linhas vazias
        if all(valor is None for valor in dados.values()):
            continue
        linhas.append((index + 2, dados))
    return linhas
