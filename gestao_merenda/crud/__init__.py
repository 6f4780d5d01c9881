"""
Camadas genéricas de cadastro: repositório, serviço e registro de páginas.
Cada entidade apenas declara modelo, schemas e configuração de tela.
"""
