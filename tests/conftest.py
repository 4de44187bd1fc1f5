"""
Textos sintéticos de termos de homologação e certificados SICAF usados nos testes
"""
import pytest

from licita_extract.schema import ProcessingConfig

HEADER = """MINISTÉRIO DA EDUCAÇÃO
UASG 160001
Termo de Homologação do Pregão Eletrônico
PREGÃO 90012/2024
Processo nº 64000
Às 14:30 horas do dia 15 de março do ano de 2024, após constatada a regularidade dos atos.
O ordenador de despesas HOMOLOGA a adjudicação referente ao Pregão. Responsável: ANA PAULA COSTA, Ordenadora de Despesas.
"""

INDIVIDUAL_BODY = """Item 1 - Caneta esferográfica azul
Quantidade: 100 Valor estimado: R$ 250,00
Adjudicado e Homologado por CPF ***.111.222-** - JOSE LIMA para PAPELARIA BETA LTDA, CNPJ 11.111.111/0001-11, melhor lance: R$ 200,00
Proposta adjudicada
Marca/Fabricante: BIC
Modelo/versão: Cristal
Item 2 - Papel A4
Quantidade: 50 Valor estimado: R$ 1.500,00
Adjudicado e Homologado por CPF ***.111.222-** - JOSE LIMA para COMERCIAL GAMA SA, CNPJ 22.222.222/0001-22, melhor lance: R$ 1.400,00, valor negociado: R$ 1.350,00
Proposta adjudicada
Marca/Fabricante: Chamex
Modelo/versão: Office
"""

GROUPED_BODY = """Item 1 do Grupo G2 - Cadeira giratória
Quantidade: 10 Valor estimado: R$ 1.200,00
Situação: Adjudicado e Homologado
Adjudicação e Homologação
Adjudicado e Homologado por CPF ***.456.789-** - MARIA SOUZA para EMPRESA ALFA LTDA, CNPJ 12.345.678/0001-90, melhor lance: R$ 1.000,00
"""

SICAF_TEXT = """
    CNPJ: 12.345.678/0001-90
    DUNS®: 123456789
    Razão Social: EMPRESA TESTE LTDA
    Nome Fantasia: TESTE LTDA
    Situação do Fornecedor: HABILITADO
    Data de Vencimento do Cadastro: 31/12/2024
    Dados do Nível 1 - Credenciamento
    Dados para Contato
    CEP: 01234-567
    Endereço: RUA TESTE, 123 - CENTRO
    Município / UF: SÃO PAULO / SP
    Telefone: (11) 1234-5678
    E-mail: teste@empresa.com.br
    Dados do Responsável Legal
    CPF: 123.456.789-00
    Nome: JOÃO DA SILVA
    Dados do Responsável pelo Cadastro
"""


@pytest.fixture
def individual_text():
    return HEADER + INDIVIDUAL_BODY


@pytest.fixture
def grouped_text():
    return HEADER + GROUPED_BODY


@pytest.fixture
def sicaf_text():
    return SICAF_TEXT


@pytest.fixture
def txt_config():
    """Configuração que lê .txt, sem depender de PDFs"""
    return ProcessingConfig(supported_extensions=[".txt"])


@pytest.fixture
def individual_body():
    return INDIVIDUAL_BODY


@pytest.fixture
def grouped_body():
    return GROUPED_BODY
