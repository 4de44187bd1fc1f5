"""
Testes do extrator de certificados SICAF
"""
import json

import pytest

from licita_extract.errors import InputNotFoundError, JsonParseError
from licita_extract.registry import (
    RegistryExtractor, extract_directory, load_registry_json, save_registry_json,
)


def test_extract_registry_record(sicaf_text):
    record = RegistryExtractor().extract(sicaf_text)

    assert record is not None
    assert record.cnpj == "12.345.678/0001-90"
    assert record.duns == "123456789"
    assert record.empresa == "EMPRESA TESTE LTDA"
    assert record.nome_fantasia == "TESTE LTDA"
    assert record.situacao_cadastro == "HABILITADO"
    assert record.data_vencimento == "31/12/2024"
    assert record.cep == "01234-567"
    assert record.endereco == "RUA TESTE, 123 - CENTRO"
    assert record.municipio == "SÃO PAULO"
    assert record.uf == "SP"
    assert record.telefone == "(11) 1234-5678"
    assert record.email == "teste@empresa.com.br"
    assert record.cpf_responsavel == "123.456.789-00"
    assert record.nome_responsavel == "JOÃO DA SILVA"


def test_legal_representative():
    text = """
        Dados do Responsável Legal
        CPF: 123.456.789-00
        Nome: JOÃO DA SILVA
        Dados do Responsável pelo Cadastro
    """
    assert RegistryExtractor.extract_legal_representative(text) == ("123.456.789-00", "JOÃO DA SILVA")


def test_legal_representative_at_end_of_text():
    text = "Dados do Responsável Legal CPF: 123.456.789-00 Nome: JOÃO DA SILVA"
    assert RegistryExtractor.extract_legal_representative(text) == ("123.456.789-00", "JOÃO DA SILVA")


def test_duns_is_optional(sicaf_text):
    record = RegistryExtractor().extract(sicaf_text.replace("DUNS®: 123456789\n", ""))

    assert record.duns is None
    assert record.empresa == "EMPRESA TESTE LTDA"


def test_empty_fantasy_name_becomes_none(sicaf_text):
    record = RegistryExtractor().extract(sicaf_text.replace("Nome Fantasia: TESTE LTDA", "Nome Fantasia:"))
    assert record.nome_fantasia is None


def test_not_a_registry_document():
    assert RegistryExtractor().extract("Termo de Homologação qualquer") is None


def test_extract_directory(tmp_path, sicaf_text):
    (tmp_path / "empresa.txt").write_text(sicaf_text, encoding="utf-8")
    (tmp_path / "outro.txt").write_text("sem dados", encoding="utf-8")
    (tmp_path / "quebrado.txt").write_bytes(b"\xff\xfe\xfa")

    records, errors = extract_directory(tmp_path, [".txt"])

    assert [r.cnpj for r in records] == ["12.345.678/0001-90"]
    assert len(errors) == 1
    assert "quebrado.txt" in errors[0]


def test_extract_missing_directory(tmp_path):
    with pytest.raises(InputNotFoundError):
        extract_directory(tmp_path / "nao_existe", [".txt"])


def test_save_and_load(tmp_path, sicaf_text):
    record = RegistryExtractor().extract(sicaf_text)

    path = save_registry_json([record], tmp_path)
    data = json.loads(path.read_text(encoding="utf-8"))

    assert path.name == "sicaf_dados.json"
    assert data["total_registros"] == 1
    assert data["registros_sicaf"][0]["municipio"] == "SÃO PAULO"
    assert load_registry_json(path) == [record]


def test_load_without_records_key(tmp_path):
    path = tmp_path / "sicaf_dados.json"
    path.write_text(json.dumps({"data_geracao": "x"}), encoding="utf-8")

    with pytest.raises(JsonParseError):
        load_registry_json(path)


def test_load_invalid_json(tmp_path):
    path = tmp_path / "sicaf_dados.json"
    path.write_text("{ invalido", encoding="utf-8")

    with pytest.raises(JsonParseError):
        load_registry_json(path)
