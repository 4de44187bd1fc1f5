"""
Testes do cruzamento por CNPJ
"""
import json

from licita_extract.matching import MatchingEngine, normalize_cnpj, save_comparison_report
from licita_extract.schema import ConsolidatedAward, RegistryRecord, STATUS_FOUND, STATUS_NOT_FOUND


def _registry():
    return [
        RegistryRecord(cnpj="12.345.678/0001-90", empresa="EMPRESA ALFA LTDA"),
        RegistryRecord(cnpj="22222222000122", empresa="COMERCIAL GAMA SA"),
        RegistryRecord(cnpj="12345678000190", empresa="REGISTRO DUPLICADO"),
    ]


def _award(item, cnpj, fornecedor="FORNECEDOR"):
    return ConsolidatedAward(
        uasg="160001", pregao="90012/2024", processo="64000", item=item,
        valor_adjudicado="100,00", fornecedor=fornecedor, cnpj=cnpj,
    )


def test_normalize_cnpj():
    assert normalize_cnpj("12.345.678/0001-90") == "12345678000190"
    assert normalize_cnpj(" 12 345 678 0001 90 ") == "12345678000190"
    assert normalize_cnpj("") == ""


def test_exists_ignores_formatting():
    engine = MatchingEngine(_registry())

    assert engine.exists("12.345.678/0001-90") == engine.exists("12345678000190")
    assert engine.exists("22.222.222/0001-22")
    assert not engine.exists("98.765.432/0001-10")
    assert not engine.exists("")


def test_lookup_returns_first_in_registry_order():
    record = MatchingEngine(_registry()).lookup("12345678000190")
    assert record.empresa == "EMPRESA ALFA LTDA"


def test_compare():
    """2 encontrados, 1 não encontrado, ordem das propostas mantida"""
    propostas = [
        _award("3", "98.765.432/0001-10"),
        _award("1", "12.345.678/0001-90"),
        _award("2", "22.222.222/0001-22"),
    ]

    report = MatchingEngine(_registry()).compare(propostas)

    assert report.total_propostas == 3
    assert report.sicaf_encontrados == 2
    assert report.sicaf_nao_encontrados == 1
    assert [e.proposta.item for e in report.relatorio] == ["3", "1", "2"]
    assert report.relatorio[0].status_sicaf == STATUS_NOT_FOUND
    assert report.relatorio[0].dados_sicaf is None
    assert report.relatorio[1].status_sicaf == STATUS_FOUND
    assert report.relatorio[1].dados_sicaf.empresa == "EMPRESA ALFA LTDA"


def test_compare_empty_registry():
    report = MatchingEngine([]).compare([_award("1", "12.345.678/0001-90")])

    assert report.sicaf_encontrados == 0
    assert report.sicaf_nao_encontrados == 1


def test_save_comparison_report(tmp_path):
    report = MatchingEngine(_registry()).compare([_award("1", "12.345.678/0001-90", "AÇÚCAR LTDA")])

    path = save_comparison_report(report, tmp_path)
    content = path.read_text(encoding="utf-8")
    data = json.loads(content)

    assert path.name == "relatorio_sicaf_comparacao.json"
    assert "SICAF Encontrado" in content
    assert "AÇÚCAR LTDA" in content
    assert data["relatorio"][0]["proposta"] == {
        "item": "1", "valor_adjudicado": "100,00", "uasg": "160001", "pregao": "90012/2024",
    }
