"""
Testes da consolidação por licitação
"""
import json

import pytest

from licita_extract.consolidate import Consolidator
from licita_extract.schema import ConsolidatedAward, LayoutType


def _award(uasg="160001", pregao="90012/2024", processo="64000", item="1", valor="1.000,00", cnpj="11.111.111/0001-11"):
    return ConsolidatedAward(
        uasg=uasg, pregao=pregao, processo=processo, item=item,
        valor_adjudicado=valor, fornecedor="FORNECEDOR LTDA", cnpj=cnpj,
    )


def _awards():
    first_document = [_award(item=str(i)) for i in range(1, 4)]
    second_document = [_award(item=str(i), valor="500,00") for i in range(4, 6)]
    return first_document + second_document


def test_same_key_from_two_documents():
    """3 + 2 propostas com a mesma chave formam uma licitação"""
    groups = Consolidator().group(_awards())

    assert len(groups) == 1
    assert groups[0].total_propostas == 5
    assert groups[0].valor_total == 4000.0
    assert [p.item for p in groups[0].propostas] == ["1", "2", "3", "4", "5"]


def test_grouping_is_order_independent():
    """Valores sem representação binária exata somam igual em qualquer ordem"""
    awards = [_award(item=str(i), valor=v) for i, v in enumerate(["0,10", "0,20", "0,30"], 1)]

    forward = Consolidator().group(awards)
    backward = Consolidator().group(list(reversed(awards)))

    assert forward[0].total_propostas == backward[0].total_propostas == 3
    assert forward[0].valor_total == backward[0].valor_total == 0.6


def test_summary_total_is_order_independent(tmp_path):
    awards = [_award(uasg=str(i), valor=v) for i, v in enumerate(["0,10", "0,20", "0,30"], 1)]
    consolidator = Consolidator()

    forward = consolidator.save(consolidator.group(awards), tmp_path / "a")
    backward = consolidator.save(consolidator.group(list(reversed(awards))), tmp_path / "b")

    totals = [json.loads(p.read_text(encoding="utf-8"))["valor_total_geral"] for p in (forward, backward)]
    assert totals == [0.6, 0.6]


def test_groups_sorted_by_key():
    awards = [_award(uasg="200000"), _award(uasg="100000"), _award(uasg="200000", item="2")]
    groups = Consolidator().group(awards)

    assert [g.uasg for g in groups] == ["100000", "200000"]
    assert groups[1].total_propostas == 2


def test_finalized_group_rejects_new_awards():
    group = Consolidator().group([_award()])[0]

    assert group.finalized
    with pytest.raises(RuntimeError):
        group.add(_award())


def test_save(tmp_path):
    consolidator = Consolidator()
    groups = consolidator.group(_awards() + [_award(uasg="999999", valor="10,00")])

    resumo_path = consolidator.save(groups, tmp_path, total_documentos=3)

    resumo = json.loads(resumo_path.read_text(encoding="utf-8"))
    assert resumo_path.name == "resumo_geral.json"
    assert resumo["total_licitacoes"] == 2
    assert resumo["total_documentos"] == 3
    assert resumo["total_propostas"] == 6
    assert resumo["valor_total_geral"] == 4010.0
    assert resumo["arquivos_gerados"] == [
        "licitacao_160001-90012_2024-64000.json",
        "licitacao_999999-90012_2024-64000.json",
    ]
    assert resumo["data_geracao"].endswith(" UTC")

    licitacao = json.loads((tmp_path / "licitacao_160001-90012_2024-64000.json").read_text(encoding="utf-8"))
    assert list(licitacao) == [
        "data_geracao", "uasg", "pregao", "processo", "total_propostas", "valor_total", "propostas",
    ]
    assert licitacao["total_propostas"] == 5
    assert licitacao["propostas"][0]["tipo_formato"] == LayoutType.INDIVIDUAL.value
    assert licitacao["propostas"][0]["grupo"] is None


def test_file_name_replaces_spaces_and_slashes():
    group = Consolidator().group([_award(pregao="10/2024", processo="23000 01")])[0]
    assert group.file_name == "licitacao_160001-10_2024-23000_01.json"
