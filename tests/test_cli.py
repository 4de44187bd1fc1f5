"""
Testes dos comandos da CLI
"""
import json

from typer.testing import CliRunner

from licita_extract.cli import app
from licita_extract.registry import RegistryExtractor, save_registry_json

runner = CliRunner()


def _txt_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("processing:\n  supported_extensions: [\".txt\"]\n", encoding="utf-8")
    return path


def _registry_json(tmp_path, sicaf_text):
    return save_registry_json([RegistryExtractor().extract(sicaf_text)], tmp_path / "sicaf")


def test_extract_directory(tmp_path, individual_text, grouped_text):
    """Diretório de .txt gera Markdown, JSON consolidado e resumo"""
    input_dir = tmp_path / "entrada"
    input_dir.mkdir()
    (input_dir / "individual.txt").write_text(individual_text, encoding="utf-8")
    (input_dir / "grupo.txt").write_text(grouped_text, encoding="utf-8")
    out = tmp_path / "saida"

    result = runner.invoke(app, ["extract", str(input_dir), "-o", str(out), "-c", str(_txt_config(tmp_path))])

    assert result.exit_code == 0, result.output
    assert (out / "individual.md").exists()
    assert (out / "grupo.md").exists()
    resumo = json.loads((out / "resumo_geral.json").read_text(encoding="utf-8"))
    assert resumo["total_documentos"] == 2
    assert resumo["total_propostas"] == 3


def test_extract_single_file(tmp_path, grouped_text):
    document = tmp_path / "grupo.txt"
    document.write_text(grouped_text, encoding="utf-8")
    out = tmp_path / "saida"

    result = runner.invoke(app, ["extract", str(document), "-o", str(out), "-c", str(_txt_config(tmp_path))])

    assert result.exit_code == 0, result.output
    assert (out / "licitacao_160001-90012_2024-64000.json").exists()


def test_extract_missing_directory(tmp_path):
    result = runner.invoke(app, ["extract", str(tmp_path / "nao_existe"), "-o", str(tmp_path / "saida")])

    assert result.exit_code == 1
    assert "Erro" in result.output


def test_extract_invalid_config(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("processing:\n  field_recovery: nearest\n", encoding="utf-8")

    result = runner.invoke(app, ["extract", str(tmp_path), "-c", str(config)])

    assert result.exit_code == 1
    assert "field_recovery" in result.output


def test_sicaf(tmp_path, sicaf_text):
    sicaf_dir = tmp_path / "sicaf"
    sicaf_dir.mkdir()
    (sicaf_dir / "alfa.txt").write_text(sicaf_text, encoding="utf-8")
    out = tmp_path / "saida"

    result = runner.invoke(app, ["sicaf", str(sicaf_dir), "-o", str(out), "-c", str(_txt_config(tmp_path))])

    assert result.exit_code == 0, result.output
    data = json.loads((out / "sicaf_dados.json").read_text(encoding="utf-8"))
    assert data["total_registros"] == 1


def test_verify(tmp_path, sicaf_text):
    registry = _registry_json(tmp_path, sicaf_text)

    found = runner.invoke(app, ["verify", "12.345.678/0001-90", str(registry)])
    missing = runner.invoke(app, ["verify", "11111111000111", str(registry)])

    assert found.exit_code == 0
    assert "EMPRESA TESTE LTDA" in found.output
    assert missing.exit_code == 0
    assert "não encontrado" in missing.output


def test_compare_missing_tender_file(tmp_path, sicaf_text):
    registry = _registry_json(tmp_path, sicaf_text)

    result = runner.invoke(app, ["compare", str(tmp_path / "nao_existe.json"), str(registry), "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert "Erro" in result.output


def test_info(tmp_path, sicaf_text):
    registry = _registry_json(tmp_path, sicaf_text)

    result = runner.invoke(app, ["info", str(registry)])

    assert result.exit_code == 0
    assert "file_size" in result.output
