"""
Interface de linha de comando
"""
import sys
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.panel import Panel

from . import service
from .config import DEFAULT_CONFIG_PATH, load_config
from .errors import LicitaError
from .schema import ConsolidatedAward, ProcessingResult
from .values import format_brl, sum_brl_values

app = typer.Typer(help="Extração de propostas adjudicadas de termos de homologação e cruzamento com o SICAF")
console = Console()
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _fail(error: LicitaError) -> None:
    console.print(f"[red]❌ Erro: {error.message}[/red]")
    if error.details:
        console.print(f"[red]   {error.details}[/red]")
    sys.exit(1)


@app.command()
def extract(
    input_path: str = typer.Argument(..., help="Arquivo ou diretório de termos de homologação"),
    out: str = typer.Option("./out", "--out", "-o", help="Diretório de saída"),
    config: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Arquivo de configuração"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log detalhado")
):
    """Extrai as propostas adjudicadas e gera Markdown e JSON consolidados"""
    path = Path(input_path)
    try:
        processing_config = load_config(config)
        _setup_logging(verbose or processing_config.verbose)

        if path.is_file():
            with console.status(f"Processando {path.name}..."):
                result = service.process_document(path, out, processing_config)
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                console=console
            ) as progress:
                task = progress.add_task("Processando documentos...", total=None)

                def on_progress(processed: int, total: int, current: Optional[str]) -> None:
                    description = f"Processando {Path(current).name}" if current else "Concluído"
                    progress.update(task, completed=processed, total=total, description=description)

                result = service.process_directory(path, out, on_progress, processing_config)
    except LicitaError as e:
        _fail(e)
        return

    _display_results_summary(result)


@app.command()
def sicaf(
    registry_dir: str = typer.Argument(..., help="Diretório com certificados SICAF"),
    out: str = typer.Option("./out", "--out", "-o", help="Diretório de saída"),
    config: str = typer.Option(DEFAULT_CONFIG_PATH, "--config", "-c", help="Arquivo de configuração"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log detalhado")
):
    """Extrai os certificados SICAF e grava sicaf_dados.json"""
    try:
        processing_config = load_config(config)
        _setup_logging(verbose or processing_config.verbose)

        result = service.extract_registry_directory(registry_dir, processing_config)
        console.print(f"[green]{result.message}[/green]")
        for error in result.errors:
            console.print(f"[red]❌ {error}[/red]")
        if not result.sicaf_data:
            return
        json_path = service.save_registry(result.sicaf_data, out, processing_config)
    except LicitaError as e:
        _fail(e)
        return

    table = Table(title="Registros SICAF")
    table.add_column("CNPJ", style="cyan")
    table.add_column("Empresa", style="magenta")
    table.add_column("Situação", style="green")
    table.add_column("Vencimento", style="yellow")
    for record in result.sicaf_data:
        table.add_row(record.cnpj, record.empresa, record.situacao_cadastro or "-", record.data_vencimento or "-")
    console.print(table)
    console.print(f"[green]💾 Dados SICAF salvos: {json_path}[/green]")


@app.command()
def verify(
    cnpj: str = typer.Argument(..., help="CNPJ, com ou sem formatação"),
    sicaf_json: str = typer.Argument(..., help="Arquivo sicaf_dados.json")
):
    """Verifica se um CNPJ consta nos dados SICAF"""
    _setup_logging(False)

    try:
        record = service.lookup_cnpj(cnpj, sicaf_json)
    except LicitaError as e:
        _fail(e)
        return

    if record is None:
        console.print(f"[yellow]⚠️  CNPJ {cnpj} não encontrado no SICAF[/yellow]")
        return

    console.print(Panel.fit(
        f"[bold]{record.empresa}[/bold]\n"
        f"CNPJ: {record.cnpj}\n"
        f"Situação: {record.situacao_cadastro or '-'}\n"
        f"Vencimento do cadastro: {record.data_vencimento or '-'}\n"
        f"Município/UF: {record.municipio or '-'}/{record.uf or '-'}\n"
        f"Responsável legal: {record.nome_responsavel or '-'}",
        title="✅ SICAF Encontrado"
    ))


@app.command()
def compare(
    tender_json: str = typer.Argument(..., help="Arquivo licitacao_*.json"),
    sicaf_json: str = typer.Argument(..., help="Arquivo sicaf_dados.json"),
    out: str = typer.Option("./out", "--out", "-o", help="Diretório de saída")
):
    """Gera o relatório de comparação entre a licitação e o SICAF"""
    _setup_logging(False)

    try:
        report_path = service.generate_comparison_report(tender_json, sicaf_json, out)
        report = service.read_json_file(report_path)
    except LicitaError as e:
        _fail(e)
        return

    console.print(Panel.fit(
        f"[bold]Comparação concluída[/bold]\n"
        f"Propostas: {report['total_propostas']}\n"
        f"SICAF encontrados: {report['sicaf_encontrados']}\n"
        f"SICAF não encontrados: {report['sicaf_nao_encontrados']}",
        title="Licitação x SICAF"
    ))
    console.print(f"[green]💾 Relatório salvo: {report_path}[/green]")


@app.command()
def info(
    json_file: str = typer.Argument(..., help="Arquivo JSON gerado")
):
    """Mostra informações de um arquivo JSON gerado"""
    try:
        details = service.json_file_info(json_file)
    except LicitaError as e:
        _fail(e)
        return

    table = Table(title=details["file_name"])
    table.add_column("Campo", style="cyan")
    table.add_column("Valor", style="magenta")
    for key, value in details.items():
        table.add_row(key, str(value))
    console.print(table)


def _display_results_summary(result: ProcessingResult):
    """Mostra o resumo do processamento"""
    propostas: List[ConsolidatedAward] = result.propostas
    valor_total = sum_brl_values(p.valor_adjudicado for p in propostas)

    console.print(Panel.fit(
        f"[bold]Processamento concluído![/bold]\n"
        f"Documentos: {result.total_processed}\n"
        f"Propostas: {len(propostas)}\n"
        f"Valor total: R$ {format_brl(valor_total)}\n"
        f"Falhas: {len(result.errors)}",
        title="Resumo"
    ))

    for error in result.errors:
        console.print(f"[red]❌ {error}[/red]")

    if propostas:
        table = Table(title="Propostas adjudicadas")
        table.add_column("UASG", style="cyan")
        table.add_column("Pregão", style="cyan")
        table.add_column("Item", style="magenta")
        table.add_column("Fornecedor", style="green")
        table.add_column("CNPJ", style="green")
        table.add_column("Valor", style="yellow")

        for p in propostas[:20]:
            item = f"{p.item} ({p.grupo})" if p.grupo else p.item
            table.add_row(p.uasg, p.pregao, item, p.fornecedor, p.cnpj, f"R$ {p.valor_adjudicado}")
        console.print(table)

    if result.json_file_path:
        console.print(f"[green]💾 Resumo geral salvo: {result.json_file_path}[/green]")


if __name__ == "__main__":
    app()
