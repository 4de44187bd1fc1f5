"""
Processamento sequencial de um diretório de termos de homologação
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Union

from .errors import OutputWriteError
from .ingestion import TextExtractor, discover_documents, extract_text
from .report import TenderReportBuilder
from .rules import AwardExtractor
from .schema import ConsolidatedAward, ProcessingConfig

logger = logging.getLogger(__name__)

# (processados, total, documento atual ou None após concluir)
ProgressCallback = Callable[[int, int, Optional[str]], None]


@dataclass
class BatchContext:
    """Estado de uma execução em lote; pertence somente a ela"""
    total: int = 0
    processed: int = 0
    current_file: Optional[str] = None
    propostas: List[ConsolidatedAward] = field(default_factory=list)
    markdown_files: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def progress_percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return self.processed / self.total * 100


class BatchRunner:
    """Aplica extração e renderização a cada documento, um de cada vez"""

    def __init__(self, config: Optional[ProcessingConfig] = None,
                 text_extractor: TextExtractor = extract_text):
        self.config = config or ProcessingConfig()
        self.text_extractor = text_extractor
        self.builder = TenderReportBuilder(
            extractor=AwardExtractor(field_recovery=self.config.field_recovery),
            tool_name=self.config.tool_name,
        )

    def process_document(self, document: Union[str, Path], output_dir: Union[str, Path],
                         context: Optional[BatchContext] = None) -> List[ConsolidatedAward]:
        """Extrai, gera o Markdown e devolve as propostas consolidadas de um documento"""
        path = Path(document)
        out = Path(output_dir)
        logger.info(f"📄 Processando: {path}")

        text = self.text_extractor(path)
        logger.info(f"📝 Texto extraído: {len(text)} caracteres")

        report = self.builder.build(text)
        markdown = self.builder.render_markdown(report)

        markdown_path = out / f"{path.stem}.md"
        try:
            markdown_path.write_text(markdown, encoding='utf-8')
            if self.config.render_html:
                html_path = out / f"{path.stem}.html"
                html_path.write_text(self.builder.render_html(markdown), encoding='utf-8')
        except OSError as e:
            raise OutputWriteError(f"Erro ao salvar relatório de {path.name}: {e}", details=str(markdown_path)) from e
        logger.info(f"💾 Arquivo salvo em: {markdown_path}")

        if context is not None:
            context.markdown_files.append(str(markdown_path))

        return [ConsolidatedAward.from_award(p, report) for p in report.propostas]

    def run(self, input_dir: Union[str, Path], output_dir: Union[str, Path],
            progress_callback: Optional[ProgressCallback] = None) -> BatchContext:
        """Processa todos os documentos do diretório (recursivo)"""
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)

        # O total é fixado antes do laço; arquivos novos não entram nesta execução
        documents = discover_documents(input_dir, self.config.supported_extensions)
        context = BatchContext(total=len(documents))

        def report_progress() -> None:
            if progress_callback is not None:
                progress_callback(context.processed, context.total, context.current_file)

        for index, document in enumerate(documents):
            context.current_file = str(document)
            report_progress()

            try:
                propostas = self.process_document(document, out, context)
                context.propostas.extend(propostas)
                logger.info(f"✅ Processado com sucesso: {document}")
            except Exception as e:
                message = f"Erro ao processar {document}: {e}"
                logger.error(f"❌ {message}")
                context.errors.append(message)

            context.processed = index + 1
            context.current_file = None
            report_progress()

        logger.info(
            f"📊 Lote concluído: {context.processed}/{context.total} documentos, "
            f"{len(context.propostas)} propostas, {len(context.errors)} falhas"
        )
        return context
