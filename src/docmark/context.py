"""Process-level context for a documentation run.

Single object owning the hierarchy graph, the documentation registry, the
inheritance resolver and the document builder for a set of metadata units.
Nothing here is global; tests build one per fabricated unit set.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from docmark.config.models import DocmarkConfig
from docmark.core.logging import get_logger
from docmark.index.nodes import DocumentationNode, section
from docmark.index.resolver import InheritanceResolver
from docmark.index.store import DocumentationRegistry
from docmark.metadata.hierarchy import HierarchyGraph
from docmark.metadata.models import MetadataUnit, ParameterSymbol, Symbol, TypeSymbol
from docmark.render.builder import DocumentBuilder
from docmark.render.engine import MarkupRenderer, RenderMode
from docmark.render.model import Document, Fragment, LinkTable
from docmark.render.paths import PathResolver, symbol_path

log = get_logger(__name__)


@dataclass
class DocmarkContext:
    """Everything one run needs, wired together.

    Usage::

        context = DocmarkContext.create([unit], config=load_config())
        text = context.summary(dog_speak)
        for path, document in context.documents(unit):
            ...
    """

    units: list[MetadataUnit]
    config: DocmarkConfig
    graph: HierarchyGraph
    registry: DocumentationRegistry
    resolver: InheritanceResolver
    builder: DocumentBuilder
    paths: PathResolver = field(default=symbol_path)

    @classmethod
    def create(
        cls,
        units: Iterable[MetadataUnit],
        *,
        config: DocmarkConfig | None = None,
        paths: PathResolver = symbol_path,
    ) -> DocmarkContext:
        """Factory building the graph and registry once for the given units."""
        units = list(units)
        config = config or DocmarkConfig()
        graph = HierarchyGraph.build(units)
        registry = DocumentationRegistry(units, config=config.documentation)
        resolver = InheritanceResolver(registry, graph, defer_tag=config.documentation.defer_tag)
        builder = DocumentBuilder(
            registry,
            graph,
            resolver,
            config=config.render,
            paths=paths,
            units=units,
            defer_tag=config.documentation.defer_tag,
        )
        log.debug("context_created", units=[u.name for u in units])
        return cls(
            units=units,
            config=config,
            graph=graph,
            registry=registry,
            resolver=resolver,
            builder=builder,
            paths=paths,
        )

    def resolve(self, symbol: Symbol) -> DocumentationNode | None:
        """Effective documentation node, following ``<inheritdoc/>``."""
        return self.resolver.resolve(symbol)

    def renderer(self, current_type: TypeSymbol | None = None, links: LinkTable | None = None) -> MarkupRenderer:
        return MarkupRenderer(
            registry=self.registry,
            graph=self.graph,
            links=links,
            paths=self.paths,
            current_type=current_type,
            config=self.config.render,
            defer_tag=self.config.documentation.defer_tag,
        )

    def render_section(
        self,
        symbol: Symbol,
        tag: str = "summary",
        mode: RenderMode = RenderMode.NORMAL,
    ) -> Fragment:
        current_type = symbol if isinstance(symbol, TypeSymbol) else getattr(symbol, "declaring", None)
        return self.renderer(current_type).render(section(self.resolve(symbol), tag), mode)

    def summary(self, symbol: Symbol, max_length: int | None = None) -> str:
        """Plain-text summary of a symbol's effective documentation.

        A parameter's summary is the text of its ``param`` entry.
        """
        node = self.resolve(symbol)
        if not isinstance(symbol, ParameterSymbol):
            node = section(node, "summary")
        return self.renderer().render_text(node, max_length)

    def documents(self, unit: MetadataUnit) -> Iterator[tuple[str, Document]]:
        return self.builder.build_all(unit)
