"""Schema service for schemalens-mcp.

This module provides the SchemaService class, which orchestrates one
analysis call end to end: extract the schema, resolve relationships, run
the validation or optimization rules, rank the findings and build the
response model. Nothing is cached between calls.
"""

from __future__ import annotations

from fastmcp.utilities.logging import get_logger
import sqlalchemy as sa

from schemalens_mcp.builders.response_builders import (
    AnalyzeSchemaResultBuilder,
    FindingsResultBuilder,
    RelationshipsResultBuilder,
    SchemaComparisonResultBuilder,
)
from schemalens_mcp.intelligence.comparison import compare_schemas
from schemalens_mcp.intelligence.graph import DependencyGraph
from schemalens_mcp.intelligence.optimization import suggest_optimizations
from schemalens_mcp.intelligence.ranking import rank_findings
from schemalens_mcp.intelligence.relationships import resolve_relationships
from schemalens_mcp.intelligence.validation import validate_schema
from schemalens_mcp.models import (
    AnalyzeSchemaResult,
    FindingsResult,
    RelationshipsResult,
    SchemaComparisonResult,
)
from schemalens_mcp.schema_tools.constants import Constants, Environment
from schemalens_mcp.schema_tools.extractor import SchemaExtractor
from schemalens_mcp.schema_tools.models import ExtractionOptions, SchemaModel
from schemalens_mcp.services.config_service import ConfigService


class SchemaService:
    """Service for schema analysis operations against one environment."""

    def __init__(self, engine: sa.Engine, environment: Environment) -> None:
        """Initialize the schema service.

        Args:
            engine: SQLAlchemy engine for the environment's database
            environment: Environment the database belongs to
        """
        self.engine = engine
        self.environment = environment
        self._logger = get_logger(__name__)

    def extract(self, options: ExtractionOptions | None = None) -> SchemaModel:
        """Extract a fresh schema model; metadata only unless options enable samples."""
        opts = options or ConfigService.extraction_options(include_samples=False, max_sample_rows=0)
        return SchemaExtractor(self.engine, opts).extract()

    def analyze_schema(
        self,
        *,
        include_samples: bool = True,
        max_sample_rows: int = Constants.DEFAULT_SAMPLE_ROWS,
    ) -> AnalyzeSchemaResult:
        """Analyze the full schema structure.

        Args:
            include_samples: Whether to read sample rows per table
            max_sample_rows: Maximum rows per table when sampling

        Returns:
            AnalyzeSchemaResult with tables, relationships, statistics and samples

        Raises:
            ConfigurationError: If ``max_sample_rows`` is negative
            ReflectionError: If the catalog cannot be read
        """
        options = ConfigService.extraction_options(
            include_samples=include_samples, max_sample_rows=max_sample_rows
        )
        self._logger.info("Analyzing %s schema", self.environment.value)
        model = self.extract(options)
        relationships = resolve_relationships(model)
        return AnalyzeSchemaResultBuilder.build(
            model, relationships, self.environment, include_samples=include_samples
        )

    def get_relationships(self, table_name: str | None = None) -> RelationshipsResult:
        """Resolve relationships, optionally restricted to one table.

        Cycles, self-references and population order are computed over the
        returned relationships; without a filter every table takes part in
        the population order.
        """
        model = self.extract()
        relationships = resolve_relationships(model, table_name)
        if table_name is None:
            graph = DependencyGraph(model.table_names, relationships)
        else:
            nodes = {t for r in relationships for t in (r.source_table, r.target_table)}
            if model.has_table(table_name):
                nodes.add(table_name)
            graph = DependencyGraph(sorted(nodes), relationships)
        return RelationshipsResultBuilder.build(
            relationships,
            self.environment,
            table_filter=table_name,
            cycles=graph.cycles(),
            self_referential=graph.self_referential(),
            population_order=graph.population_order(),
        )

    def validate_schema(self) -> FindingsResult:
        """Validate schema integrity and return ranked findings."""
        model = self.extract()
        relationships = resolve_relationships(model)
        findings = rank_findings(validate_schema(model, relationships), self.environment)
        self._logger.info(
            "Validated %s schema: %d findings", self.environment.value, len(findings)
        )
        return FindingsResultBuilder.build(findings, self.environment)

    def suggest_optimizations(self) -> FindingsResult:
        """Suggest performance optimizations and return ranked findings."""
        model = self.extract()
        relationships = resolve_relationships(model)
        findings = rank_findings(suggest_optimizations(model, relationships), self.environment)
        self._logger.info(
            "Optimization advice for %s schema: %d findings", self.environment.value, len(findings)
        )
        return FindingsResultBuilder.build(findings, self.environment)

    def compare_schemas(self, target: SchemaService) -> SchemaComparisonResult:
        """Report drift of ``target``'s schema relative to this service's schema.

        Findings are ranked with the target environment's context.
        """
        source_model = self.extract()
        target_model = target.extract()
        findings = compare_schemas(
            source_model,
            target_model,
            source_label=self.environment.value,
            target_label=target.environment.value,
        )
        ranked = rank_findings(findings, target.environment)
        return SchemaComparisonResultBuilder.build(ranked, self.environment, target.environment)
