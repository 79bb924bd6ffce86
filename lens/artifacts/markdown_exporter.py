"""Markdown export of the strategy report.

The report covers the current topic's research (facts and SWOT) and, when
they have been generated, the risk analysis and financial estimates.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from lens.domain.viability import viability_tier
from lens.schemas.artifacts import FinancialModel, GeneratedImage, RiskAnalysis
from lens.schemas.research import ResearchResult

MARKDOWN_TEMPLATE_DIR = Path(__file__).parent / "templates" / "markdown"


def format_amount(value: float) -> str:
    """Render 5.0 as "5" and 4.5 as "4.5"."""
    return str(int(value)) if value == int(value) else str(value)


class MarkdownExporter:
    """Render the strategy report as Markdown."""

    def __init__(self):
        self.env = Environment(
            loader=FileSystemLoader(str(MARKDOWN_TEMPLATE_DIR)),
            autoescape=False,  # Markdown should NOT be escaped
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["amount"] = format_amount

    def export_report(
        self,
        image: GeneratedImage,
        research: ResearchResult,
        risk: RiskAnalysis | None = None,
        financials: FinancialModel | None = None,
    ) -> str:
        """Export the strategy report for one history entry.

        Args:
            image: The history entry the report is about (topic, stage, focus)
            research: Research for that topic
            risk: Optional risk analysis section
            financials: Optional financial estimates section

        Returns:
            Markdown string
        """
        template = self.env.get_template("report.md.j2")
        return template.render(
            topic=image.topic,
            stage=image.stage,
            focus=image.focus,
            facts=research.facts,
            swot=research.insights.swot,
            risk=risk,
            tier=viability_tier(risk.viability_score) if risk else None,
            financials=financials,
        ).strip() + "\n"
