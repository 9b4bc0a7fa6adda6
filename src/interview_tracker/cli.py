"""Command-line interface for Interview Tracker."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from interview_tracker.config import AIProviderConfig, settings

app = typer.Typer(
    name="interview-tracker",
    help="Interview Tracker - interview practice with answer evaluation and analytics",
    add_completion=False,
)
console = Console()


@app.command()
def serve(
    host: str = typer.Option(settings.host, help="Host to bind to"),
    port: int = typer.Option(settings.port, help="Port to bind to"),
    reload: bool = typer.Option(settings.reload, help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    console.print(f"Starting Interview Tracker on {host}:{port}")
    uvicorn.run(
        "interview_tracker.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def config() -> None:
    """Show current configuration."""
    provider = AIProviderConfig.from_settings(settings)

    table = Table(title="Interview Tracker Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    # Show non-sensitive settings
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Log Level", settings.log_level)
    table.add_row("AI Provider", provider.provider)
    table.add_row("AI Model", provider.model or "-")
    table.add_row("AI Backend Enabled", str(provider.enabled))
    table.add_row("AI Timeout (s)", str(provider.timeout_seconds))
    table.add_row("Default Page Size", str(settings.default_page_size))
    table.add_row("Activity Page Size", str(settings.activity_page_size))

    console.print(table)


@app.command()
def evaluate(
    question: str = typer.Argument(..., help="Interview question"),
    answer: str = typer.Argument(..., help="Answer to score"),
    role: str = typer.Option("Frontend Developer", help="Target job role"),
    category: str = typer.Option("Technical", help="Question category"),
    offline: bool = typer.Option(False, help="Use only the heuristic evaluator"),
) -> None:
    """Score a single answer."""
    from interview_tracker.evaluation import (
        AIGateway,
        AnswerEvaluationService,
        HeuristicAnswerEvaluator,
    )
    from interview_tracker.utils.logging import configure_logging

    configure_logging()

    if offline:
        service = AnswerEvaluationService(evaluators=[HeuristicAnswerEvaluator()])
    else:
        service = AnswerEvaluationService(gateway=AIGateway.from_config(AIProviderConfig.from_settings(settings)))

    result = asyncio.run(service.evaluate(question, answer, role, category))

    table = Table(title=f"Evaluation ({result.source.value})")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Score", str(result.score))
    table.add_row("Feedback", result.feedback)
    table.add_row("Strengths", "\n".join(result.strengths) or "-")
    table.add_row("Improvements", "\n".join(result.improvements) or "-")
    if result.suggested_answer:
        table.add_row("Suggested Answer", result.suggested_answer)

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from interview_tracker import __version__
    console.print(f"Interview Tracker v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
