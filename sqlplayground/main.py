"""
SQL Playground - Main Entry Point

Application controller and command-line interface.
"""

import sys
import logging
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from sqlplayground import __version__
from sqlplayground.config import PlaygroundConfig, create_default_config
from sqlplayground.core.projection import (
    describe_result,
    format_cell,
    to_csv,
    to_json,
)
from sqlplayground.core.schema_model import (
    AiSuggestion,
    Dataset,
    InsertCustomTable,
    InsertSavedQuery,
    QueryResult,
    SavedQuery,
    SchemaValidationError,
    ValidationError,
)
from sqlplayground.core.session import DatabaseSession
from sqlplayground.core.sql_generator import generate_dataset_sql
from sqlplayground.core.store import MemStorage, build_storage
from sqlplayground.inference.assistant import SQLAssistant, create_assistant
from sqlplayground.webapp.app import create_app

logger = logging.getLogger(__name__)

console = Console()


class DatasetNotFoundError(KeyError):
    """Raised when a dataset, custom table or saved query lookup fails."""
    pass


def append_suggestion(sql: str, suggestion: str) -> str:
    """Append a suggestion on its own line after the current SQL."""
    lines = sql.split("\n")
    if lines[-1].strip() != "":
        lines.append("")
    lines.append(suggestion)
    return "\n".join(lines)


class PlaygroundController:
    """
    Top-level application controller.

    Owns the session context (embedded database), the store and the AI
    assistant, and exposes what the UI does:
    1. Select a dataset or custom table (loads it into the database)
    2. Run queries
    3. Ask the assistant for suggestions, generated SQL or explanations
    4. Save queries and export the dataset SQL
    """

    def __init__(
        self,
        config: PlaygroundConfig,
        storage: Optional[MemStorage] = None,
        assistant: Optional[SQLAssistant] = None,
    ):
        """
        Initialize the controller.

        Args:
            config: Complete configuration object
            storage: Store to read datasets and queries from
            assistant: AI capability; chosen from config.llm when omitted
        """
        self.config = config
        self.storage = storage or build_storage(config)
        self.assistant = assistant or create_assistant(config.llm)
        self.session = DatabaseSession(config.database)

    @property
    def current_dataset(self) -> Optional[Dataset]:
        return self.session.current_dataset

    def start(self, dataset: Optional[str] = None) -> Dataset:
        """Create the database and load the requested (or default) dataset."""
        self.session.create()
        target = dataset or self.config.default_dataset
        if target is None:
            datasets = self.storage.get_datasets()
            if not datasets:
                raise DatasetNotFoundError("No datasets available")
            return self.select_dataset(datasets[0].id)
        return self.select_dataset(self.resolve_dataset(target).id)

    def resolve_dataset(self, ref: str) -> Dataset:
        """Find a dataset by numeric id or case-insensitive name."""
        if str(ref).isdigit():
            dataset = self.storage.get_dataset(int(ref))
            if dataset:
                return dataset
        for dataset in self.storage.get_datasets():
            if dataset.name.lower() == str(ref).lower():
                return dataset
        raise DatasetNotFoundError(f"Dataset not found: {ref}")

    def select_dataset(self, dataset_id: int) -> Dataset:
        dataset = self.storage.get_dataset(dataset_id)
        if dataset is None:
            raise DatasetNotFoundError(f"Dataset not found: {dataset_id}")
        self._load(dataset)
        return dataset

    def select_custom_table(self, table_id: int) -> Dataset:
        table = self.storage.get_custom_table(table_id)
        if table is None:
            raise DatasetNotFoundError(f"Custom table not found: {table_id}")
        dataset = table.to_dataset()
        self._load(dataset)
        return dataset

    def select_saved_query(self, query_id: int) -> SavedQuery:
        """Switch to the saved query's dataset (when it has one) and return the query."""
        query = self.storage.get_saved_query(query_id)
        if query is None:
            raise DatasetNotFoundError(f"Saved query not found: {query_id}")
        target = self.storage.get_dataset(query.dataset_id) if query.dataset_id is not None else None
        # Custom tables reuse ids from their own sequence, so compare objects
        if target is not None and self.current_dataset is not target:
            self._load(target)
        return query

    def _load(self, dataset: Dataset):
        self.session.create()
        try:
            self.session.load_dataset(dataset)
        except SQLAlchemyError as e:
            logger.error(f"Error loading dataset {dataset.name}: {e}")
            raise

    def run_query(self, sql: str) -> QueryResult:
        """
        Run SQL against the current dataset.

        Raises:
            ValidationError: for blank SQL
        """
        if not sql or not sql.strip():
            raise ValidationError("Please enter a SQL query")
        return self.session.run_query(sql)

    def suggest(self, sql: str) -> Optional[AiSuggestion]:
        """AI suggestions for a query, or None when the assistant fails."""
        try:
            return self.assistant.suggest(sql)
        except Exception as e:
            logger.warning(f"Failed to get AI suggestions: {e}")
            return None

    def generate_sql(self, description: str) -> Optional[str]:
        """SQL for a description over the current dataset's tables, or None on failure."""
        tables = self.current_dataset.table_names if self.current_dataset else None
        try:
            return self.assistant.generate(description, tables)
        except Exception as e:
            logger.warning(f"Failed to generate SQL: {e}")
            return None

    def explain_sql(self, sql: str) -> Optional[str]:
        try:
            return self.assistant.explain(sql)
        except Exception as e:
            logger.warning(f"Failed to explain SQL: {e}")
            return None

    def save_query(self, name: str, sql: str, description: Optional[str] = None) -> SavedQuery:
        """Save a query against the current dataset (none when a custom table is loaded)."""
        current = self.current_dataset
        dataset_id = None
        if current is not None and self.storage.get_dataset(current.id) is current:
            dataset_id = current.id

        insert = InsertSavedQuery.from_payload({
            "name": name,
            "sql": sql,
            "description": description,
            "datasetId": dataset_id,
        })
        return self.storage.create_saved_query(insert)

    def export_dataset_sql(self, dataset: Optional[Dataset] = None) -> str:
        dataset = dataset or self.current_dataset
        if dataset is None:
            raise DatasetNotFoundError("No dataset selected")
        return generate_dataset_sql(dataset.tables)

    def close(self):
        """Cleanup resources."""
        self.session.dispose()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def render_result(result: QueryResult) -> Table:
    """Results grid: booleans as check marks, NULLs spelled out."""
    table = Table(show_header=True)
    for column in result.columns:
        table.add_column(column, style="cyan")
    for row in result.values:
        table.add_row(*[format_cell(cell) for cell in row])
    return table


def render_suggestion(suggestion: AiSuggestion) -> Panel:
    body = "\n".join([suggestion.message, ""] + [f"• {s}" for s in suggestion.suggestions])
    return Panel(body, title="AI Suggestions", border_style="magenta")


def print_result(result: QueryResult, output_format: str = "table"):
    """Print a result as a rich table, CSV or JSON."""
    if output_format == "csv":
        click.echo(to_csv(result))
    elif output_format == "json":
        click.echo(to_json(result))
    elif result.is_empty:
        console.print(f"[dim]Query executed. No results to display ({describe_result(result)}).[/dim]")
    else:
        console.print(render_result(result))
        console.print(f"[dim]{describe_result(result)}[/dim]")


def _fail(message: str, code: int = 1):
    console.print(f"[bold red]✗ {message}[/bold red]")
    sys.exit(code)


def _start_or_exit(controller: PlaygroundController, dataset: Optional[str] = None) -> Dataset:
    try:
        return controller.start(dataset)
    except DatasetNotFoundError as e:
        _fail(e.args[0])
    except SQLAlchemyError as e:
        _fail(f"Error loading dataset: {e}")


def _run_or_exit(controller: PlaygroundController, sql: str) -> QueryResult:
    try:
        return controller.run_query(sql)
    except ValidationError as e:
        _fail(f"Error: {e}", code=2)
    except SQLAlchemyError as e:
        message = str(e.orig) if getattr(e, "orig", None) is not None else str(e)
        console.print(Panel(message, title="Error", border_style="red"))
        sys.exit(1)


def _print_suggestion(controller: PlaygroundController, sql: str, apply: bool):
    suggestion = controller.suggest(sql)
    if suggestion is None:
        console.print("[yellow]AI suggestions are unavailable right now.[/yellow]")
        return

    console.print(render_suggestion(suggestion))
    if apply and suggestion.suggestions:
        click.echo(append_suggestion(sql, suggestion.suggestions[0]))


def _load_config(config_path: Optional[str], verbose: bool) -> PlaygroundConfig:
    config = PlaygroundConfig.from_yaml(config_path) if config_path else create_default_config()
    if verbose or config.verbose:
        config.verbose = True
        logging.getLogger().setLevel(logging.DEBUG)
    return config


def _controller(ctx) -> PlaygroundController:
    return PlaygroundController(ctx.obj["config"], storage=ctx.obj["storage"])


# CLI Commands
@click.group()
@click.version_option(version=__version__, prog_name="SQL Playground")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx, config_path, verbose):
    """SQL Playground - query sample datasets with SQL"""
    ctx.ensure_object(dict)
    config = _load_config(config_path, verbose)
    ctx.obj["config"] = config

    try:
        ctx.obj["storage"] = build_storage(config)
    except SchemaValidationError as e:
        _fail(f"Invalid datasets file {config.datasets_file}: {e}")


@cli.command()
@click.pass_context
def datasets(ctx):
    """List available datasets."""
    storage: MemStorage = ctx.obj["storage"]

    table = Table(title="Datasets", show_header=True)
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Tables")
    table.add_column("Description", style="dim")

    for dataset in storage.get_datasets():
        table.add_row(
            str(dataset.id),
            dataset.name,
            ", ".join(dataset.table_names),
            dataset.description or "",
        )

    console.print(table)


@cli.command()
@click.argument("dataset")
@click.pass_context
def schema(ctx, dataset):
    """Show the schema of a dataset's tables."""
    controller = _controller(ctx)
    try:
        target = controller.resolve_dataset(dataset)
    except DatasetNotFoundError as e:
        _fail(e.args[0])

    for table_def in target.tables:
        table = Table(title=f"{table_def.name} ({table_def.row_count} rows)", show_header=True)
        table.add_column("Column", style="cyan")
        table.add_column("Type", style="green")
        table.add_column("Constraints", style="dim")

        for column in table_def.schema.columns:
            constraints = []
            if column.is_primary_key:
                constraints.append("PRIMARY KEY")
            if column.is_foreign_key:
                target_ref = f" -> {column.references_table}.{column.references_column}" \
                    if column.has_foreign_key_target else ""
                constraints.append(f"FOREIGN KEY{target_ref}")
            if column.not_null:
                constraints.append("NOT NULL")
            if column.default_value is not None:
                constraints.append(f"DEFAULT {column.default_value}")
            table.add_row(column.name, column.type.value, " ".join(constraints))

        console.print(table)


@cli.command("export-sql")
@click.argument("dataset")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the script to a file")
@click.pass_context
def export_sql(ctx, dataset, output):
    """Print (or save) the CREATE/INSERT script for a dataset."""
    controller = _controller(ctx)
    try:
        script = controller.export_dataset_sql(controller.resolve_dataset(dataset))
    except DatasetNotFoundError as e:
        _fail(e.args[0])

    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(script)
        console.print(f"[bold green]✓ SQL written to {output}[/bold green]")
    else:
        click.echo(script)


@cli.command()
@click.argument("dataset")
@click.argument("sql")
@click.option("--format", "-f", "output_format", type=click.Choice(["table", "csv", "json"]),
              default="table", help="Output format")
@click.option("--suggest", is_flag=True, help="Ask the AI assistant for suggestions")
@click.option("--apply", "apply_suggestion", is_flag=True,
              help="With --suggest, print the SQL with the first suggestion appended")
@click.option("--save", "save_name", help="Save the query under this name")
@click.pass_context
def query(ctx, dataset, sql, output_format, suggest, apply_suggestion, save_name):
    """
    Run SQL against a dataset.

    Examples:

        sqlplayground query Accommodations "SELECT * FROM accommodations"

        sqlplayground query 1 "SELECT name FROM amenities" --format csv
    """
    with _controller(ctx) as controller:
        _start_or_exit(controller, dataset)
        print_result(_run_or_exit(controller, sql), output_format)

        if save_name is not None:
            try:
                saved = controller.save_query(save_name, sql)
            except SchemaValidationError as e:
                _fail(str(e))
            console.print(f"[bold green]✓ Saved query #{saved.id}: {saved.name}[/bold green]")

        if suggest:
            _print_suggestion(controller, sql, apply_suggestion)


@cli.command("run-saved")
@click.argument("query_id", type=int)
@click.option("--format", "-f", "output_format", type=click.Choice(["table", "csv", "json"]),
              default="table", help="Output format")
@click.pass_context
def run_saved(ctx, query_id, output_format):
    """Run a saved query against its dataset."""
    with _controller(ctx) as controller:
        _start_or_exit(controller)
        try:
            saved = controller.select_saved_query(query_id)
        except DatasetNotFoundError as e:
            _fail(e.args[0])

        console.print(f"[dim]{saved.name} on {controller.current_dataset.name}[/dim]")
        print_result(_run_or_exit(controller, saved.sql), output_format)


@cli.command("query-table")
@click.argument("table_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("sql")
@click.option("--format", "-f", "output_format", type=click.Choice(["table", "csv", "json"]),
              default="table", help="Output format")
@click.pass_context
def query_table(ctx, table_file, sql, output_format):
    """
    Run SQL against a custom table defined in a YAML (or JSON) file.

    The file holds name, optional description, schema and data, in the
    same shape as POST /api/custom-tables.
    """
    with open(table_file, "r", encoding="utf-8") as f:
        payload = yaml.safe_load(f)

    with _controller(ctx) as controller:
        try:
            table = controller.storage.create_custom_table(InsertCustomTable.from_payload(payload))
        except SchemaValidationError as e:
            _fail(str(e))

        try:
            controller.select_custom_table(table.id)
        except SQLAlchemyError as e:
            _fail(f"Error loading table: {e}")

        print_result(_run_or_exit(controller, sql), output_format)


@cli.command("saved-queries")
@click.pass_context
def saved_queries(ctx):
    """List saved queries."""
    storage: MemStorage = ctx.obj["storage"]
    for saved in storage.get_saved_queries():
        console.print(Panel(
            saved.sql,
            title=f"#{saved.id} {saved.name}",
            subtitle=saved.description or "",
            border_style="blue",
        ))


@cli.group()
def ai():
    """AI assistant: generate or explain SQL."""
    pass


@ai.command()
@click.argument("description")
@click.option("--dataset", "-d", default=None, help="Dataset whose tables the SQL may use")
@click.pass_context
def generate(ctx, description, dataset):
    """Write SQL for a plain-language description."""
    with _controller(ctx) as controller:
        _start_or_exit(controller, dataset)
        sql = controller.generate_sql(description)
        if sql is None:
            _fail("Failed to generate SQL query")
        click.echo(sql)


@ai.command()
@click.argument("sql")
@click.pass_context
def explain(ctx, sql):
    """Explain a SQL query in simple terms."""
    controller = _controller(ctx)
    explanation = controller.explain_sql(sql)
    if explanation is None:
        _fail("Failed to explain SQL query")
    console.print(Panel(explanation, title="Explanation", border_style="magenta"))


@cli.command()
@click.option("--host", default=None, help="Bind address")
@click.option("--port", type=int, default=None, help="Port")
@click.option("--debug", is_flag=True, help="Flask debug mode")
@click.pass_context
def serve(ctx, host, port, debug):
    """Run the HTTP API."""
    config: PlaygroundConfig = ctx.obj["config"]
    app = create_app(config, storage=ctx.obj["storage"])

    console.print(Panel(
        "[bold blue]SQL Playground API[/bold blue]\n"
        f"[dim]AI assistant: {app.config['ASSISTANT'].name}[/dim]",
        border_style="blue",
    ))
    app.run(
        host=host or config.server.host,
        port=port or config.server.port,
        debug=debug or config.server.debug,
    )


@cli.command()
def version():
    """Show version information."""
    with DatabaseSession() as session:
        info = session.database.get_database_info()

    console.print(Panel(
        f"[bold]SQL Playground[/bold] v{__version__}\n\n"
        f"Embedded engine: SQLite {info['version']}\n\n"
        "Components:\n"
        "  • Schema Model\n"
        "  • SQL Generator\n"
        "  • Dataset Loader\n"
        "  • Query Runner\n"
        "  • Result Projection",
        title="About",
        border_style="blue",
    ))


def main():
    """Main entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    cli()


if __name__ == "__main__":
    main()
