import click
import logging
from pathlib import Path
from pydantic import BaseModel

from appforge.application.config_models import AppConfig, load_app_config
from appforge.application.workspace_writer import (
    list_workspace_files,
    read_workspace_file,
    write_files,
)
from appforge.domain.duplicates import DuplicatePolicy, resolve_duplicates
from appforge.domain.models.extracted_file import ExtractedFile
from appforge.domain.models.generation_outcome import GenerationOutcome, GenerationStatus
from appforge.interface.cli.output_models import (
    ExtractOutput,
    FileSummary,
    FixOutput,
    GenerateOutput,
    ProviderDetail,
    ProviderSummary,
    ProvidersOutput,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_DUPLICATE_CHOICES = click.Choice([p.value for p in DuplicatePolicy])


def _json_emit(model: BaseModel) -> None:
    # Single-line JSON, omit None fields (e.g., GenerateOutput.prompt_path when not manual).
    click.echo(model.model_dump_json(exclude_none=True), nl=True)


def _get_json_mode(ctx: click.Context) -> bool:
    obj = ctx.obj or {}
    return bool(obj.get("json", False))


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler()])


def _load_settings(ctx: click.Context) -> AppConfig:
    """Load config from the current project and home, then apply logging settings."""
    cfg = load_app_config(project_root=Path.cwd(), user_home=Path.home())
    verbose = bool((ctx.obj or {}).get("verbose", False))
    _configure_logging("DEBUG" if verbose else cfg.log_level)
    return cfg


def _read_source(source: str) -> str:
    # \r\n is kept on both paths so extracted content matches the reply byte for byte
    if source == "-":
        return click.get_binary_stream("stdin").read().decode("utf-8")
    with open(source, encoding="utf-8", newline="") as handle:
        return handle.read()


def _summaries(files: list[ExtractedFile]) -> list[FileSummary]:
    return [FileSummary(path=f.path, size=len(f.content)) for f in files]


def _existing_files(workspace_dir: Path) -> list[ExtractedFile]:
    existing = []
    for path in list_workspace_files(workspace_dir):
        content = read_workspace_file(workspace_dir, path)
        if content is not None:
            existing.append(ExtractedFile(path=path, content=content))
    return existing


def _build_service(cfg: AppConfig, provider_key: str | None, model: str | None, events: bool):
    # Import providers to ensure registration
    from appforge.domain.providers import ProviderFactory
    from appforge.domain.events import GenerationEventEmitter
    from appforge.application.generation_service import GenerationService

    key = provider_key or cfg.provider
    provider_config = cfg.provider_config(key)
    if model:
        provider_config["model"] = model

    try:
        provider = ProviderFactory.create(key, provider_config)
    except KeyError as e:
        raise ValueError(e.args[0]) from None

    event_emitter = GenerationEventEmitter()
    if events:
        from appforge.domain.events import StderrEventObserver
        event_emitter.subscribe(StderrEventObserver())

    return GenerationService(
        provider,
        duplicate_policy=cfg.duplicate_policy,
        event_emitter=event_emitter,
    )


def _outcome_exit_code(outcome: GenerationOutcome) -> int:
    if outcome.status == GenerationStatus.COMPLETED:
        return 0
    return 2


def _report_outcome(
    ctx: click.Context,
    output_cls: type[GenerateOutput],
    outcome: GenerationOutcome,
    workspace_dir: Path,
) -> None:
    exit_code = _outcome_exit_code(outcome)

    if _get_json_mode(ctx):
        _json_emit(
            output_cls(
                exit_code=exit_code,
                status=outcome.status.value,
                workspace_dir=str(workspace_dir),
                files=_summaries(outcome.files),
                prompt_path=str(outcome.prompt_path) if outcome.prompt_path else None,
                response_path=str(outcome.response_path) if outcome.response_path else None,
            )
        )
        raise click.exceptions.Exit(exit_code)

    click.echo(f"status={outcome.status.value} files={len(outcome.files)}")
    if outcome.status == GenerationStatus.AWAITING_RESPONSE:
        click.echo(str(outcome.prompt_path))
        click.echo(str(outcome.response_path))
        click.echo(
            f"Paste the reply into the response file, then run: "
            f"appforge extract {outcome.response_path} --out {workspace_dir}",
            err=True,
        )
    for path in outcome.written_paths:
        click.echo(str(path))

    if exit_code:
        raise click.exceptions.Exit(exit_code)


@click.group(help="Generate web projects from model replies.")
@click.option("--json", "json_output", is_flag=True, help="Emit machine-readable JSON on stdout.")
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level to stderr.")
@click.pass_context
def cli(ctx: click.Context, json_output: bool, verbose: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj["json"] = bool(json_output)
    ctx.obj["verbose"] = bool(verbose)


@cli.command("extract")
@click.argument("source", type=click.Path(allow_dash=True, dir_okay=False), default="-")
@click.option("--out", "out_dir", type=click.Path(file_okay=False), default=None,
              help="Write the extracted files into this directory.")
@click.option("--duplicates", "duplicates", type=_DUPLICATE_CHOICES, default=None,
              help="How repeated paths are resolved (default from config).")
@click.option("--clean", is_flag=True, help="Empty the output directory before writing.")
@click.pass_context
def extract_cmd(
    ctx: click.Context,
    source: str,
    out_dir: str | None,
    duplicates: str | None,
    clean: bool,
) -> None:
    """Extract files from a model reply (file or '-' for stdin)."""
    try:
        from appforge.domain.extraction import extract_result

        cfg = _load_settings(ctx)
        policy = DuplicatePolicy(duplicates) if duplicates else cfg.duplicate_policy

        result = extract_result(_read_source(source))
        files = resolve_duplicates(result.files, policy)

        written: list[Path] = []
        if out_dir is not None and files:
            written = write_files(Path(out_dir), files, clean=clean)

        exit_code = 0 if files else 2
        issues = [f"line {i.line}: {i.message}" for i in result.issues]

        if _get_json_mode(ctx):
            _json_emit(
                ExtractOutput(
                    exit_code=exit_code,
                    status=result.status.value,
                    strategy=result.strategy.value if result.strategy else None,
                    files=_summaries(files),
                    issues=issues,
                    written_paths=[str(p) for p in written],
                )
            )
            raise click.exceptions.Exit(exit_code)

        for issue in issues:
            click.echo(f"warning: {issue}", err=True)

        if not files:
            click.echo(f"status={result.status.value} files=0")
            raise click.exceptions.Exit(2)

        click.echo(
            f"status={result.status.value} strategy={result.strategy.value} files={len(files)}"
        )
        for f in files:
            click.echo(f"{f.path} ({len(f.content)} chars)")
        for path in written:
            logger.info(f"Wrote {path}")

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(ExtractOutput(exit_code=1, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e


@cli.command("generate")
@click.argument("request", type=str)
@click.option("--out", "out_dir", type=click.Path(file_okay=False), default=None,
              help="Project directory (default from config).")
@click.option("--provider", "provider_key", type=str, default=None,
              help="Provider key (overrides config).")
@click.option("--model", type=str, default=None, help="Model identifier for the provider.")
@click.option("--clean", is_flag=True, help="Start from an empty project directory.")
@click.option("--events", is_flag=True, help="Emit generation events to stderr.")
@click.pass_context
def generate_cmd(
    ctx: click.Context,
    request: str,
    out_dir: str | None,
    provider_key: str | None,
    model: str | None,
    clean: bool,
    events: bool,
) -> None:
    """Generate (or update) a project from a description."""
    workspace_dir = Path(out_dir) if out_dir else None
    try:
        cfg = _load_settings(ctx)
        workspace_dir = workspace_dir or cfg.workspace_dir

        service = _build_service(cfg, provider_key, model, events)
        existing = None if clean else _existing_files(workspace_dir)

        outcome = service.generate(
            request,
            workspace_dir,
            existing_files=existing or None,
            clean=clean,
        )
        _report_outcome(ctx, GenerateOutput, outcome, workspace_dir)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(
                GenerateOutput(
                    exit_code=1,
                    workspace_dir=str(workspace_dir) if workspace_dir else None,
                    error=str(e),
                )
            )
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e


@cli.command("fix")
@click.argument("error_message", type=str)
@click.option("--out", "out_dir", type=click.Path(file_okay=False), default=None,
              help="Project directory (default from config).")
@click.option("--provider", "provider_key", type=str, default=None,
              help="Provider key (overrides config).")
@click.option("--model", type=str, default=None, help="Model identifier for the provider.")
@click.option("--events", is_flag=True, help="Emit generation events to stderr.")
@click.pass_context
def fix_cmd(
    ctx: click.Context,
    error_message: str,
    out_dir: str | None,
    provider_key: str | None,
    model: str | None,
    events: bool,
) -> None:
    """Ask the model to fix an error in an existing project."""
    workspace_dir = Path(out_dir) if out_dir else None
    try:
        cfg = _load_settings(ctx)
        workspace_dir = workspace_dir or cfg.workspace_dir
        if not workspace_dir.is_dir():
            raise ValueError(f"Project directory not found: {workspace_dir}")

        service = _build_service(cfg, provider_key, model, events)
        outcome = service.fix(error_message, workspace_dir)
        _report_outcome(ctx, FixOutput, outcome, workspace_dir)

    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(
                FixOutput(
                    exit_code=1,
                    workspace_dir=str(workspace_dir) if workspace_dir else None,
                    error=str(e),
                )
            )
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e


@cli.command("providers")
@click.argument("provider_name", type=str, required=False)
@click.pass_context
def providers_cmd(ctx: click.Context, provider_name: str | None) -> None:
    """List available AI providers or show details for a specific provider."""
    try:
        # Import providers to ensure registration
        from appforge.domain.providers import ProviderFactory

        if provider_name:
            metadata = ProviderFactory.get_metadata(provider_name)
            if metadata is None:
                available = ", ".join(ProviderFactory.names())
                error_msg = f"Provider '{provider_name}' not found. Available: {available}"
                if _get_json_mode(ctx):
                    _json_emit(ProvidersOutput(exit_code=1, error=error_msg))
                    raise click.exceptions.Exit(1)
                raise click.ClickException(error_msg)

            provider_detail = ProviderDetail(
                name=metadata["name"],
                description=metadata["description"],
                requires_config=metadata.get("requires_config", False),
                config_keys=metadata.get("config_keys", []),
                supports_system_prompt=metadata.get("supports_system_prompt", False),
            )

            if _get_json_mode(ctx):
                _json_emit(ProvidersOutput(exit_code=0, provider=provider_detail))
                raise click.exceptions.Exit(0)

            click.echo(f"Provider: {provider_detail.name}")
            click.echo(f"Description: {provider_detail.description}")
            requires_str = "yes" if provider_detail.requires_config else "no"
            click.echo(f"Requires Config: {requires_str}")
            if provider_detail.config_keys:
                click.echo(f"Config Keys: {', '.join(provider_detail.config_keys)}")

        else:
            providers_list = [
                ProviderSummary(
                    name=m["name"],
                    description=m["description"],
                    requires_config=m.get("requires_config", False),
                )
                for m in ProviderFactory.get_all_metadata()
            ]

            if _get_json_mode(ctx):
                _json_emit(ProvidersOutput(exit_code=0, providers=providers_list))
                raise click.exceptions.Exit(0)

            if not providers_list:
                click.echo("No providers registered.")
            else:
                click.echo(f"{'PROVIDER':<12}{'DESCRIPTION':<64}{'CONFIG'}")
                for p in providers_list:
                    config_str = "required" if p.requires_config else "none"
                    click.echo(f"{p.name:<12}{p.description:<64}{config_str}")

    except click.exceptions.Exit:
        raise
    except click.ClickException:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(ProvidersOutput(exit_code=1, error=str(e)))
            raise click.exceptions.Exit(1)
        raise click.ClickException(str(e)) from e
