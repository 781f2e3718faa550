# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, FBT002
"""Commands that drive the idea refinement workflow.

Each invocation rebuilds the workflow from the durable store, applies one
action and exits, so the draft and step survive between commands.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import anyio
from cyclopts import App, Parameter
from rich.table import Table

from ideaflow.config import StorageBackend
from ideaflow.enums import ComponentType, RefinementStep, SuggestionCategory
from ideaflow.idea import (
    CONTINUE_CLASSES,
    STEP_PARAM,
    BasicInfoStep,
    BusinessModelStep,
    ComponentVariationsStep,
    ConceptVariationsStep,
    DetailedRefinementStep,
    IdeaDraftStorage,
    IdeaGenerator,
    IdeaSaver,
    IdeaWorkflow,
    MemoryLocation,
    StepNavigator,
)
from ideaflow.remote import FeatureFlags, HttpRemoteService
from ideaflow.utils import create_state_store, dump_json, get_state_db

from ._context import CLIContext
from ._shared import ExitCode, exit_with_error, get_console, print_banners

if TYPE_CHECKING:
    from ideaflow.remote import RemoteDataService
    from ideaflow.utils import StateStore

app = App(name="refine", help="Refine a business idea step by step", help_on_error=True)


@dataclass(slots=True)
class Workbench:
    """Everything one command needs, wired from the CLI context."""

    workflow: IdeaWorkflow
    location: MemoryLocation
    generator: IdeaGenerator
    saver: IdeaSaver


def open_store(ctx: CLIContext) -> "StateStore":
    """The durable store selected by the ``storage`` config section."""
    storage = ctx.config.storage
    scope = ctx.user.user_id if ctx.user else None
    if storage.backend is StorageBackend.MEMORY:
        return create_state_store(None, scope)
    path = Path(storage.path) if storage.path else get_state_db()
    return create_state_store(path, scope, logger=ctx.logger)


def build_workbench(ctx: CLIContext, remote: "RemoteDataService | None" = None) -> Workbench:
    """Load the workflow for the current user and wire its collaborators."""
    config = ctx.config
    location = MemoryLocation(path=config.workflow.route)
    if ctx.step is not None:
        location.query[STEP_PARAM] = ctx.step
    storage = IdeaDraftStorage(
        open_store(ctx),
        key_prefix=config.storage.key_prefix,
        author=ctx.user.author if ctx.user else None,
        logger=ctx.logger,
    )
    workflow = IdeaWorkflow(
        storage,
        location,
        user=ctx.user,
        initial_step=config.workflow.initial_step,
        route=config.workflow.route,
        logger=ctx.logger,
    )
    flags = FeatureFlags(config.features, remote, logger=ctx.logger)
    return Workbench(
        workflow=workflow,
        location=location,
        generator=IdeaGenerator(flags, remote, logger=ctx.logger),
        saver=IdeaSaver(remote, storage=storage, logger=ctx.logger),
    )


@asynccontextmanager
async def open_remote(ctx: CLIContext) -> AsyncIterator["RemoteDataService | None"]:
    """The configured remote service, or None when ``remote.base_url`` is empty."""
    if not ctx.config.remote.configured:
        yield None
        return
    async with HttpRemoteService.from_config(ctx.config.remote, logger=ctx.logger) as remote:
        yield remote


def _finish(workflow: IdeaWorkflow, ok: bool, code: ExitCode = ExitCode.VALIDATION_ERROR) -> None:
    print_banners(workflow)
    if not ok and workflow.error:
        raise SystemExit(code)


def _run_with_remote(action: Callable[[Workbench], Awaitable[bool]]) -> Workbench:
    ctx = CLIContext.get_current()
    result: list[bool] = []

    async def _main() -> Workbench:
        async with open_remote(ctx) as remote:
            bench = build_workbench(ctx, remote)
            result.append(await action(bench))
            return bench

    bench = anyio.run(_main)
    _finish(bench.workflow, result[0])
    return bench


def _render(workflow: IdeaWorkflow) -> None:
    console = get_console()
    doc = workflow.document
    step = workflow.cursor
    console.print(
        f"[bold]Step {int(step) + 1}/{workflow.total_steps}:[/bold] {step.label}"
        f"  [dim]{workflow.step_url}[/dim]"
    )

    fields = Table(show_header=False, box=None)
    for name, value in doc.base_fields().items():
        fields.add_row(f"[cyan]{name}[/cyan]", value or "[dim]-[/dim]")
    if doc.id:
        fields.add_row("[cyan]id[/cyan]", f"{doc.id} (v{doc.version})")
    console.print(fields)

    if doc.concept_variations:
        variations = Table(title="Concept variations")
        variations.add_column("")
        variations.add_column("id")
        variations.add_column("title")
        variations.add_column("target market")
        for variation in doc.concept_variations:
            variations.add_row(
                "*" if variation.is_selected else "",
                variation.id,
                variation.title,
                variation.target_market,
            )
        console.print(variations)
    if doc.merged_variation is not None:
        console.print(f"[bold]Merged:[/bold] {doc.merged_variation.title}")

    if doc.business_suggestions is not None and not doc.business_suggestions.is_empty():
        suggestions = Table(title="Business suggestions")
        suggestions.add_column("category")
        suggestions.add_column("items")
        selected = doc.selected_suggestions
        for category in SuggestionCategory:
            items = [
                f"[green]{item}[/green]" if selected and selected.contains(category, item) else item
                for item in doc.business_suggestions.get(category)
            ]
            suggestions.add_row(category.value, ", ".join(items))
        console.print(suggestions)

    navigator = StepNavigator(workflow)
    console.print(f"[dim]{navigator.previous_label} | {navigator.next_label}[/dim]")


@app.command(name="show")
def _show(
    *,
    as_json: Annotated[
        bool, Parameter(name="--json", help="Print the document as JSON")
    ] = False,
) -> None:
    """Show the current step and idea document"""
    bench = build_workbench(CLIContext.get_current())
    if as_json:
        get_console().print_json(
            dump_json(
                {
                    "step": int(bench.workflow.cursor),
                    "document": bench.workflow.document.model_dump(mode="json", by_alias=True),
                },
                indent=True,
            )
        )
        return
    _render(bench.workflow)


@app.command(name="set")
def _set(field: str, value: str, /) -> None:
    """Set one free-text field of the idea

    Args:
        field: Field name, e.g. title or problem_statement.
        value: New text.
    """
    bench = build_workbench(CLIContext.get_current())
    step = BasicInfoStep(bench.workflow, bench.generator)
    try:
        step.update_field(field, value)
    except ValueError as e:
        exit_with_error(str(e), ExitCode.VALIDATION_ERROR)
    get_console().print(f"Set [cyan]{field}[/cyan]")


@app.command(name="next")
def _next() -> None:
    """Advance to the next step"""
    bench = build_workbench(CLIContext.get_current())
    moved = StepNavigator(bench.workflow).advance()
    _finish(bench.workflow, moved)
    get_console().print(f"Step: {bench.workflow.cursor.label}")


@app.command(name="back")
def _back() -> None:
    """Go back one step"""
    bench = build_workbench(CLIContext.get_current())
    StepNavigator(bench.workflow).retreat()
    get_console().print(f"Step: {bench.workflow.cursor.label}")


@app.command(name="goto")
def _goto(step: int, /) -> None:
    """Jump to a step (0 to 4)

    Args:
        step: Target step number.
    """
    bench = build_workbench(CLIContext.get_current())
    if not bench.workflow.set_cursor(step):
        exit_with_error(f"Invalid step: {step}", ExitCode.VALIDATION_ERROR)
    get_console().print(f"Step: {bench.workflow.cursor.label}")


@app.command(name="continue")
def _continue() -> None:
    """Run the current step's own continue action"""
    bench = build_workbench(CLIContext.get_current())
    workflow = bench.workflow
    step_class = CONTINUE_CLASSES.get(workflow.cursor)
    if step_class is None:
        exit_with_error("This is the last step", ExitCode.VALIDATION_ERROR)
    moved = step_class(workflow, bench.generator).continue_()
    _finish(workflow, moved)
    get_console().print(f"Step: {workflow.cursor.label}")


@app.command(name="feedback")
def _feedback() -> None:
    """Generate AI feedback for the idea"""

    async def _action(bench: Workbench) -> bool:
        if bench.workflow.cursor is RefinementStep.DETAILED_REFINEMENT:
            return await DetailedRefinementStep(bench.workflow, bench.generator).generate_feedback()
        return await BasicInfoStep(bench.workflow, bench.generator).generate_feedback()

    bench = _run_with_remote(_action)
    feedback = bench.workflow.document.ai_feedback
    if feedback is not None:
        console = get_console()
        for name, items in feedback.model_dump().items():
            if items:
                console.print(f"[bold]{name.replace('_', ' ').title()}[/bold]")
                for item in items:
                    console.print(f"  - {item}")


@app.command(name="variations")
def _variations() -> None:
    """Generate concept variations"""

    async def _action(bench: Workbench) -> bool:
        return await ConceptVariationsStep(bench.workflow, bench.generator).generate_variations()

    bench = _run_with_remote(_action)
    for variation in bench.workflow.document.concept_variations or ():
        get_console().print(f"[cyan]{variation.id}[/cyan]  {variation.title}")


@app.command(name="select")
def _select(variation_id: str, /) -> None:
    """Select one concept variation

    Args:
        variation_id: Id shown by `refine show`.
    """
    bench = build_workbench(CLIContext.get_current())
    step = ConceptVariationsStep(bench.workflow, bench.generator)
    if not step.select_variation(variation_id):
        exit_with_error(f"No variation with id {variation_id}", ExitCode.NOT_FOUND)
    get_console().print(f"Selected {variation_id}")


@app.command(name="merge")
def _merge(*variation_ids: str) -> None:
    """Merge two to five concept variations

    Args:
        variation_ids: Ids of the variations to merge.
    """
    bench = build_workbench(CLIContext.get_current())
    step = ConceptVariationsStep(bench.workflow, bench.generator)
    step.toggle_merge_mode()
    for variation_id in variation_ids:
        if step.document.variation(variation_id) is None:
            exit_with_error(f"No variation with id {variation_id}", ExitCode.NOT_FOUND)
        if not step.select_variation(variation_id):
            break
    merged = step.merge_selected()
    _finish(bench.workflow, merged)
    if bench.workflow.document.merged_variation is not None:
        get_console().print(bench.workflow.document.merged_variation.title)


@app.command(name="suggest")
def _suggest(
    *,
    force: Annotated[bool, Parameter(help="Regenerate even if suggestions exist")] = False,
) -> None:
    """Generate business-model suggestions"""

    async def _action(bench: Workbench) -> bool:
        step = BusinessModelStep(bench.workflow, bench.generator)
        if force:
            return await step.generate_suggestions()
        await step.ensure_suggestions()
        return True

    bench = _run_with_remote(_action)
    _render(bench.workflow)


@app.command(name="toggle")
def _toggle(category: SuggestionCategory, item: str, /) -> None:
    """Toggle a business suggestion in the selection

    Args:
        category: Suggestion category.
        item: Suggestion text.
    """
    bench = build_workbench(CLIContext.get_current())
    selected = BusinessModelStep(bench.workflow, bench.generator).toggle_suggestion(
        category, item
    )
    get_console().print(f"{'Selected' if selected else 'Deselected'} {item}")


@app.command(name="apply-suggestions")
def _apply_suggestions() -> None:
    """Fill empty detail fields from the selected suggestions"""
    bench = build_workbench(CLIContext.get_current())
    changed = DetailedRefinementStep(bench.workflow, bench.generator).apply_suggestions()
    get_console().print("Applied suggestions" if changed else "Nothing to apply")


@app.command(name="components")
def _components(
    component: ComponentType,
    /,
    *,
    pick: Annotated[
        int | None, Parameter(help="Write the N-th candidate (1-based) into the idea")
    ] = None,
) -> None:
    """Generate alternatives for one idea component

    Args:
        component: Component to vary.
        pick: Candidate to apply immediately.
    """
    holder: list[ComponentVariationsStep] = []

    async def _action(bench: Workbench) -> bool:
        step = ComponentVariationsStep(bench.workflow, bench.generator)
        holder.append(step)
        return await step.generate(component)

    _ = _run_with_remote(_action)
    step = holder[0]
    candidates = step.candidates.get(component, ())
    for index, candidate in enumerate(candidates, start=1):
        get_console().print(f"[cyan]{index}[/cyan]  {candidate.text}")
    if pick is not None:
        if not 1 <= pick <= len(candidates):
            exit_with_error(f"No candidate {pick}", ExitCode.NOT_FOUND)
        step.select(component, candidates[pick - 1].id)
        get_console().print(f"Updated [cyan]{component.value}[/cyan]")


@app.command(name="save")
def _save() -> None:
    """Save the idea to the remote data service"""
    ctx = CLIContext.get_current()

    async def _main() -> IdeaWorkflow:
        async with open_remote(ctx) as remote:
            bench = build_workbench(ctx, remote)
            await bench.saver.save(bench.workflow)
            return bench.workflow

    workflow = anyio.run(_main)
    _finish(workflow, workflow.error is None, ExitCode.REMOTE_ERROR)


@app.command(name="clear")
def _clear() -> None:
    """Discard the locally saved draft"""
    bench = build_workbench(CLIContext.get_current())
    if not bench.workflow.clear_local_storage():
        exit_with_error("Could not clear the local draft", ExitCode.INTERNAL_ERROR)
    get_console().print("Local draft cleared")
