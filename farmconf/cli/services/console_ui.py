"""Terminal implementation of the workflow UI (rich tables, questionary prompts)."""

from typing import Callable, Mapping, Optional, Sequence

import questionary
from rich import box
from rich.console import Console
from rich.table import Table

from ...application.propagation import PropagationReport
from ...domain.contracts.configuration_payload import ConfigurationPayload
from ...domain.contracts.workflow_ui import WorkflowUI
from ...domain.discovery.discovery_service import DiscoveryResult
from ...domain.model.service_instance import ServiceInstance
from ...domain.model.workflow import OperatingMode
from ..errors import CLIError
from .parameter_registry import build_payload, get_all_parameters, ParameterDefinition, validate_values

NO_INSTANCES_WARNING = "No local web applications found on this machine"


def render_instances(
    console: Console,
    result: DiscoveryResult,
    config_path_for: Callable[[ServiceInstance], str] | None = None,
) -> None:
    """Print the discovered instances, or the empty-discovery warning."""
    if result.no_local_instances:
        console.print(f"  [bold yellow]{NO_INSTANCES_WARNING}[/bold yellow] (node: {result.node_name})")
    else:
        table = Table(box=box.SIMPLE, padding=(0, 2))
        table.add_column("#", style="dim", justify="right")
        table.add_column("Web application", style="bold")
        table.add_column("Path")
        if config_path_for is not None:
            table.add_column("Config file", style="dim")
        table.add_column("Kind", style="dim")

        for index, instance in enumerate(result.instances, start=1):
            row = [str(index), instance.display_name, instance.base_path]
            if config_path_for is not None:
                row.append(config_path_for(instance))
            row.append("management" if instance.is_management_instance else "content")
            table.add_row(*row)

        console.print(table)

    if result.issues:
        console.print(f"  [dim]{len(result.issues)} candidates skipped during discovery:[/dim]")
        for issue in result.issues:
            target = issue.candidate or "(directory query)"
            console.print(f"  [dim]  {issue.directory}: {target} - {issue.error_type}: {issue.message}[/dim]")


class ConsoleWorkflowUI(WorkflowUI):
    """Workflow UI for the terminal.

    Interactive mode asks with questionary. Non-interactive mode takes the
    selection from ``selected_keys``/``select_all`` and the parameters from
    ``parameter_values``, falling back to ``parameter_defaults`` and the
    registry defaults.
    """

    def __init__(
        self,
        console: Console,
        mode: OperatingMode,
        interactive: bool = True,
        selected_keys: Sequence[str] = (),
        select_all: bool = False,
        parameter_values: Optional[Mapping[str, str]] = None,
        parameter_defaults: Optional[Mapping[str, str]] = None,
        config_path_for: Callable[[ServiceInstance], str] | None = None,
    ):
        self._console = console
        self._mode = mode
        self._interactive = interactive
        self._selected_keys = list(selected_keys)
        self._select_all = select_all
        self._parameter_values = dict(parameter_values or {})
        self._parameter_defaults = dict(parameter_defaults or {})
        self._config_path_for = config_path_for
        self._result: DiscoveryResult | None = None

    def present(self, result: DiscoveryResult) -> None:
        self._result = result
        if self._mode is OperatingMode.EDIT and not result.no_local_instances:
            self._console.print(
                "  Local web applications and their config files. "
                "Edit a config file to change the search parameters of one web application."
            )
        render_instances(
            self._console,
            result,
            self._config_path_for if self._mode is OperatingMode.EDIT else None,
        )

    def select(self, instances: Sequence[ServiceInstance]) -> Optional[list[ServiceInstance]]:
        if not self._interactive:
            return self._select_non_interactive(instances)

        if self._mode is OperatingMode.EDIT:
            accepted = questionary.confirm("Done reviewing web applications?", default=True).ask()
            return list(instances) if accepted else None

        choices = [
            questionary.Choice(
                title=f"{instance.display_name} - {instance.base_path}",
                value=instance.base_path,
                checked=True,
            )
            for instance in instances
        ]
        chosen = questionary.checkbox("Web applications to configure:", choices=choices).ask()
        if chosen is None:
            return None
        if not chosen:
            self._console.print("  [yellow]No web applications selected[/yellow]")
            return None
        return [instance for instance in instances if instance.base_path in chosen]

    def _select_non_interactive(self, instances: Sequence[ServiceInstance]) -> list[ServiceInstance]:
        if self._select_all or not self._selected_keys:
            return list(instances)

        selected = []
        for key in self._selected_keys:
            instance = self._result.find(key) if self._result else None
            if instance is None:
                raise CLIError(
                    message=f"Unknown web application: {key}",
                    reason="Only web applications discovered on this node can be selected.",
                    suggestions=["Run 'farmconf discover' to list them"],
                )
            if instance not in selected:
                selected.append(instance)
        return selected

    def collect_parameters(self) -> Optional[ConfigurationPayload]:
        if not self._interactive:
            errors = validate_values(self._effective_values())
            if errors:
                raise CLIError(
                    message="Missing or invalid parameters",
                    reason="\n".join(errors),
                    suggestions=["Pass values with --set name=value", "Or run without -y to be prompted"],
                )
            return build_payload(self._effective_values())

        self._console.print("\n[bold]Search appliance parameters[/bold]")
        values: dict[str, str] = {}
        for parameter in get_all_parameters():
            if parameter.name in self._parameter_values:
                values[parameter.name] = self._parameter_values[parameter.name]
                continue
            answer = self._ask(parameter, self._default_for(parameter))
            if answer is None:
                return None
            values[parameter.name] = answer
        return build_payload(values)

    def report(self, report: PropagationReport) -> None:
        self._console.print(f"\n  [green]Updated {report.count} config files:[/green]")
        for path in report.written:
            self._console.print(f"    [green]+[/green] {path}")

    def _effective_values(self) -> dict[str, str | None]:
        values: dict[str, str | None] = {p.name: self._default_for(p) for p in get_all_parameters()}
        values.update(self._parameter_values)
        return values

    def _default_for(self, parameter: ParameterDefinition) -> str | None:
        return self._parameter_defaults.get(parameter.name, parameter.default)

    @staticmethod
    def _ask(parameter: ParameterDefinition, default: str | None) -> str | None:
        if parameter.config_type == "choice":
            return questionary.select(
                f"{parameter.prompt}:",
                choices=list(parameter.choices),
                default=default if default in parameter.choices else None,
            ).ask()

        def _validate(text: str):
            error = parameter.validate(text)
            return True if error is None else error

        return questionary.text(
            f"{parameter.prompt}:",
            default=default or "",
            validate=_validate,
        ).ask()
