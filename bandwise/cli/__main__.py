from __future__ import annotations

import importlib
import sys
import threading
import traceback
import types
import typing as t
from pathlib import Path

import pydantic as p

import bandwise
import bandwise.lib.cli as click
from bandwise.core import BandwiseContainer
from bandwise.model import DeploymentEnvironment

ConfigRoot = Path(bandwise.__file__).resolve().parents[1] / "config"

# command name -> module under bandwise.cli defining a click command of the same name
Commands: dict[str, str] = {
    "evaluate": "bandwise.cli.evaluate",
    "generate": "bandwise.cli.generate",
}


class LazyCommands(click.Group):
    """Imports a command's module only when that command is invoked.

    Imported modules are remembered so `main` can wire them into the container
    before the command body runs.
    """

    loaded: list[types.ModuleType] = []

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(Commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if (module_name := Commands.get(cmd_name)) is None:
            return None
        module = importlib.import_module(module_name)
        if module not in self.loaded:
            self.loaded.append(module)
        return getattr(module, cmd_name)


@click.group(cls=LazyCommands)
@click.version_option(bandwise.__version__, prog_name="bandwise")
@click.option("-E", "--env", default=DeploymentEnvironment.Local, type=click.EnumType(DeploymentEnvironment))
@click.option("-c", "--config-root", default=ConfigRoot, type=click.URIParamType(dir_ok=True))
@click.option("-s", "--secrets-path", default=None, type=click.URIParamType(dir_ok=True))
@click.option(
    "-o",
    "--override",
    multiple=True,
    help="override a setting by dotted path, e.g., -o recovery.max_repairs=4",
)
@click.option("-D", "--debug", is_flag=True, default=False)
@click.pass_obj
def main(
    ct: BandwiseContainer,
    env: DeploymentEnvironment,
    config_root: p.FileUrl,
    secrets_path: p.AnyUrl | None,
    override: tuple[str, ...],
    debug: bool,
):
    BandwiseContainer.boot(
        ct,
        debug=debug,
        env=env,
        config_root=config_root,
        secrets_path=secrets_path,
        override=override,
        wiring=tuple(LazyCommands.loaded),
    )


def _report(ex: Exception, container: BandwiseContainer, argv: list[str]) -> None:
    click.echo(click.style("ERROR ", fg="red") + str(ex), file=sys.stderr)
    # the container only knows the flag once boot has run
    if container.debug() or "-D" in argv or "--debug" in argv:
        traceback.print_exc()


def execute_command(*argv: str) -> None:
    threading.current_thread().name = "bandwise-0"
    prog, *args = list(argv or sys.argv)
    container = BandwiseContainer()

    code: int = 0
    try:
        with main.make_context(Path(prog).name, args=args) as ctx:
            ctx.obj = container
            code = t.cast(int | None, main.invoke(ctx)) or 0
    except (EOFError, KeyboardInterrupt, click.Abort):
        click.echo("Aborted!", file=sys.stderr)
        code = 1
    except click.exceptions.Exit as ex:
        code = ex.exit_code
    except click.ClickException as ex:
        ex.show()
        code = ex.exit_code
    except Exception as ex:
        _report(ex, container, args)
        code = -1
    finally:
        container.shutdown_resources()
    sys.exit(code)


if __name__ == "__main__":
    execute_command(*sys.argv)
