import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

from bandwise.model import DeploymentEnvironment

# given to the settings constructor, never read from a source
SkipKeys = frozenset({"env", "root", "override"})


def load_paths(state: dict[str, t.Any]) -> list[Path]:
    """Directories searched for YAML, lowest precedence first.

    `state` holds the `root` and `env` passed to the settings constructor.
    """
    root = state["root"]
    if isinstance(root, str):
        root = p.AnyUrl(root)
    if root.scheme != "file" or root.path is None:
        raise SettingsError(f"{root} is not a directory of YAML files")

    base = Path(root.path)
    env = DeploymentEnvironment(state["env"])
    if env is DeploymentEnvironment.Local:
        return [base]
    return [base, base / "env.d" / env.value]


def read_yaml(path: Path) -> t.Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf8"))
    except yaml.YAMLError as e:
        raise SettingsError(f"{path}: {e}") from e


class MappingSettingsSource(PydanticBaseSettingsSource):
    """A source whose values are a single mapping of field name to value.

    Subclasses implement `collect`, which runs once, after the constructor
    arguments are available in `current_state`.
    """

    def collect(self) -> dict[str, t.Any]:
        raise NotImplementedError

    @functools.cached_property
    def collected(self) -> dict[str, t.Any]:
        return self.collect()

    def fields(self) -> list[str]:
        return [name for name in self.settings_cls.model_fields if name not in SkipKeys]

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        value = self.collected.get(field_name)
        return value, field_name, isinstance(value, dict)

    def __call__(self) -> dict[str, t.Any]:
        return {name: self.collected[name] for name in self.fields() if name in self.collected}


class OverrideSettingsSource(MappingSettingsSource):
    """Dotted `key.path=value` options given on the command line.

    Values are parsed as YAML. Only the overridden keys are returned; the
    settings machinery deep-merges them over the lower precedence sources.
    """

    def collect(self) -> dict[str, t.Any]:
        tree: dict[str, t.Any] = {}
        for option in self.current_state.get("override", ()):
            key, sep, raw = option.partition("=")
            if not sep or not key.strip():
                raise SettingsError(f"override {option!r} is not of the form key=value")

            *parents, leaf = key.strip().split(".")
            node = tree
            for name in parents:
                node = node.setdefault(name, {})
            node[leaf] = yaml.safe_load(raw.strip())
        return tree


class YAMLCascadingSettingsSource(MappingSettingsSource):
    """Reads `<field>.yaml` from the root, replaced by `env.d/<env>/<field>.yaml`.

    Files are not merged: the most specific one wins whole.
    """

    def collect(self) -> dict[str, t.Any]:
        paths = load_paths(self.current_state)
        found: dict[str, t.Any] = {}
        for name in self.fields():
            files = [path / f"{name}.yaml" for path in paths if (path / f"{name}.yaml").exists()]
            if files:
                found[name] = read_yaml(files[-1])
        return found


class YAMLSecretsSource(MappingSettingsSource):
    """Reads the optional, unversioned `secrets.yaml` of the most specific load path."""

    filename: t.ClassVar[str] = "secrets.yaml"

    def collect(self) -> dict[str, t.Any]:
        for path in reversed(load_paths(self.current_state)):
            if (fn := path / self.filename).exists():
                return read_yaml(fn) or {}
        return {}
