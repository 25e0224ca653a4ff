import pathlib

import jinja2
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Dependency, Provider, ThreadSafeSingleton

from bandwise.llm.prompt import create_prompt_env


class TemplateContainer(DeclarativeContainer):
    @staticmethod
    def provide_llm_env(template_path: str, root_path: pathlib.Path) -> jinja2.Environment:
        """Provide Jinja2 environment for LLM prompt templates.

        `template_path` is resolved against the directory holding the package.
        """
        return create_prompt_env(root_path.joinpath(template_path))

    config: Configuration = Configuration(strict=True)
    root: Provider[pathlib.Path] = Dependency(instance_of=pathlib.Path)
    llm: Provider[jinja2.Environment] = ThreadSafeSingleton(provide_llm_env, config.llm_path, root)
