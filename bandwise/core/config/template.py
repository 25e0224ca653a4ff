from .base import BaseSettings


class TemplateSettings(BaseSettings):
    # prompt templates, relative to the directory holding the package
    llm_path: str = "bandwise/templates/llm"
