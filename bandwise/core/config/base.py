import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings

from bandwise.model import BaseModel


# NOTE: BaseModel is listed last so that its config (dump by alias) is merged
#       over pydantic-settings' own
class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        # specifically allow initialization with a dict
        if cf is not None:
            kwargs = {**cf, **kwargs}
        super().__init__(**kwargs)


class BaseSecrets(BaseSettings):
    pass
