import pydantic as p


class BaseModel(p.BaseModel):
    """Validates from field names or aliases; dumps by alias.

    Exam content and scores use camelCase aliases on the wire, as does the
    `()` factory key of logging formatter settings.
    """

    model_config = p.ConfigDict(populate_by_name=True, serialize_by_alias=True)


class FrozenModel(BaseModel):
    model_config = p.ConfigDict(frozen=True)
