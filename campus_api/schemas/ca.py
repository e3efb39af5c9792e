"""CA Application Schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CAApplyRequest(BaseModel):
    """Body of POST /ca/apply.

    The statement is optional here so that a missing or blank statement
    reaches the workflow and gets its dedicated message.
    """
    model_config = ConfigDict(populate_by_name=True)

    application_statement: str | None = Field(
        None, alias="applicationStatement", max_length=5000,
    )
