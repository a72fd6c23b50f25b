"""
SiteList Backend: Pydantic Request/Response Schemas
======================================================

What:  The API contract for the single action endpoint.
Why:   The request body is a tagged message: `action` selects one of a closed
       set of operations, and the remaining fields are only meaningful for
       some of them. Modelling the tag as an Enum gives the dispatcher an
       exhaustive set to branch on and a single place where unknown tags are
       rejected.
How:   parse_action_request() turns an already-decoded JSON value into an
       ActionRequest, or raises InvalidActionError.

Records are opaque: `data` and `id` are typed Any and passed through untouched.
"""

from enum import Enum
from typing import Any, List

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from sitelist.exceptions import InvalidActionError


class WebsiteAction(str, Enum):
    """The four operations on the collection."""

    GET = "get"
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


# ══════════════════════════════════════════════════════════════════════════
# Request Model
# ══════════════════════════════════════════════════════════════════════════


class ActionRequest(BaseModel):
    """
    What:  Decoded POST body: {action, data?, index?, id?}.

    Field usage by action:
        get:    none
        add:    data
        update: data, index
        delete: id

    Missing optional fields decode to None, the same as an explicit null.
    Unknown fields are ignored.
    """

    action: WebsiteAction = Field(description="Operation to perform")
    data: Any = Field(default=None, description="Website record for add/update")
    index: Any = Field(default=None, description="Position to replace for update")
    id: Any = Field(default=None, description="Identifier to remove for delete")

    model_config = {"extra": "ignore"}


def parse_action_request(payload: Any) -> ActionRequest:
    """
    Validate a decoded JSON body.

    Raises:
        InvalidActionError: payload is not an object, or `action` is missing
            or not one of the known values.
    """
    if not isinstance(payload, dict):
        raise InvalidActionError(context={"payload_type": type(payload).__name__})
    try:
        return ActionRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidActionError(action=payload.get("action")) from e


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class WebsiteListResponse(BaseModel):
    """Body of a successful `get`: the whole collection, in stored order."""

    websites: List[Any] = Field(default_factory=list)


class SuccessResponse(BaseModel):
    """Body of a successful add/update/delete. No affected-row count is reported."""

    success: bool = True
