"""Per-endpoint input/output contracts.

An :class:`EndpointContract` pairs one input model with the output shape of
every success status the endpoint may return. Inputs are parsed into a
tagged result (:class:`Accepted` or :class:`Invalid`) instead of raising, so
the error handlers dispatch on types rather than on messages.

Output policy: undeclared fields are stripped; a declared field that is
missing or has the wrong type, or a status with no declared shape, raises
:class:`ResponseContractError`, which surfaces as the 500 envelope.
"""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
import json
from types import MappingProxyType
from typing import Any
from typing import Generic
from typing import TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import TypeAdapter
from pydantic import ValidationError

from shopapi.core.errors import ValidationFailure
from shopapi.core.errors import issues_from_errors
from shopapi.schemas.error import ErrorEnvelope
from shopapi.schemas.error import ValidationIssue

InputT = TypeVar("InputT", bound=BaseModel)

MALFORMED_JSON_MESSAGE = "Malformed JSON body"


class ResponseContractError(RuntimeError):
    """A handler produced data that does not match its declared output."""


@dataclass(frozen=True)
class Accepted(Generic[InputT]):
    value: InputT


@dataclass(frozen=True)
class Invalid:
    issues: tuple[ValidationIssue, ...]


class EndpointContract(Generic[InputT]):
    """Immutable input/output declaration for one endpoint."""

    def __init__(
        self,
        *,
        outputs: Mapping[int, Any],
        input_model: type[InputT] | None = None,
        errors: tuple[int, ...] = (),
    ) -> None:
        if not outputs:
            raise ValueError("at least one output shape is required")
        self._input_model = input_model
        self._outputs = MappingProxyType(dict(outputs))
        self._adapters = MappingProxyType({code: TypeAdapter(shape) for code, shape in outputs.items()})
        self._errors = tuple(errors)

    @property
    def input_model(self) -> type[InputT] | None:
        return self._input_model

    @property
    def success_status(self) -> int:
        return min(self._outputs)

    def parse(self, payload: Any) -> Accepted[InputT] | Invalid:
        """Validate ``payload`` against the input model, collecting every issue."""
        if self._input_model is None:
            raise ValueError("contract declares no input model")
        try:
            value = self._input_model.model_validate(payload)
        except ValidationError as exc:
            return Invalid(issues=tuple(issues_from_errors(exc.errors())))
        return Accepted(value=value)

    def body(self) -> Callable[[Request], Awaitable[InputT]]:
        """Build a FastAPI dependency that yields the validated request body."""
        contract = self

        async def validated_body(request: Request) -> InputT:
            raw = await request.body()
            try:
                payload = json.loads(raw) if raw else None
            except (ValueError, RecursionError):
                raise ValidationFailure(
                    [ValidationIssue(field="body", message=MALFORMED_JSON_MESSAGE)]
                ) from None

            result = contract.parse(payload)
            if isinstance(result, Invalid):
                raise ValidationFailure(result.issues)
            return result.value

        return validated_body

    def shape(self, status_code: int, data: Any) -> Any:
        """Validate ``data`` against the output for ``status_code`` and return JSON-ready content."""
        adapter = self._adapters.get(status_code)
        if adapter is None:
            raise ResponseContractError(f"No output shape declared for status {status_code}")
        try:
            value = adapter.validate_python(data, from_attributes=True)
        except ValidationError as exc:
            raise ResponseContractError(
                f"Response for status {status_code} violates its declared shape: {exc.error_count()} error(s)"
            ) from exc
        return adapter.dump_python(value, mode="json", by_alias=True)

    def render(self, status_code: int, data: Any) -> JSONResponse:
        """Shape ``data`` and wrap it in a JSON response."""
        return JSONResponse(status_code=status_code, content=self.shape(status_code, data))

    def route_options(self) -> dict[str, Any]:
        """Keyword arguments for ``APIRouter`` route decorators (docs only)."""
        responses: dict[int | str, dict[str, Any]] = {
            code: {"model": shape} for code, shape in self._outputs.items()
        }
        for code in (*((400,) if self._input_model is not None else ()), *self._errors, 500):
            responses[code] = {"model": ErrorEnvelope}

        options: dict[str, Any] = {
            "status_code": self.success_status,
            "response_model": None,
            "responses": responses,
        }
        if self._input_model is not None:
            options["openapi_extra"] = {
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {
                            "schema": self._input_model.model_json_schema(by_alias=True),
                        }
                    },
                }
            }
        return options
