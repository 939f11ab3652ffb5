from __future__ import annotations

from typing import Any, Callable, Mapping

from frext.application.state.base import StateHolder, StateModel


class FormStateModel(StateModel):
    values: dict[str, Any] = {}
    errors: dict[str, str] = {}

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class FormState(StateHolder[FormStateModel]):
    """Form values plus per-field error messages."""

    def __init__(self, initial_values: Mapping[str, Any]) -> None:
        super().__init__(FormStateModel(values=dict(initial_values)))

    @property
    def values(self) -> dict[str, Any]:
        return dict(self.state.values)

    @property
    def errors(self) -> dict[str, str]:
        return dict(self.state.errors)

    @property
    def has_errors(self) -> bool:
        return self.state.has_errors

    def update_field(self, field: str, value: Any) -> None:
        values = {**self.state.values, field: value}
        errors = {k: v for k, v in self.state.errors.items() if k != field}
        self._update(values=values, errors=errors)

    def set_field_error(self, field: str, error: str) -> None:
        self._update(errors={**self.state.errors, field: error})

    def clear_errors(self) -> None:
        self._update(errors={})

    def set_values(self, values: Mapping[str, Any] | Callable[[dict[str, Any]], Mapping[str, Any]]) -> None:
        if callable(values):
            values = values(dict(self.state.values))
        self._update(values=dict(values))
