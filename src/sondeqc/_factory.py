from __future__ import annotations

from typing import Any, Protocol

import attrs


class ProfileCheck(Protocol):
    name: str

    def apply(self, profile): ...


@attrs.define
class RegistryEntry:
    name: str = attrs.field()
    cls: type[ProfileCheck] = attrs.field(repr=False)
    kwargs: dict[str, Any] = attrs.field(repr=False, factory=dict)


@attrs.define
class ProfileCheckFactory:
    _registry: dict[str, RegistryEntry] = attrs.field(factory=dict)

    def register(
        self,
        name: str,
        cls: type[ProfileCheck],
        kwargs: dict[str, Any] | None = None,
    ):
        if kwargs is None:
            kwargs = {}
        self._registry[name] = RegistryEntry(name=name, cls=cls, kwargs=kwargs)

    def registered(self) -> list[str]:
        return list(self._registry)

    def create(self, name: str, **kwargs) -> ProfileCheck:
        try:
            entry = self._registry[name]
        except KeyError as e:
            raise ValueError(
                f"unknown profile check {name!r} "
                f"(registered: {', '.join(self._registry) or 'none'})"
            ) from e
        kwargs = {**entry.kwargs, **kwargs}

        return entry.cls(**kwargs)
