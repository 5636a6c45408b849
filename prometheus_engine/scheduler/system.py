"""Turning plain functions into systems that receive their parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterator, List, MutableMapping, get_args, get_origin

from .params import Access, Commands, EventReader, EventWriter, MutWorld, RefWorld, Res, ResMut

_GENERIC_PARAMS = (Res, ResMut, EventReader, EventWriter)
_PLAIN_PARAMS = (RefWorld, MutWorld, Commands)

_CO_VARARGS = 0x04
_CO_VARKEYWORDS = 0x08
_MISSING = object()


@dataclass(frozen=True)
class _Param:
    name: str
    kind: Any
    target: Any
    keyword: bool


@dataclass(frozen=True)
class _Declared:
    name: str
    annotation: Any
    has_default: bool
    positional_only: bool


def _describe(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", None) or repr(func)


def _code_target(func: Callable[..., Any]) -> tuple[Any, bool]:
    """Return the plain function behind ``func`` and whether its first argument is bound."""
    inner = getattr(func, "__func__", None)
    if inner is not None and hasattr(inner, "__code__"):
        return inner, True
    if hasattr(func, "__code__"):
        return func, False
    call = getattr(type(func), "__call__", None)
    call = getattr(call, "__func__", call)
    if call is not None and hasattr(call, "__code__"):
        return call, True
    raise TypeError(f"cannot read the parameters of system {_describe(func)}")


def _declared(func: Callable[..., Any]) -> Iterator[_Declared]:
    name = _describe(func)
    target, bound = _code_target(func)
    code = target.__code__
    if code.co_flags & _CO_VARARGS:
        var_name = code.co_varnames[code.co_argcount + code.co_kwonlyargcount]
        raise TypeError(f"system {name} cannot take variable parameter {var_name!r}")
    if code.co_flags & _CO_VARKEYWORDS:
        index = code.co_argcount + code.co_kwonlyargcount + (1 if code.co_flags & _CO_VARARGS else 0)
        raise TypeError(f"system {name} cannot take variable parameter {code.co_varnames[index]!r}")

    annotations = getattr(target, "__annotations__", None) or {}
    defaults = getattr(target, "__defaults__", None) or ()
    kwdefaults = getattr(target, "__kwdefaults__", None) or {}

    positional = code.co_varnames[: code.co_argcount]
    first_default = len(positional) - len(defaults)
    for index, param_name in enumerate(positional):
        if bound and index == 0:
            continue
        yield _Declared(
            param_name,
            annotations.get(param_name, _MISSING),
            index >= first_default,
            index < code.co_posonlyargcount,
        )
    keyword_only = code.co_varnames[code.co_argcount : code.co_argcount + code.co_kwonlyargcount]
    for param_name in keyword_only:
        yield _Declared(
            param_name,
            annotations.get(param_name, _MISSING),
            param_name in kwdefaults,
            False,
        )


def _resolve(func: Callable[..., Any]) -> List[_Param]:
    name = _describe(func)
    params: List[_Param] = []
    for declared in _declared(func):
        annotation = declared.annotation
        if annotation is _MISSING:
            if declared.has_default and not declared.positional_only:
                continue
            raise TypeError(f"parameter {declared.name!r} of system {name} has no annotation")
        if isinstance(annotation, str):
            raise TypeError(
                f"cannot resolve annotation {annotation!r} of parameter {declared.name!r} in system {name}"
            )
        keyword = not declared.positional_only
        origin = get_origin(annotation)
        if origin in _GENERIC_PARAMS:
            args = get_args(annotation)
            if len(args) != 1:
                raise TypeError(f"parameter {declared.name!r} of system {name} needs one type argument")
            params.append(_Param(declared.name, origin, args[0], keyword))
        elif annotation in _GENERIC_PARAMS:
            raise TypeError(
                f"parameter {declared.name!r} of system {name} needs a type argument, "
                f"as in {annotation.__name__}[SomeType]"
            )
        elif annotation in _PLAIN_PARAMS:
            params.append(_Param(declared.name, annotation, None, keyword))
        else:
            raise TypeError(
                f"parameter {declared.name!r} of system {name} has unsupported annotation {annotation!r}"
            )
    return params


class FunctionSystem:
    """A function whose parameters are filled from the scheduler's resources."""

    def __init__(self, func: Callable[..., Any]) -> None:
        self.func = func
        self._params = _resolve(func)

    @property
    def name(self) -> str:
        """The name of the wrapped function."""
        return _describe(self.func)

    def run(
        self,
        resources: MutableMapping[Hashable, Any],
        accesses: Dict[Hashable, Access],
    ) -> None:
        """Claim access for every parameter, then call the function with them."""
        for param in self._params:
            param.kind._declare_access(accesses, param.target)
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for param in self._params:
            value = param.kind._fetch(resources, param.target)
            if param.keyword:
                kwargs[param.name] = value
            else:
                args.append(value)
        self.func(*args, **kwargs)

    def __repr__(self) -> str:
        return f"FunctionSystem({self.name})"


def into_system(func: Any) -> FunctionSystem:
    """Wrap ``func`` as a system; a system is returned unchanged."""
    if isinstance(func, FunctionSystem):
        return func
    if not callable(func):
        raise TypeError(f"expected a callable system, got {func!r}")
    return FunctionSystem(func)