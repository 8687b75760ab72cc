"""Versioned holder for the validators attached to a control."""

from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

from .composition import compose


def _as_list(validators: Union[None, Callable, Iterable[Optional[Callable]]]) -> List[Callable]:
    if validators is None:
        return []
    if callable(validators):
        return [validators]
    return [v for v in validators if v is not None]


class ValidatorSet:
    """
    Ordered validator list plus its composed function.

    Every mutation bumps ``generation``, so callers detect "did the validator
    list change" by comparing generations instead of comparing composed
    functions.

    Usage:
        holder = ValidatorSet([Validators.required], composer=compose)
        before = holder.generation
        holder.remove(Validators.required)
        changed = holder.generation != before
    """

    def __init__(self, validators=None, composer: Callable[[Iterable[Any]], Optional[Callable]] = compose):
        self._composer = composer
        self._validators: List[Callable] = []
        self._composed: Optional[Callable] = None
        self.generation = 0
        self.set(validators)

    @property
    def composed(self) -> Optional[Callable]:
        return self._composed

    @property
    def validators(self) -> Tuple[Callable, ...]:
        return tuple(self._validators)

    def set(self, validators) -> None:
        self._validators = _as_list(validators)
        self._recompose()

    def add(self, validators) -> None:
        added = [v for v in _as_list(validators) if not self.has(v)]
        if added:
            self._validators.extend(added)
            self._recompose()

    def remove(self, validators) -> None:
        to_remove = _as_list(validators)
        kept = [v for v in self._validators if not any(v is r for r in to_remove)]
        if len(kept) != len(self._validators):
            self._validators = kept
            self._recompose()

    def has(self, validator: Callable) -> bool:
        return any(v is validator for v in self._validators)

    def clear(self) -> None:
        if self._validators:
            self._validators = []
            self._recompose()

    def _recompose(self) -> None:
        # composer validates callables, so a bad entry fails here at registration time
        self._composed = self._composer(self._validators)
        self.generation += 1

    def __len__(self) -> int:
        return len(self._validators)
