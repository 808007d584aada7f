"""Shared type aliases for RxPy operators."""

from collections.abc import Callable, Sequence

from reactivex import Observable
from reactivex.abc import ObservableBase

type Operator[T, U] = Callable[[Observable[T]], Observable[U]]

# Selectors receive an immutable snapshot of the buffered values
type Selector[T, U] = Callable[[Sequence[T]], ObservableBase[U]]
