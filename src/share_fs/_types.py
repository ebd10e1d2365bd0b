"""Type aliases used throughout share_fs."""

from __future__ import annotations

import os  # noqa: TC003
from collections.abc import Iterable
from typing import Any, Callable, Union

PathLike = Union[str, "os.PathLike[str]"]  # noqa: UP007
Lines = Iterable[str]
RemoteHandle = Any
HostResolver = Callable[[str], str]
