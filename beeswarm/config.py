"""Process-wide default layout options."""

from __future__ import annotations

import copy

from .model import LayoutOptions, Margins

_DEFAULT_OPTIONS = LayoutOptions()
_DEFAULT_MARGINS = Margins()


def get_default_options() -> LayoutOptions:
    return copy.deepcopy(_DEFAULT_OPTIONS)


def set_default_options(options: LayoutOptions) -> None:
    global _DEFAULT_OPTIONS
    _DEFAULT_OPTIONS = copy.deepcopy(options)


def get_default_margins() -> Margins:
    return _DEFAULT_MARGINS


def set_default_margins(margins: Margins) -> None:
    global _DEFAULT_MARGINS
    _DEFAULT_MARGINS = margins
