"""Interactive questions about where a component's props are declared."""

from __future__ import annotations

from typing import Callable

from .models import PropsInfo

SEPARATE_FILE_QUESTION = "Is the interface or type of the component in a separate file? (Y/N): "
FILE_PATH_QUESTION = "Please enter the path of the file: "
DECLARATION_NAME_QUESTION = "Enter the name of the interface or type of the props: "


def ask_props_info(input_fn: Callable[[str], str] = input) -> PropsInfo:
    """Ask the user for the props file and declaration name.

    Blank answers become ``None``: no file means the component file itself is
    used, no name means the props type is auto-detected.
    """
    answer = input_fn(SEPARATE_FILE_QUESTION)
    file_path = None
    if answer.strip().lower() in {"y", "yes"}:
        file_path = input_fn(FILE_PATH_QUESTION).strip() or None
    declaration_name = input_fn(DECLARATION_NAME_QUESTION).strip() or None
    return PropsInfo(file_path=file_path, declaration_name=declaration_name)


__all__ = ["ask_props_info"]
