"""
Lectura de respuestas del usuario en la terminal
"""
import getpass
import sys
from typing import Callable, Optional

InputFunc = Callable[[str], str]


def prompt(text: str, default: str = "", input_func: Optional[InputFunc] = None) -> str:
    """
    Muestra text y devuelve la respuesta sin espacios

    Args:
        text: Texto de la pregunta
        default: Valor si la respuesta está vacía
        input_func: Función de lectura (input por defecto)

    Returns:
        Respuesta del usuario o default
    """
    answer = (input_func or input)(text).strip()
    return answer or default


def prompt_secret(text: str, input_func: Optional[InputFunc] = None) -> str:
    """Como prompt, pero sin eco cuando hay terminal"""
    if input_func is not None:
        return input_func(text).strip()
    if sys.stdin.isatty():
        return getpass.getpass(text).strip()
    return input(text).strip()


def confirm(text: str, input_func: Optional[InputFunc] = None) -> bool:
    """
    Pregunta y/n; solo una 'y' exacta (sin distinguir mayúsculas) confirma

    Fin de entrada cuenta como negativa.
    """
    try:
        answer = (input_func or input)(text)
    except EOFError:
        return False
    return answer.strip().lower() == "y"
