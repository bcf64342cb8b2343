from __future__ import annotations

from typing import List


def wrap(text: str, max_line_length: int) -> List[str]:
    """
    Quebra gulosa por número de caracteres (sem métrica de fonte).

    Palavra maior que o limite sai sozinha numa linha, sem hifenizar.
    Separação apenas por espaço simples; a ordem das palavras é mantida.
    """
    if max_line_length < 1:
        raise ValueError("max_line_length deve ser >= 1")
    if not text:
        return []

    lines: List[str] = []
    current = ""
    for word in text.split(" "):
        if len(word) > max_line_length:
            if current:
                lines.append(current)
            lines.append(word)
            current = ""
            continue
        candidate = word if not current else f"{current} {word}"
        if len(candidate) > max_line_length:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines
