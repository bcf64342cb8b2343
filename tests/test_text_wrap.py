import pytest

from etiquetas.layout.text_wrap import wrap


def test_wrap_greedy_packing_example():
    assert wrap("Leite Integral Piracanjuba", 10) == ["Leite", "Integral", "Piracanjuba"]


def test_wrap_single_overlong_word_is_not_split():
    assert wrap("Refrigerante", 5) == ["Refrigerante"]


def test_wrap_packs_words_while_they_fit():
    assert wrap("Arroz Tipo 1 Camil 5kg", 12) == ["Arroz Tipo 1", "Camil 5kg"]


def test_wrap_flushes_current_line_before_long_word():
    assert wrap("Suco de Maracujazeiro Natural", 8) == ["Suco de", "Maracujazeiro", "Natural"]


def test_wrap_empty_text():
    assert wrap("", 10) == []


def test_wrap_exact_length_fits():
    assert wrap("abcde fghij", 11) == ["abcde fghij"]
    assert wrap("abcde fghij", 10) == ["abcde", "fghij"]


def test_wrap_rejects_non_positive_width():
    with pytest.raises(ValueError):
        wrap("abc", 0)


@pytest.mark.parametrize("text", [
    "Biscoito Recheado Chocolate Trakinas 126g",
    "Detergente Líquido Ypê Neutro 500ml",
    "a bb ccc dddd eeeee ffffff ggggggg",
    "Supercalifragilistico x",
])
@pytest.mark.parametrize("n", [1, 3, 7, 23])
def test_wrap_preserves_words_and_bounds_lines(text, n):
    lines = wrap(text, n)
    assert " ".join(lines).split(" ") == text.split(" ")
    for line in lines:
        assert len(line) <= n or " " not in line
