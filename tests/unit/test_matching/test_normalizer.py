"""Tests for title normalization and year extraction."""

from __future__ import annotations

import pytest

from gamecatalog.matching.normalizer import extract_year, normalize, strip_symbols


class TestNormalize:
    """Tests for normalize()."""

    def test_strips_trademark_glyphs(self) -> None:
        assert normalize("Tomb Raider™") == "tomb raider"
        assert normalize("Velocity®Ultra") == "velocity ultra"

    def test_removes_stop_words_and_punctuation(self) -> None:
        assert normalize("The Legend of Zelda: Breath of the Wild") == "legend zelda breath wild"

    def test_stop_words_are_whole_word_only(self) -> None:
        """'Anthem' and 'Theseus' keep their letters."""
        assert normalize("Anthem") == "anthem"
        assert normalize("Theseus") == "theseus"

    def test_strips_question_decoration(self) -> None:
        assert normalize("How long is Alan Wake?") == "alan wake"

    def test_removes_parenthesized_year(self) -> None:
        assert normalize("Tomb Raider (2013)") == "tomb raider"

    def test_removes_edition_phrase(self) -> None:
        assert normalize("Tomb Raider: Definitive Edition") == "tomb raider"
        assert normalize("Batman: Arkham Asylum Game of the Year Edition") == "batman arkham asylum"
        assert normalize("Spyro 25th Anniversary Edition") == "spyro"

    def test_removes_bare_qualifiers(self) -> None:
        assert normalize("BioShock Remastered") == "bioshock"
        assert normalize("Death Stranding Director's Cut") == "death stranding"

    def test_keeps_numerals(self) -> None:
        assert normalize("Metal Gear Solid V: The Phantom Pain") == "metal gear solid v phantom pain"
        assert normalize("Uncharted 4: A Thief's End") == "uncharted 4 thief s end"

    def test_folds_accents(self) -> None:
        assert normalize("Pokémon") == "pokemon"

    def test_empty_input(self) -> None:
        assert normalize("") == ""
        assert normalize(None) == ""

    @pytest.mark.parametrize(
        "title",
        [
            "The Witcher 3: Wild Hunt (2015)",
            "How long is The Last of Us Part II?",
            "Tomb Raider™ Definitive Edition",
            "The The Game",
            "A Plague Tale: Innocence",
            "Final Fantasy VII Remake",
        ],
    )
    def test_idempotent(self, title: str) -> None:
        once = normalize(title)
        assert normalize(once) == once


class TestStripSymbols:
    """Tests for strip_symbols()."""

    def test_strips_and_collapses(self) -> None:
        assert strip_symbols("  Tomb   Raider™ ") == "Tomb Raider"

    def test_keeps_case_and_punctuation(self) -> None:
        assert strip_symbols("The Witcher® 3: Wild Hunt (2015)") == "The Witcher 3: Wild Hunt (2015)"

    def test_text_forms(self) -> None:
        assert strip_symbols("Halo(TM) Infinite") == "Halo Infinite"

    def test_empty(self) -> None:
        assert strip_symbols("") == ""


class TestExtractYear:
    """Tests for extract_year()."""

    def test_parenthesized_year(self) -> None:
        assert extract_year("Tomb Raider (2013)") == "2013"

    def test_year_with_inner_spaces(self) -> None:
        assert extract_year("Doom ( 2016 )") == "2016"

    def test_bare_number_is_not_a_year(self) -> None:
        assert extract_year("FIFA 19") is None
        assert extract_year("Cyberpunk 2077") is None

    def test_none(self) -> None:
        assert extract_year(None) is None
