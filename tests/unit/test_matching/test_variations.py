"""Tests for search-term variation generation."""

from __future__ import annotations

from gamecatalog.matching.variations import MIN_VARIATION_LENGTH, generate


class TestGenerate:
    """Tests for generate()."""

    def test_year_tagged_title(self) -> None:
        assert generate("The Witcher 3: Wild Hunt (2015)") == [
            "The Witcher 3: Wild Hunt (2015)",
            "The Witcher 3: Wild Hunt",
        ]

    def test_glyph_stripped_form_first_then_raw(self) -> None:
        assert generate("Tomb Raider™ Definitive Edition") == [
            "Tomb Raider Definitive Edition",
            "Tomb Raider™ Definitive Edition",
            "Tomb Raider",
        ]

    def test_bare_qualifier(self) -> None:
        assert generate("Alan Wake Remastered") == ["Alan Wake Remastered", "Alan Wake"]

    def test_year_and_edition(self) -> None:
        assert generate("Dark Souls: Remastered (2018)") == [
            "Dark Souls: Remastered (2018)",
            "Dark Souls: Remastered",
            "Dark Souls (2018)",
            "Dark Souls",
        ]

    def test_director_cut(self) -> None:
        variations = generate("Death Stranding Director's Cut")
        assert variations[0] == "Death Stranding Director's Cut"
        assert variations[-1] == "Death Stranding"

    def test_no_duplicates(self) -> None:
        variations = generate("Halo: Reach (2010)")
        assert len(variations) == len(set(variations))

    def test_short_derived_variations_dropped(self) -> None:
        assert generate("Abc Remastered") == ["Abc Remastered"]

    def test_first_variation_kept_even_if_short(self) -> None:
        assert generate("Ico") == ["Ico"]

    def test_derived_variations_respect_min_length(self) -> None:
        for variation in generate("Doom (2016) Deluxe Edition")[1:]:
            assert len(variation) >= MIN_VARIATION_LENGTH

    def test_empty_title(self) -> None:
        assert generate("") == []
        assert generate("™") == []

    def test_explicit_year_hint(self) -> None:
        """A year hint without a year tag in the title adds no variation."""
        assert generate("Alan Wake", year="2010") == ["Alan Wake"]
