"""Tests for extract_locations.demonyms module."""

from pathlib import Path

from extract_locations.demonyms import DemonymMap


class TestFromFile:
    def test_bundled_table(self) -> None:
        demonyms = DemonymMap.from_file()

        assert demonyms.lookup("French") == "France"
        assert demonyms.lookup("Frenchmen") == "France"
        assert demonyms.lookup("Germans") == "Germany"
        assert demonyms.lookup("Brits") == "United Kingdom"
        assert demonyms.lookup("Americans") == "United States"

    def test_header_rows_are_skipped(self) -> None:
        demonyms = DemonymMap.from_file()

        assert demonyms.lookup("Adjectivals") is None
        assert demonyms.lookup("Demonyms") is None

    def test_custom_file(self, tmp_path: Path) -> None:
        path = tmp_path / "demonyms.tsv"
        path.write_text(
            "Country\tAdjectivals\tDemonyms\n"
            "\t\t\n"
            "Peru\tPeruvian\tPeruvians\n"
            "\n"
            "Chile\tChilean\tChileans, Chileños\n",
            encoding="utf-8",
        )

        demonyms = DemonymMap.from_file(path)

        assert len(demonyms) == 5
        assert demonyms.lookup("Chileños") == "Chile"
        assert demonyms.lookup("Peruvian") == "Peru"

    def test_multi_word_entries_are_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "demonyms.tsv"
        path.write_text(
            "Country\tAdjectivals\tDemonyms\n"
            "\t\t\n"
            "United States\tAmerican, U.S.\tAmericans\n"
            "France\tFrench\tFrench people\n",
            encoding="utf-8",
        )

        demonyms = DemonymMap.from_file(path)

        assert demonyms.mapping == {
            "American": "United States",
            "Americans": "United States",
            "French": "France",
        }

    def test_bundled_entries_are_single_words(self) -> None:
        demonyms = DemonymMap.from_file()

        for demonym, country in demonyms.mapping.items():
            assert demonyms.replace_all(demonym) == country


class TestReplaceAll:
    def test_replaces_whole_words(self) -> None:
        demonyms = DemonymMap({"French": "France", "Germans": "Germany"})

        result = demonyms.replace_all("French and Germans met; Frenchy did not.")

        assert result == "France and Germany met; Frenchy did not."

    def test_is_case_sensitive(self) -> None:
        demonyms = DemonymMap({"French": "France"})

        assert demonyms.replace_all("french fries") == "french fries"

    def test_no_mapping_leaves_text(self) -> None:
        assert DemonymMap().replace_all("The Italian team") == "The Italian team"

    def test_lookup_missing(self) -> None:
        assert DemonymMap({"Spanish": "Spain"}).lookup("Spaniards") is None
