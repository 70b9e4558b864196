import pytest

from gemini_companion.core.types import Failure, Success
from gemini_companion.exceptions import GenerationServiceError
from gemini_companion.state.paging import paginate
from gemini_companion.state.translation import (
    TARGET_LANGUAGES,
    apply_translation,
    has_translation_marker,
    language_label,
    original_text,
    translate_in_place,
    translation_marker,
)

pytestmark = pytest.mark.unit


class RecordingTranslator:
    def __init__(self, result="translated"):
        self.result = result
        self.inputs = []

    def __call__(self, text):
        self.inputs.append(text)
        if isinstance(self.result, Exception):
            return Failure(self.result)
        return Success(self.result)


@pytest.fixture
def paged():
    return paginate("first page.second page", window=11)


class TestLanguages:
    def test_twelve_target_languages(self):
        assert len(TARGET_LANGUAGES) == 12
        assert language_label("de") == "Deutsch (German)"

    def test_unknown_code_passes_through(self):
        assert language_label("xx") == "xx"

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            TARGET_LANGUAGES["xx"] = "X"  # type: ignore[index]


class TestMarker:
    def test_marker_names_language(self):
        assert "English" in translation_marker("English")

    def test_detection_is_per_language(self):
        page = "Hallo" + translation_marker("Deutsch (German)")
        assert has_translation_marker(page, "Deutsch (German)")
        assert not has_translation_marker(page, "English")

    def test_original_text_strips_marker(self):
        page = "Bonjour" + translation_marker("Français (French)")
        assert original_text(page) == "Bonjour"
        assert original_text("plain") == "plain"


class TestTranslateInPlace:
    def test_translates_page_and_appends_marker(self, paged):
        translator = RecordingTranslator("erste Seite.")

        outcome = translate_in_place(paged, 0, "Deutsch (German)", translator)

        assert isinstance(outcome, Success)
        assert translator.inputs == ["first page."]
        assert outcome.value[0] == "erste Seite." + translation_marker("Deutsch (German)")
        assert outcome.value[1] == paged[1]

    def test_second_request_for_same_language_is_skipped(self, paged):
        translator = RecordingTranslator("erste Seite.")
        once = translate_in_place(paged, 0, "Deutsch (German)", translator).value

        twice = translate_in_place(once, 0, "Deutsch (German)", translator)

        assert translator.inputs == ["first page."]
        assert twice == Success(once)

    def test_other_language_translates_from_original_text(self, paged):
        translator = RecordingTranslator("premiere page.")
        german = apply_translation(paged, 0, "erste Seite.", "Deutsch (German)").value

        outcome = translate_in_place(german, 0, "Français (French)", translator)

        assert translator.inputs == ["erste Seite."]
        assert has_translation_marker(outcome.value[0], "Français (French)")
        assert not has_translation_marker(outcome.value[0], "Deutsch (German)")

    @pytest.mark.parametrize("index", [-1, 2])
    def test_index_out_of_range_never_calls_translator(self, paged, index):
        translator = RecordingTranslator()
        outcome = translate_in_place(paged, index, "English", translator)
        assert isinstance(outcome, Failure)
        assert outcome.reason == "index-out-of-range"
        assert translator.inputs == []

    def test_translator_failure_is_returned(self, paged):
        translator = RecordingTranslator(GenerationServiceError("quota"))
        outcome = translate_in_place(paged, 1, "English", translator)
        assert isinstance(outcome, Failure)
        assert outcome.reason == "generation-failed"

    def test_apply_translation_strips_whitespace(self, paged):
        outcome = apply_translation(paged, 1, "  text \n", "English")
        assert outcome.value[1] == "text" + translation_marker("English")
