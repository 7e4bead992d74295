import pytest

from backend.errors import InvalidInputError
from backend.state import TextState


@pytest.mark.e2e
def test_accept_while_typing_replaces_prefix_without_space():
    st = TextState()
    for ch in "I say hel":
        st.insert_character(ch)
    prior = st.accept_suggestion("hello")
    assert prior == "I say "
    assert st.sentence == "I say hello"
    assert st.current_word == ""


@pytest.mark.e2e
def test_accept_between_words_adds_one_space_when_needed():
    st = TextState()
    st.replace_sentence("good")
    st.accept_suggestion("morning")
    assert st.sentence == "good morning"


@pytest.mark.e2e
def test_accept_between_words_after_space_adds_none():
    st = TextState()
    for ch in "good ":
        st.insert_character(ch)
    st.accept_suggestion("morning")
    assert st.sentence == "good morning"


@pytest.mark.e2e
def test_accept_on_empty_sentence_adds_no_space():
    st = TextState()
    st.accept_suggestion("the")
    assert st.sentence == "the"


@pytest.mark.e2e
@pytest.mark.parametrize("bad", ["", "   ", "\t"])
def test_accept_rejects_blank(bad):
    st = TextState()
    st.replace_sentence("abc ")
    with pytest.raises(InvalidInputError):
        st.accept_suggestion(bad)
    assert st.sentence == "abc "


@pytest.mark.e2e
def test_replace_sentence_clears_word_in_progress():
    st = TextState()
    for ch in "typing":
        st.insert_character(ch)
    st.replace_sentence("the quick brown fox")
    assert st.sentence == "the quick brown fox"
    assert st.current_word == ""
    assert not st.is_word_in_progress()
