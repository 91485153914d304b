import pytest

from backend.core.classifiers import is_negative_comment


@pytest.mark.parametrize(
    "comment",
    [
        "The room was DIRTY",
        "shower broken again",
        "ክፍሉ ቆሻሻ ነበር",
        "badminton court",  # substring match, not whole-word
    ],
)
def test_negative_keywords_match(comment):
    assert is_negative_comment(comment) is True


@pytest.mark.parametrize("comment", [None, "", "Lovely stay, thank you!"])
def test_no_keyword_is_not_negative(comment):
    assert is_negative_comment(comment) is False


def test_custom_keyword_list():
    assert is_negative_comment("meh", keywords=("meh",)) is True
    assert is_negative_comment("dirty", keywords=("meh",)) is False
