"""
Unit tests for Mention Extraction Agent.
"""

import pytest
from dishpulse.agents.extraction import MentionExtractor, extract_from_documents
from dishpulse.models.document import Comment, Post
from dishpulse.models.mention import SourceKind


@pytest.fixture
def extractor():
    return MentionExtractor()


def names(mentions):
    return [m.name for m in mentions]


def test_empty_text_returns_no_mentions(extractor):
    """Empty text is not an error."""
    assert extractor.extract("", SourceKind.COMMENT, "c1") == []


def test_double_quoted_name(extractor):
    mentions = extractor.extract(
        'We finally tried "The Pasta House" last night', SourceKind.POST_BODY, "p1"
    )

    assert "The Pasta House" in names(mentions)


def test_single_quoted_name(extractor):
    mentions = extractor.extract(
        "Try 'The Pasta House' downtown", SourceKind.COMMENT, "c1"
    )

    assert "The Pasta House" in names(mentions)


def test_quoted_name_is_trimmed(extractor):
    mentions = extractor.extract('Go to "  The Pasta House " now', SourceKind.COMMENT, "c1")

    assert names(mentions) == ["The Pasta House"]


def test_name_length_bounds(extractor):
    """Names shorter than 3 or longer than 99 characters are noise."""
    long_name = "x" * 100
    text = f'"ab" then "abc" then "{long_name}" then "{"y" * 99}"'

    mentions = extractor.extract(text, SourceKind.POST_BODY, "p1")

    assert names(mentions) == ["abc", "y" * 99]


def test_no_mention_ever_outside_length_bounds(extractor):
    texts = [
        'I ate "a" and "" and "Ok"',
        "The restaurant called Ab was fine, and we ate food at Xy",
        '"' + "Long " * 30 + '"',
        "We eat at " + " ".join(["Mega"] * 40),
    ]

    for text in texts:
        for mention in extractor.extract(text, SourceKind.COMMENT, "c1"):
            assert 2 < len(mention.name) < 100


def test_keyword_followed_by_called_name(extractor):
    mentions = extractor.extract(
        "There is a pizzeria called Lucali Brooklyn nearby", SourceKind.POST_BODY, "p1"
    )

    assert names(mentions) == ["Lucali Brooklyn"]
    assert mentions[0].source == SourceKind.POST_BODY
    assert mentions[0].source_id == "p1"


def test_keyword_is_case_insensitive(extractor):
    mentions = extractor.extract("Best SUSHI Kura downtown", SourceKind.POST_TITLE, "p1")

    assert names(mentions) == ["Kura"]


def test_keyword_requires_capitalized_name(extractor):
    """A lower-case word after a keyword is not a name."""
    assert extractor.extract("the cafe downtown is nice", SourceKind.COMMENT, "c1") == []


def test_later_pass_bumps_count_without_overwriting(extractor):
    text = 'We tried "luna verde" and the bistro called Luna Verde again'

    mentions = extractor.extract(text, SourceKind.COMMENT, "c1")

    assert len(mentions) == 1
    assert mentions[0].name == "luna verde"  # First pass keeps its casing
    assert mentions[0].mentions == 2


def test_repeated_quoted_name_counts_each_occurrence(extractor):
    mentions = extractor.extract(
        '"Blue Lantern" again? Yes, "Blue Lantern".', SourceKind.COMMENT, "c1"
    )

    assert names(mentions) == ["Blue Lantern"]
    assert mentions[0].mentions == 2


def test_bare_capitalized_names_need_food_context(extractor):
    assert extractor.extract("Visited Golden Dragon yesterday", SourceKind.COMMENT, "c1") == []

    mentions = extractor.extract("We eat at Golden Dragon", SourceKind.COMMENT, "c1")
    assert names(mentions) == ["Golden Dragon"]


def test_bare_pass_skips_keywords_and_short_words(extractor):
    mentions = extractor.extract(
        "we ate food at the Bakery and at Rosa Mexicano", SourceKind.COMMENT, "c1"
    )

    assert names(mentions) == ["Rosa Mexicano"]


def test_bare_pass_never_bumps_existing_names(extractor):
    text = '"Golden Dragon" has the best food, Golden Dragon forever'

    mentions = extractor.extract(text, SourceKind.COMMENT, "c1")

    assert names(mentions) == ["Golden Dragon"]
    assert mentions[0].mentions == 1


def test_snippet_surrounds_match(extractor):
    text = "a" * 100 + ' "Corner Deli" ' + "b" * 100

    mentions = extractor.extract(text, SourceKind.POST_BODY, "p1")

    assert len(mentions) == 1
    assert mentions[0].snippet == text[51:151]
    assert "Corner Deli" in mentions[0].snippet


def test_snippet_clamped_at_text_start(extractor):
    text = '"Corner Deli" is open late'

    mentions = extractor.extract(text, SourceKind.POST_BODY, "p1")

    assert mentions[0].snippet == text


def test_extract_from_documents_tags_source_kind():
    posts = [Post(id="p1", title='Is "Joe\'s Pizza" good', body='"Corner Deli" rocks', channel="food")]
    comments = [Comment(id="c1", body='"Blue Lantern" for sure', channel="food")]

    mentions = extract_from_documents(posts, comments)

    assert [(m.name, m.source, m.source_id) for m in mentions] == [
        ("Joe's Pizza", SourceKind.POST_TITLE, "p1"),
        ("Corner Deli", SourceKind.POST_BODY, "p1"),
        ("Blue Lantern", SourceKind.COMMENT, "c1"),
    ]


def test_extract_from_documents_with_no_documents():
    assert extract_from_documents([], []) == []


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
