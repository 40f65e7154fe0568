from microfeed.utils.text_annotator import (
    Annotations,
    annotate,
    parse_hashtags,
    parse_mentions,
    parse_urls,
    unique,
)


def test_parse_hashtags_lowercases_in_order():
    assert parse_hashtags("Loving #Python and #FastAPI, more #python") == ["python", "fastapi", "python"]


def test_parse_hashtags_stops_at_non_word_characters():
    assert parse_hashtags("#web-dev #c++ #snake_case!") == ["web", "c", "snake_case"]


def test_parse_hashtags_ignores_non_ascii():
    assert parse_hashtags("#café") == ["caf"]


def test_parse_mentions():
    assert parse_mentions("cc @Alice_Dev and @bob, thanks @alice_dev") == ["alice_dev", "bob", "alice_dev"]


def test_parse_mentions_bare_at_sign():
    assert parse_mentions("meet me @ noon") == []


def test_parse_urls():
    content = "Docs at https://example.com/docs?page=1 and http://foo.org/a, see also ftp://nope"
    assert parse_urls(content) == ["https://example.com/docs?page=1", "http://foo.org/a,"]


def test_unique_keeps_first_seen_order():
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_annotate_deduplicates_each_kind():
    annotations = annotate(
        "#Launch day! @carol @Carol #launch https://example.com https://example.com"
    )

    assert annotations == Annotations(
        hashtags=("launch",),
        mentions=("carol",),
        urls=("https://example.com",),
    )


def test_annotate_plain_text():
    assert annotate("Just a quiet day.") == Annotations()
