"""
Post text annotation: hashtags, mentions and links
"""
import re
from dataclasses import dataclass
from typing import Iterable, List, Tuple

# ASCII word characters only, matching the hashtag/handle format in the schema
HASHTAG_PATTERN = re.compile(r"#(\w+)", re.ASCII)
MENTION_PATTERN = re.compile(r"@(\w+)", re.ASCII)
URL_PATTERN = re.compile(r"https?://\S+")


@dataclass(frozen=True)
class Annotations:
    hashtags: Tuple[str, ...] = ()
    mentions: Tuple[str, ...] = ()
    urls: Tuple[str, ...] = ()


def parse_hashtags(content: str) -> List[str]:
    """Every ``#tag`` in order, lowercased, duplicates kept"""
    return [tag.lower() for tag in HASHTAG_PATTERN.findall(content)]


def parse_mentions(content: str) -> List[str]:
    """Every ``@handle`` in order, lowercased, duplicates kept"""
    return [handle.lower() for handle in MENTION_PATTERN.findall(content)]


def parse_urls(content: str) -> List[str]:
    """Every http(s) URL in order, duplicates kept"""
    return URL_PATTERN.findall(content)


def unique(items: Iterable[str]) -> List[str]:
    """Drop duplicates, keeping first-seen order"""
    return list(dict.fromkeys(items))


def annotate(content: str) -> Annotations:
    return Annotations(
        hashtags=tuple(unique(parse_hashtags(content))),
        mentions=tuple(unique(parse_mentions(content))),
        urls=tuple(unique(parse_urls(content))),
    )
